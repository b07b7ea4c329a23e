"""
每日資料 API 路由 (交易資料 / 三大法人 / 融資融券)
twstock/routers/market_data.py
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from twstock.dependencies import get_storage
from twstock.repositories import Storage
from twstock.responses import success_response
from twstock.schemas import DailyTradingDataCreate, InstitutionalInvestorCreate, MarginTradingCreate
from twstock.services import MarketDataService

router = APIRouter(tags=["market-data"])


# ==================== 每日交易資料 ====================

@router.get("/stocks/{stock_code}/trading")
async def get_trading_data(
        stock_code: str,
        start_date: Optional[date] = Query(None, alias="startDate", description="開始日期 (YYYY-MM-DD)"),
        end_date: Optional[date] = Query(None, alias="endDate", description="結束日期 (YYYY-MM-DD)"),
        storage: Storage = Depends(get_storage),
):
    """股票交易資料 (交易日由新到舊)"""
    records = MarketDataService(storage).list_trading(stock_code, start_date, end_date)
    return success_response(records, total_count=len(records))


@router.post("/stocks/{stock_code}/trading", status_code=201)
async def create_trading_data(
        stock_code: str,
        data: DailyTradingDataCreate,
        storage: Storage = Depends(get_storage),
):
    """
    新增交易資料

    - 價格與數量不可為負, 最低價 <= 開盤價, 收盤價 <= 最高價
    - 同一股票同一交易日只能有一筆 (409)
    - 未提供漲跌 / 漲跌幅時以前一交易日收盤價推算
    """
    record = MarketDataService(storage).create_trading(stock_code, data)
    return success_response(record, status_code=201)


@router.get("/trading/date/{trade_date}")
async def get_trading_data_by_date(trade_date: date, storage: Storage = Depends(get_storage)):
    """特定日期所有股票交易資料"""
    records = MarketDataService(storage).list_trading_by_date(trade_date)
    return success_response(records, total_count=len(records))


# ==================== 三大法人資料 ====================

@router.get("/stocks/{stock_code}/institutional")
async def get_institutional_data(
        stock_code: str,
        start_date: Optional[date] = Query(None, alias="startDate", description="開始日期 (YYYY-MM-DD)"),
        end_date: Optional[date] = Query(None, alias="endDate", description="結束日期 (YYYY-MM-DD)"),
        storage: Storage = Depends(get_storage),
):
    """股票法人資料"""
    records = MarketDataService(storage).list_institutional(stock_code, start_date, end_date)
    return success_response(records, total_count=len(records))


@router.post("/stocks/{stock_code}/institutional", status_code=201)
async def create_institutional_data(
        stock_code: str,
        data: InstitutionalInvestorCreate,
        storage: Storage = Depends(get_storage),
):
    """
    新增法人資料

    - totalNet 必須等於外資 + 投信 + 自營商買賣超
    """
    record = MarketDataService(storage).create_institutional(stock_code, data)
    return success_response(record, status_code=201)


@router.get("/institutional/date/{trade_date}")
async def get_institutional_data_by_date(trade_date: date, storage: Storage = Depends(get_storage)):
    """特定日期法人資料"""
    records = MarketDataService(storage).list_institutional_by_date(trade_date)
    return success_response(records, total_count=len(records))


@router.get("/institutional/summary")
async def get_institutional_summary(
        trade_date: Optional[date] = Query(None, alias="date", description="交易日 (預設最新)"),
        limit: int = Query(10, ge=1, le=100, description="筆數"),
        storage: Storage = Depends(get_storage),
):
    """法人買賣超排行"""
    items = MarketDataService(storage).institutional_summary(trade_date, limit)
    return success_response(items, total_count=len(items))


# ==================== 融資融券資料 ====================

@router.get("/stocks/{stock_code}/margin")
async def get_margin_data(
        stock_code: str,
        start_date: Optional[date] = Query(None, alias="startDate", description="開始日期 (YYYY-MM-DD)"),
        end_date: Optional[date] = Query(None, alias="endDate", description="結束日期 (YYYY-MM-DD)"),
        storage: Storage = Depends(get_storage),
):
    """股票融資融券資料"""
    records = MarketDataService(storage).list_margin(stock_code, start_date, end_date)
    return success_response(records, total_count=len(records))


@router.post("/stocks/{stock_code}/margin", status_code=201)
async def create_margin_data(
        stock_code: str,
        data: MarginTradingCreate,
        storage: Storage = Depends(get_storage),
):
    """新增融資融券資料"""
    record = MarketDataService(storage).create_margin(stock_code, data)
    return success_response(record, status_code=201)


@router.get("/margin/date/{trade_date}")
async def get_margin_data_by_date(trade_date: date, storage: Storage = Depends(get_storage)):
    """特定日期融資融券資料"""
    records = MarketDataService(storage).list_margin_by_date(trade_date)
    return success_response(records, total_count=len(records))


@router.get("/margin/summary")
async def get_margin_summary(
        trade_date: Optional[date] = Query(None, alias="date", description="交易日 (預設最新)"),
        limit: int = Query(10, ge=1, le=100, description="筆數"),
        storage: Storage = Depends(get_storage),
):
    """融資增減排行"""
    items = MarketDataService(storage).margin_summary(trade_date, limit)
    return success_response(items, total_count=len(items))
