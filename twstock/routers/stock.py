"""
股票 API 路由
twstock/routers/stock.py
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Response

from twstock.config import Settings
from twstock.dependencies import get_app_settings, get_storage
from twstock.exceptions import ValidationError
from twstock.repositories import Storage, StockQuery
from twstock.responses import page_response, success_response
from twstock.schemas import StockCreate, StockUpdate
from twstock.services import MarketDataService, ReportService, StockService

router = APIRouter(prefix="/stocks", tags=["stocks"])


@router.get("")
async def get_stocks(
        search: Optional[str] = Query(None, description="搜尋股票代碼或名稱 (不分大小寫)"),
        page: int = Query(1, description="頁碼"),
        page_size: Optional[int] = Query(None, alias="pageSize", description="每頁筆數 (預設 20)"),
        industry: Optional[str] = Query(None, description="產業別篩選"),
        market_type: Optional[str] = Query(None, alias="marketType", description="市場別篩選 (上市/上櫃)"),
        sort_by: Optional[str] = Query(None, alias="sortBy", description="排序欄位 (stockCode, stockName 等)"),
        sort_order: str = Query("asc", alias="sortOrder", description="排序方向 (asc, desc)"),
        storage: Storage = Depends(get_storage),
        settings: Settings = Depends(get_app_settings),
):
    """
    股票清單

    - search: 股票代碼或名稱部分比對
    - page / pageSize: 分頁, 超出範圍的頁數回傳空清單
    - 未指定 sortBy 時依新增順序
    """
    if page_size is None:
        page_size = settings.default_page_size
    if page_size > settings.max_page_size:
        raise ValidationError(
            f"pageSize must be <= {settings.max_page_size}",
            [{"field": "pageSize", "message": f"must be <= {settings.max_page_size}"}],
        )

    query = StockQuery(
        search=search,
        industry=industry,
        market_type=market_type,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=page_size,
    )
    return page_response(StockService(storage).list_stocks(query))


@router.get("/{stock_code}")
async def get_stock(stock_code: str, storage: Storage = Depends(get_storage)):
    """特定股票資訊"""
    return success_response(StockService(storage).get_stock(stock_code))


@router.post("", status_code=201)
async def create_stock(data: StockCreate, storage: Storage = Depends(get_storage)):
    """
    新增股票

    - stockCode, stockName 必填
    - stockCode 已存在時回傳 409
    """
    return success_response(StockService(storage).create_stock(data), status_code=201)


@router.put("/{stock_code}")
async def update_stock(
        stock_code: str,
        data: StockUpdate = Body(...),
        storage: Storage = Depends(get_storage),
):
    """
    更新股票資訊 (部分更新)

    只能修改 stockName, industry, marketType
    """
    return success_response(StockService(storage).update_stock(stock_code, data))


@router.delete("/{stock_code}", status_code=204)
async def delete_stock(stock_code: str, storage: Storage = Depends(get_storage)):
    """刪除股票 (一併刪除交易 / 法人 / 融資融券資料)"""
    StockService(storage).delete_stock(stock_code)
    return Response(status_code=204)


@router.get("/{stock_code}/complete")
async def get_stock_complete_data(
        stock_code: str,
        on_date: Optional[date] = Query(None, alias="date", description="基準日 (YYYY-MM-DD, 預設最新)"),
        storage: Storage = Depends(get_storage),
):
    """股票綜合資料 (基本資料 + 交易 + 法人 + 融資融券)"""
    return success_response(StockService(storage).get_complete_data(stock_code, on_date))


@router.get("/{stock_code}/statistics")
async def get_stock_statistics(
        stock_code: str,
        start_date: Optional[date] = Query(None, alias="startDate", description="開始日期 (YYYY-MM-DD)"),
        end_date: Optional[date] = Query(None, alias="endDate", description="結束日期 (YYYY-MM-DD)"),
        storage: Storage = Depends(get_storage),
):
    """期間統計 (平均量價, 最高最低, 法人與融資融券合計)"""
    service = ReportService(MarketDataService(storage))
    return success_response(service.get_statistics(stock_code, start_date, end_date))


@router.get("/{stock_code}/export")
async def export_stock_data(
        stock_code: str,
        fmt: str = Query("csv", alias="format", description="匯出格式 (csv, json)"),
        start_date: Optional[date] = Query(None, alias="startDate", description="開始日期 (YYYY-MM-DD)"),
        end_date: Optional[date] = Query(None, alias="endDate", description="結束日期 (YYYY-MM-DD)"),
        storage: Storage = Depends(get_storage),
):
    """匯出交易資料 (檔案下載)"""
    service = ReportService(MarketDataService(storage))
    content, media_type, filename = service.export_trading_data(stock_code, fmt, start_date, end_date)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
