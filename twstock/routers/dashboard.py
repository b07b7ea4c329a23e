"""
儀表板 API 路由
twstock/routers/dashboard.py
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from twstock.dependencies import get_storage
from twstock.repositories import Storage
from twstock.responses import success_response
from twstock.services import DashboardService, StockService
from twstock.views.dashboard import render_overview

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard/summary")
async def get_dashboard_summary(
        trade_date: Optional[date] = Query(None, alias="date", description="交易日 (預設最新)"),
        storage: Storage = Depends(get_storage),
):
    """儀表板摘要 (市場概況, 漲跌幅 / 成交量排行, 法人與融資排行)"""
    return success_response(DashboardService(storage).get_summary(trade_date))


@router.get("/dashboard/overview")
async def get_dashboard_overview(
        trade_date: Optional[date] = Query(None, alias="date", description="交易日 (預設最新)"),
        storage: Storage = Depends(get_storage),
):
    """儀表板顯示資料 (已格式化的統計卡片與排行)"""
    summary = DashboardService(storage).get_summary(trade_date)
    return success_response(render_overview(summary))


@router.get("/filters")
async def get_filter_options(storage: Storage = Depends(get_storage)):
    """篩選器選項 (產業別, 市場別, 資料日期範圍)"""
    return success_response(StockService(storage).get_filter_options())
