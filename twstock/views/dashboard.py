"""
儀表板呈現

把 DashboardSummary 轉成前端直接顯示的統計卡片與排行列表 (字串皆已格式化).
"""
from typing import List

from twstock.schemas import DashboardOverview, DashboardSummary, StockCompleteData
from twstock.schemas.composite import RankingRow, StatCard
from twstock.utils.formatters import (
    PLACEHOLDER,
    format_change,
    format_change_percent,
    format_date,
    format_large_number,
    format_number,
    format_trading_value,
    format_volume,
)


def render_stat_cards(summary: DashboardSummary) -> List[StatCard]:
    overview = summary.market_overview

    if overview.decliners > 0:
        ratio = overview.advancers / overview.decliners
        ratio_text = f"{ratio:.2f}"
        ratio_tone = "positive" if ratio > 1 else "negative" if ratio < 1 else "neutral"
    else:
        ratio_text = PLACEHOLDER
        ratio_tone = "neutral"

    return [
        StatCard(
            title="上市股票數",
            icon="📊",
            value=format_number(overview.total_stocks),
            caption="總計上市櫃股票",
        ),
        StatCard(
            title="成交量",
            icon="📈",
            value=format_large_number(overview.trading_volume, 0),
            caption="股",
        ),
        StatCard(
            title="成交金額",
            icon="💰",
            value=format_trading_value(overview.trading_value),
            caption="新台幣",
        ),
        StatCard(
            title="漲跌比",
            icon="⚖️",
            value=ratio_text,
            caption=f"↑ {overview.advancers} / ↓ {overview.decliners} / - {overview.unchanged}",
            tone=ratio_tone,
        ),
    ]


def render_price_ranking(items: List[StockCompleteData]) -> List[RankingRow]:
    """漲跌幅排行: 收盤價 + 漲跌幅"""
    rows = []
    for rank, item in enumerate(items, start=1):
        trading = item.trading_data
        change = format_change_percent(trading.change_percent if trading else None)
        rows.append(
            RankingRow(
                rank=rank,
                stock_code=item.stock.stock_code,
                stock_name=item.stock.stock_name,
                value=f"{trading.closing_price:.2f}" if trading else PLACEHOLDER,
                change=change.text,
                tone=change.tone,
            )
        )
    return rows


def render_volume_ranking(items: List[StockCompleteData]) -> List[RankingRow]:
    """成交量排行: 張數 + 漲跌幅"""
    rows = []
    for rank, item in enumerate(items, start=1):
        trading = item.trading_data
        change = format_change_percent(trading.change_percent if trading else None)
        rows.append(
            RankingRow(
                rank=rank,
                stock_code=item.stock.stock_code,
                stock_name=item.stock.stock_name,
                value=format_volume(trading.trading_volume if trading else None),
                change=change.text,
                tone=change.tone,
            )
        )
    return rows


def render_overview(summary: DashboardSummary) -> DashboardOverview:
    institutional_rows = []
    for rank, item in enumerate(summary.institutional_top, start=1):
        net = format_change(item.net_buying, 0)
        institutional_rows.append(
            RankingRow(
                rank=rank,
                stock_code=item.stock.stock_code,
                stock_name=item.stock.stock_name,
                value=format_volume(abs(item.net_buying)),
                change=net.text,
                tone=net.tone,
            )
        )

    margin_rows = []
    for rank, item in enumerate(summary.margin_top, start=1):
        margin = format_change(item.margin_change, 0)
        margin_rows.append(
            RankingRow(
                rank=rank,
                stock_code=item.stock.stock_code,
                stock_name=item.stock.stock_name,
                value=f"融券 {format_change(item.short_change, 0).text}",
                change=margin.text,
                tone=margin.tone,
            )
        )

    return DashboardOverview(
        trade_date=format_date(summary.trade_date),
        cards=render_stat_cards(summary),
        top_gainers=render_price_ranking(summary.top_gainers),
        top_losers=render_price_ranking(summary.top_losers),
        top_volume=render_volume_ranking(summary.top_volume),
        institutional_top=institutional_rows,
        margin_top=margin_rows,
    )
