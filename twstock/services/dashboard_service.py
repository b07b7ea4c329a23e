"""
儀表板服務
twstock/services/dashboard_service.py

指定交易日 (預設最新交易日) 的市場概況與各項排行.
"""
from datetime import date
from typing import Dict, List, Optional

import pandas as pd

from twstock.repositories import Storage
from twstock.schemas import DashboardSummary, StockCompleteData, StockResponse
from twstock.schemas.composite import InstitutionalRankItem, MarginRankItem, MarketOverview

TOP_N = 5


class DashboardService:
    """儀表板摘要"""

    def __init__(self, storage: Storage):
        self.storage = storage

    def get_summary(self, trade_date: Optional[date] = None) -> DashboardSummary:
        """
        儀表板摘要

        Args:
            trade_date: 交易日 (未指定則取最新交易日)

        Returns:
            市場概況, 漲幅 / 跌幅 / 成交量排行, 法人與融資排行
        """
        stocks = {s.id: s for s in self.storage.stocks.all()}
        trade_date = trade_date or self.storage.trading.date_range()[1]

        if trade_date is None:
            return self._empty_summary(len(stocks), None)

        trading = [r for r in self.storage.trading.list_by_date(trade_date) if r.stock_id in stocks]
        if not trading:
            summary = self._empty_summary(len(stocks), trade_date)
        else:
            df = pd.DataFrame([r.model_dump() for r in trading]).set_index("id", drop=False)
            records = {r.id: r for r in trading}

            # 漲跌以漲跌值判斷, 無漲跌值視為平盤
            direction = df["change"].astype(float).fillna(0.0)
            overview = MarketOverview(
                total_stocks=len(stocks),
                trading_volume=int(df["trading_volume"].sum()),
                trading_value=int(df["trading_value"].sum()),
                advancers=int((direction > 0).sum()),
                decliners=int((direction < 0).sum()),
                unchanged=int((direction == 0).sum()),
            )

            pct = df["change_percent"].astype(float)
            gainers = df[pct > 0].assign(pct=pct).nlargest(TOP_N, "pct")
            losers = df[pct < 0].assign(pct=pct).nsmallest(TOP_N, "pct")
            volume = df.nlargest(TOP_N, "trading_volume")

            summary = DashboardSummary(
                trade_date=trade_date.isoformat(),
                market_overview=overview,
                top_gainers=self._complete(gainers["id"], records, stocks, trade_date),
                top_losers=self._complete(losers["id"], records, stocks, trade_date),
                top_volume=self._complete(volume["id"], records, stocks, trade_date),
                institutional_top=[],
                margin_top=[],
            )

        summary.institutional_top = self._institutional_top(trade_date, stocks)
        summary.margin_top = self._margin_top(trade_date, stocks)
        return summary

    def _empty_summary(self, total_stocks: int, trade_date: Optional[date]) -> DashboardSummary:
        return DashboardSummary(
            trade_date=trade_date.isoformat() if trade_date else None,
            market_overview=MarketOverview(
                total_stocks=total_stocks,
                trading_volume=0,
                trading_value=0,
                advancers=0,
                decliners=0,
                unchanged=0,
            ),
            top_gainers=[],
            top_losers=[],
            top_volume=[],
            institutional_top=[],
            margin_top=[],
        )

    def _complete(
            self,
            record_ids: pd.Series,
            records: Dict,
            stocks: Dict[str, StockResponse],
            trade_date: date,
    ) -> List[StockCompleteData]:
        result = []
        for record_id in record_ids:
            record = records[record_id]
            result.append(
                StockCompleteData(
                    stock=stocks[record.stock_id],
                    trading_data=record,
                    institutional=self.storage.institutional.get(record.stock_id, trade_date),
                    margin=self.storage.margin.get(record.stock_id, trade_date),
                )
            )
        return result

    def _institutional_top(self, trade_date: date, stocks: Dict[str, StockResponse]) -> List[InstitutionalRankItem]:
        records = [r for r in self.storage.institutional.list_by_date(trade_date) if r.stock_id in stocks]
        records.sort(key=lambda r: r.total_net, reverse=True)
        return [
            InstitutionalRankItem(stock=stocks[r.stock_id], net_buying=r.total_net)
            for r in records[:TOP_N]
        ]

    def _margin_top(self, trade_date: date, stocks: Dict[str, StockResponse]) -> List[MarginRankItem]:
        records = [r for r in self.storage.margin.list_by_date(trade_date) if r.stock_id in stocks]
        records.sort(key=lambda r: r.margin_change, reverse=True)
        return [
            MarginRankItem(stock=stocks[r.stock_id], margin_change=r.margin_change, short_change=r.short_change)
            for r in records[:TOP_N]
        ]
