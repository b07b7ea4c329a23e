"""
每日資料服務
twstock/services/market_data_service.py

交易資料, 三大法人, 融資融券的查詢 / 新增與排行.
"""
import logging
from datetime import date, timedelta
from typing import List, Optional

from twstock.exceptions import NotFoundError, ValidationError
from twstock.repositories import DailyRecordRepository, Storage
from twstock.schemas import (
    DailyTradingDataCreate,
    DailyTradingDataResponse,
    InstitutionalInvestorCreate,
    InstitutionalInvestorResponse,
    InstitutionalSummaryItem,
    MarginSummaryItem,
    MarginTradingCreate,
    MarginTradingResponse,
    StockResponse,
)

logger = logging.getLogger(__name__)


class MarketDataService:
    """每日資料服務"""

    def __init__(self, storage: Storage):
        self.storage = storage

    def _require_stock(self, stock_code: str) -> StockResponse:
        stock = self.storage.stocks.get_by_code(stock_code)
        if stock is None:
            raise NotFoundError(f"Stock {stock_code} not found")
        return stock

    def _list_for_stock(
            self,
            repo: DailyRecordRepository,
            stock_code: str,
            start_date: Optional[date],
            end_date: Optional[date],
    ) -> list:
        if start_date and end_date and start_date > end_date:
            raise ValidationError(
                "startDate must not be after endDate",
                [{"field": "startDate", "message": "must not be after endDate"}],
            )

        stock = self._require_stock(stock_code)
        return repo.list_for_stock(stock.id, start_date, end_date)

    # ==================== 每日交易資料 ====================

    def list_trading(
            self,
            stock_code: str,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
    ) -> List[DailyTradingDataResponse]:
        return self._list_for_stock(self.storage.trading, stock_code, start_date, end_date)

    def create_trading(self, stock_code: str, data: DailyTradingDataCreate) -> DailyTradingDataResponse:
        """
        新增交易資料

        漲跌 / 漲跌幅未提供時, 以前一交易日收盤價推算
        """
        stock = self._require_stock(stock_code)

        if data.change is None or data.change_percent is None:
            previous = self.storage.trading.latest_for_stock(
                stock.id, on_or_before=data.trade_date - timedelta(days=1)
            )
            if previous and previous.closing_price:
                change = data.change
                if change is None:
                    change = round(data.closing_price - previous.closing_price, 4)
                change_percent = data.change_percent
                if change_percent is None:
                    change_percent = round(change / previous.closing_price, 6)
                data = data.model_copy(update={"change": change, "change_percent": change_percent})

        record = self.storage.trading.create(stock.id, data)
        logger.info(f"Created trading data {stock_code} {record.trade_date}")
        return record

    # ==================== 三大法人資料 ====================

    def list_institutional(
            self,
            stock_code: str,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
    ) -> List[InstitutionalInvestorResponse]:
        return self._list_for_stock(self.storage.institutional, stock_code, start_date, end_date)

    def create_institutional(
            self,
            stock_code: str,
            data: InstitutionalInvestorCreate,
    ) -> InstitutionalInvestorResponse:
        stock = self._require_stock(stock_code)
        record = self.storage.institutional.create(stock.id, data)
        logger.info(f"Created institutional data {stock_code} {record.trade_date} (totalNet={record.total_net})")
        return record

    # ==================== 融資融券資料 ====================

    def list_margin(
            self,
            stock_code: str,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
    ) -> List[MarginTradingResponse]:
        return self._list_for_stock(self.storage.margin, stock_code, start_date, end_date)

    def create_margin(self, stock_code: str, data: MarginTradingCreate) -> MarginTradingResponse:
        stock = self._require_stock(stock_code)
        record = self.storage.margin.create(stock.id, data)
        logger.info(f"Created margin data {stock_code} {record.trade_date}")
        return record

    # ==================== 依日期查詢 / 排行 ====================

    def list_trading_by_date(self, trade_date: date) -> List[DailyTradingDataResponse]:
        return self.storage.trading.list_by_date(trade_date)

    def list_institutional_by_date(self, trade_date: date) -> List[InstitutionalInvestorResponse]:
        return self.storage.institutional.list_by_date(trade_date)

    def list_margin_by_date(self, trade_date: date) -> List[MarginTradingResponse]:
        return self.storage.margin.list_by_date(trade_date)

    def institutional_summary(
            self,
            trade_date: Optional[date] = None,
            limit: int = 10,
    ) -> List[InstitutionalSummaryItem]:
        """法人買賣超排行 (totalNet 由大到小), 未指定日期取最新交易日"""
        trade_date = trade_date or self.storage.institutional.date_range()[1]
        if trade_date is None:
            return []

        records = sorted(
            self.storage.institutional.list_by_date(trade_date),
            key=lambda r: r.total_net,
            reverse=True,
        )
        return [
            InstitutionalSummaryItem(stock=stock, institutional=record)
            for stock, record in self._join_stocks(records)[:limit]
        ]

    def margin_summary(
            self,
            trade_date: Optional[date] = None,
            limit: int = 10,
    ) -> List[MarginSummaryItem]:
        """融資增減排行 (marginChange 由大到小), 未指定日期取最新交易日"""
        trade_date = trade_date or self.storage.margin.date_range()[1]
        if trade_date is None:
            return []

        records = sorted(
            self.storage.margin.list_by_date(trade_date),
            key=lambda r: r.margin_change,
            reverse=True,
        )
        return [
            MarginSummaryItem(stock=stock, margin=record)
            for stock, record in self._join_stocks(records)[:limit]
        ]

    def _join_stocks(self, records: list) -> list:
        stocks = {s.id: s for s in self.storage.stocks.all()}
        return [(stocks[r.stock_id], r) for r in records if r.stock_id in stocks]
