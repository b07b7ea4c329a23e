"""
股票服務
twstock/services/stock_service.py

股票 CRUD 與綜合查詢. 刪除股票時一併刪除其交易 / 法人 / 融資融券資料.
"""
import logging
from datetime import date
from typing import Optional

from twstock.exceptions import NotFoundError
from twstock.repositories import Page, Storage, StockQuery
from twstock.schemas import (
    FilterOptions,
    StockCompleteData,
    StockCreate,
    StockResponse,
    StockUpdate,
)
from twstock.schemas.common import DateRange

logger = logging.getLogger(__name__)


class StockService:
    """股票服務"""

    def __init__(self, storage: Storage):
        self.storage = storage

    def list_stocks(self, query: StockQuery) -> Page[StockResponse]:
        return self.storage.stocks.list(query)

    def get_stock(self, stock_code: str) -> StockResponse:
        stock = self.storage.stocks.get_by_code(stock_code)
        if stock is None:
            raise NotFoundError(f"Stock {stock_code} not found")
        return stock

    def create_stock(self, data: StockCreate) -> StockResponse:
        stock = self.storage.stocks.create(data)
        logger.info(f"Created stock {stock.stock_code} ({stock.stock_name})")
        return stock

    def update_stock(self, stock_code: str, data: StockUpdate) -> StockResponse:
        changes = data.model_dump(exclude_unset=True)
        stock = self.storage.stocks.update(stock_code, changes)
        logger.info(f"Updated stock {stock_code}: {', '.join(changes) or 'no fields'}")
        return stock

    def delete_stock(self, stock_code: str) -> None:
        """刪除股票 (cascade 刪除所屬每日資料)"""
        stock = self.get_stock(stock_code)

        removed = {
            "trading": self.storage.trading.delete_for_stock(stock.id),
            "institutional": self.storage.institutional.delete_for_stock(stock.id),
            "margin": self.storage.margin.delete_for_stock(stock.id),
        }
        self.storage.stocks.delete(stock_code)

        logger.info(
            f"Deleted stock {stock_code} "
            f"(trading={removed['trading']}, institutional={removed['institutional']}, margin={removed['margin']})"
        )

    def get_complete_data(self, stock_code: str, on_date: Optional[date] = None) -> StockCompleteData:
        """
        股票綜合資料

        每一類資料取指定日期 (含) 以前最新的一筆, 未指定日期則取最新一筆;
        沒有資料則為 None.
        """
        stock = self.get_stock(stock_code)

        return StockCompleteData(
            stock=stock,
            trading_data=self.storage.trading.latest_for_stock(stock.id, on_date),
            institutional=self.storage.institutional.latest_for_stock(stock.id, on_date),
            margin=self.storage.margin.latest_for_stock(stock.id, on_date),
        )

    def get_filter_options(self) -> FilterOptions:
        stocks = self.storage.stocks.all()
        first, last = self.storage.trading.date_range()

        return FilterOptions(
            industries=sorted({s.industry for s in stocks if s.industry}),
            market_types=sorted({s.market_type for s in stocks if s.market_type}),
            date_range=DateRange(
                min=first.isoformat() if first else None,
                max=last.isoformat() if last else None,
            ),
        )
