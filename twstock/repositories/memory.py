"""
記憶體儲存庫

以 list 保存資料, 維持新增順序. 僅適用單一行程, 不支援並行寫入.
"""
import itertools
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple, Type

from twstock.repositories.base import (
    SORTABLE_FIELDS,
    DailyRecordRepository,
    Page,
    R,
    Storage,
    StockQuery,
    StockRepository,
)
from twstock.schemas import (
    DailyTradingDataResponse,
    InstitutionalInvestorResponse,
    MarginTradingResponse,
    StockResponse,
)


class InMemoryStockRepository(StockRepository):
    """記憶體股票儲存庫"""

    def __init__(self):
        self._stocks: List[StockResponse] = []
        self._ids = itertools.count(1)

    def list(self, query: StockQuery) -> Page[StockResponse]:
        stocks = self._stocks

        if query.search:
            term = query.search.lower()
            stocks = [
                s for s in stocks
                if term in s.stock_code.lower() or term in s.stock_name.lower()
            ]
        if query.industry:
            stocks = [s for s in stocks if s.industry == query.industry]
        if query.market_type:
            stocks = [s for s in stocks if s.market_type == query.market_type]

        if query.sort_by:
            attr = SORTABLE_FIELDS[query.sort_by]
            # sorted 為穩定排序, 同值維持新增順序
            stocks = sorted(
                stocks,
                key=lambda s: (getattr(s, attr) is None, getattr(s, attr) or ""),
                reverse=query.sort_order == "desc",
            )

        items = [] if query.before_first_page else stocks[query.offset:query.offset + query.page_size]
        return Page(items=list(items), page=query.page, page_size=query.page_size, total_count=len(stocks))

    def all(self) -> List[StockResponse]:
        return list(self._stocks)

    def get_by_code(self, stock_code: str) -> Optional[StockResponse]:
        return next((s for s in self._stocks if s.stock_code == stock_code), None)

    def get_by_id(self, stock_id: str) -> Optional[StockResponse]:
        return next((s for s in self._stocks if s.id == stock_id), None)

    def ping(self) -> None:
        pass

    def _insert(self, values: Dict[str, Any]) -> StockResponse:
        stock = StockResponse(id=str(next(self._ids)), **values)
        self._stocks.append(stock)
        return stock

    def _apply(self, existing: StockResponse, values: Dict[str, Any]) -> StockResponse:
        index = self._stocks.index(existing)
        updated = existing.model_copy(update=values)
        self._stocks[index] = updated
        return updated

    def _remove(self, existing: StockResponse) -> None:
        self._stocks.remove(existing)


class InMemoryDailyRecordRepository(DailyRecordRepository[R]):
    """記憶體每日資料儲存庫, 以 (stock_id, trade_date) 為鍵"""

    def __init__(self, record_cls: Type[R], kind: str):
        self.record_cls = record_cls
        self.kind = kind
        self._records: Dict[Tuple[str, date], R] = {}
        self._ids = itertools.count(1)

    def list_for_stock(
        self,
        stock_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[R]:
        records = [
            r for (sid, trade_date), r in self._records.items()
            if sid == stock_id
            and (start_date is None or trade_date >= start_date)
            and (end_date is None or trade_date <= end_date)
        ]
        return sorted(records, key=lambda r: r.trade_date, reverse=True)

    def list_by_date(self, trade_date: date) -> List[R]:
        return [r for (_, d), r in self._records.items() if d == trade_date]

    def get(self, stock_id: str, trade_date: date) -> Optional[R]:
        return self._records.get((stock_id, trade_date))

    def latest_for_stock(self, stock_id: str, on_or_before: Optional[date] = None) -> Optional[R]:
        records = self.list_for_stock(stock_id, end_date=on_or_before)
        return records[0] if records else None

    def date_range(self) -> Tuple[Optional[date], Optional[date]]:
        dates = [d for (_, d) in self._records]
        if not dates:
            return None, None
        return min(dates), max(dates)

    def _insert(self, stock_id: str, values: Dict[str, Any], created_at: datetime) -> R:
        record = self.record_cls(
            id=str(next(self._ids)),
            stock_id=stock_id,
            created_at=created_at,
            **values,
        )
        self._records[(stock_id, record.trade_date)] = record
        return record

    def delete_for_stock(self, stock_id: str) -> int:
        keys = [key for key in self._records if key[0] == stock_id]
        for key in keys:
            del self._records[key]
        return len(keys)


def create_memory_storage() -> Storage:
    return Storage(
        stocks=InMemoryStockRepository(),
        trading=InMemoryDailyRecordRepository(DailyTradingDataResponse, "Trading data"),
        institutional=InMemoryDailyRecordRepository(InstitutionalInvestorResponse, "Institutional data"),
        margin=InMemoryDailyRecordRepository(MarginTradingResponse, "Margin data"),
    )
