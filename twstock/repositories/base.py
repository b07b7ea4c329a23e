"""
儲存層抽象介面

服務層只依賴這裡的介面; 記憶體版 (memory.py) 與 SQLAlchemy 版 (sql.py)
各自實作, 由 dependencies.py 依設定注入.
"""
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

from pydantic import BaseModel

from twstock.exceptions import ConflictError, NotFoundError, ValidationError
from twstock.schemas import StockCreate, StockResponse

R = TypeVar("R", bound=BaseModel)

# 可排序欄位: API 參數 (camelCase) -> 屬性名稱
SORTABLE_FIELDS = {
    "stockCode": "stock_code",
    "stockName": "stock_name",
    "industry": "industry",
    "marketType": "market_type",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

# 更新時允許修改的欄位
MUTABLE_STOCK_FIELDS = ("stock_name", "industry", "market_type")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class StockQuery:
    """股票清單查詢條件"""
    search: Optional[str] = None
    industry: Optional[str] = None
    market_type: Optional[str] = None
    sort_by: Optional[str] = None  # SORTABLE_FIELDS 的 key
    sort_order: str = "asc"
    page: int = 1
    page_size: int = 20

    def __post_init__(self):
        if self.page_size < 1:
            raise ValidationError("pageSize must be >= 1", [{"field": "pageSize", "message": "must be >= 1"}])
        if self.sort_by is not None and self.sort_by not in SORTABLE_FIELDS:
            raise ValidationError(
                f"sortBy must be one of {', '.join(SORTABLE_FIELDS)}",
                [{"field": "sortBy", "message": "unsupported sort field"}],
            )
        if self.sort_order not in ("asc", "desc"):
            raise ValidationError(
                "sortOrder must be either 'asc' or 'desc'",
                [{"field": "sortOrder", "message": "must be asc or desc"}],
            )

    @property
    def before_first_page(self) -> bool:
        # page < 1 視為超出範圍, 回傳空清單
        return self.page < 1

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass
class Page(Generic[R]):
    """分頁結果"""
    items: List[R]
    page: int
    page_size: int
    total_count: int
    total_pages: int = field(init=False)

    def __post_init__(self):
        self.total_pages = math.ceil(self.total_count / self.page_size)


class StockRepository(ABC):
    """
    股票資料存取介面

    create / update / delete 的規則 (必填檢查, 代碼唯一, 不存在即 NotFound)
    集中在這裡, 子類別只負責實際讀寫.
    """

    # ---------- READ ---------- #

    @abstractmethod
    def list(self, query: StockQuery) -> Page[StockResponse]:
        """依查詢條件回傳一頁股票; 超出範圍的頁數回傳空清單"""
        raise NotImplementedError

    @abstractmethod
    def all(self) -> List[StockResponse]:
        raise NotImplementedError

    @abstractmethod
    def get_by_code(self, stock_code: str) -> Optional[StockResponse]:
        """完全比對股票代碼, 找不到回傳 None"""
        raise NotImplementedError

    @abstractmethod
    def get_by_id(self, stock_id: str) -> Optional[StockResponse]:
        raise NotImplementedError

    @abstractmethod
    def ping(self) -> None:
        """儲存層連線檢查, 失敗時拋出例外"""
        raise NotImplementedError

    # ---------- WRITE ---------- #

    def create(self, data: StockCreate) -> StockResponse:
        if not data.stock_code or not data.stock_name:
            raise ValidationError("Stock code and name are required")
        if self.get_by_code(data.stock_code) is not None:
            raise ConflictError(f"Stock {data.stock_code} already exists")

        now = utcnow()
        return self._insert(
            {
                "stock_code": data.stock_code,
                "stock_name": data.stock_name,
                "industry": data.industry or "",
                "market_type": data.market_type or "上市",
                "created_at": now,
                "updated_at": now,
            }
        )

    def update(self, stock_code: str, changes: Dict[str, Any]) -> StockResponse:
        existing = self.get_by_code(stock_code)
        if existing is None:
            raise NotFoundError(f"Stock {stock_code} not found")

        protected = sorted(set(changes) - set(MUTABLE_STOCK_FIELDS))
        if protected:
            raise ValidationError(
                f"Fields cannot be updated: {', '.join(protected)}",
                [{"field": name, "message": "field is not updatable"} for name in protected],
            )

        updated_at = max(utcnow(), existing.updated_at)
        return self._apply(existing, {**changes, "updated_at": updated_at})

    def delete(self, stock_code: str) -> StockResponse:
        existing = self.get_by_code(stock_code)
        if existing is None:
            raise NotFoundError(f"Stock {stock_code} not found")
        self._remove(existing)
        return existing

    @abstractmethod
    def _insert(self, values: Dict[str, Any]) -> StockResponse:
        raise NotImplementedError

    @abstractmethod
    def _apply(self, existing: StockResponse, values: Dict[str, Any]) -> StockResponse:
        raise NotImplementedError

    @abstractmethod
    def _remove(self, existing: StockResponse) -> None:
        raise NotImplementedError


class DailyRecordRepository(ABC, Generic[R]):
    """
    每日資料 (交易 / 三大法人 / 融資融券) 存取介面

    同一股票同一交易日最多一筆.
    """

    kind: str = "record"

    @abstractmethod
    def list_for_stock(
        self,
        stock_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[R]:
        """依交易日由新到舊排序"""
        raise NotImplementedError

    @abstractmethod
    def list_by_date(self, trade_date: date) -> List[R]:
        raise NotImplementedError

    @abstractmethod
    def get(self, stock_id: str, trade_date: date) -> Optional[R]:
        raise NotImplementedError

    @abstractmethod
    def latest_for_stock(self, stock_id: str, on_or_before: Optional[date] = None) -> Optional[R]:
        raise NotImplementedError

    @abstractmethod
    def date_range(self) -> Tuple[Optional[date], Optional[date]]:
        """(最早交易日, 最晚交易日)"""
        raise NotImplementedError

    def create(self, stock_id: str, data: BaseModel) -> R:
        trade_date = data.trade_date
        if self.get(stock_id, trade_date) is not None:
            raise ConflictError(
                f"{self.kind} for {trade_date.isoformat()} already exists"
            )
        return self._insert(stock_id, data.model_dump(), utcnow())

    @abstractmethod
    def _insert(self, stock_id: str, values: Dict[str, Any], created_at: datetime) -> R:
        raise NotImplementedError

    @abstractmethod
    def delete_for_stock(self, stock_id: str) -> int:
        """刪除某股票的所有資料, 回傳筆數"""
        raise NotImplementedError


@dataclass
class Storage:
    """一組儲存庫, 以依賴注入方式傳給服務層"""
    stocks: StockRepository
    trading: DailyRecordRepository
    institutional: DailyRecordRepository
    margin: DailyRecordRepository
