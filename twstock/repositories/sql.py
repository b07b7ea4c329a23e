"""
SQLAlchemy 儲存庫

每個請求一個 Session; 唯一鍵 (stock_code, (stock_id, trade_date)) 由資料庫
約束保證, IntegrityError 轉為 ConflictError.
"""
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple, Type

from sqlalchemy import asc, desc, func, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from twstock.exceptions import ConflictError
from twstock.models import DailyTradingData, InstitutionalInvestor, MarginTrading, Stock
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


def _naive_utc(value: datetime) -> datetime:
    # DateTime 欄位一律存 naive UTC
    return value.replace(tzinfo=None) if value.tzinfo else value


def _as_int_id(value: str) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class SqlStockRepository(StockRepository):
    """資料庫股票儲存庫"""

    def __init__(self, db: Session):
        self.db = db

    def list(self, query: StockQuery) -> Page[StockResponse]:
        q = self.db.query(Stock)

        if query.search:
            q = q.filter(
                Stock.stock_code.icontains(query.search, autoescape=True)
                | Stock.stock_name.icontains(query.search, autoescape=True)
            )
        if query.industry:
            q = q.filter(Stock.industry == query.industry)
        if query.market_type:
            q = q.filter(Stock.market_type == query.market_type)

        total = q.count()

        if query.sort_by:
            column = getattr(Stock, SORTABLE_FIELDS[query.sort_by])
            direction = desc if query.sort_order == "desc" else asc
            q = q.order_by(direction(column), Stock.id.asc())
        else:
            # 新增順序
            q = q.order_by(Stock.id.asc())

        rows = [] if query.before_first_page else q.offset(query.offset).limit(query.page_size).all()
        return Page(
            items=[StockResponse.model_validate(row) for row in rows],
            page=query.page,
            page_size=query.page_size,
            total_count=total,
        )

    def all(self) -> List[StockResponse]:
        rows = self.db.query(Stock).order_by(Stock.id.asc()).all()
        return [StockResponse.model_validate(row) for row in rows]

    def get_by_code(self, stock_code: str) -> Optional[StockResponse]:
        row = self._row_by_code(stock_code)
        return StockResponse.model_validate(row) if row else None

    def get_by_id(self, stock_id: str) -> Optional[StockResponse]:
        pk = _as_int_id(stock_id)
        if pk is None:
            return None
        row = self.db.get(Stock, pk)
        return StockResponse.model_validate(row) if row else None

    def ping(self) -> None:
        self.db.execute(text("SELECT 1"))

    def _row_by_code(self, stock_code: str) -> Optional[Stock]:
        return self.db.query(Stock).filter(Stock.stock_code == stock_code).first()

    def _insert(self, values: Dict[str, Any]) -> StockResponse:
        row = Stock(
            **{
                **values,
                "created_at": _naive_utc(values["created_at"]),
                "updated_at": _naive_utc(values["updated_at"]),
            }
        )
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"Stock {values['stock_code']} already exists")
        self.db.refresh(row)
        return StockResponse.model_validate(row)

    def _apply(self, existing: StockResponse, values: Dict[str, Any]) -> StockResponse:
        row = self._row_by_code(existing.stock_code)
        for key, value in values.items():
            if isinstance(value, datetime):
                value = _naive_utc(value)
            setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        return StockResponse.model_validate(row)

    def _remove(self, existing: StockResponse) -> None:
        row = self._row_by_code(existing.stock_code)
        self.db.delete(row)
        self.db.commit()


class SqlDailyRecordRepository(DailyRecordRepository[R]):
    """資料庫每日資料儲存庫"""

    def __init__(self, db: Session, model: Type, record_cls: Type[R], kind: str):
        self.db = db
        self.model = model
        self.record_cls = record_cls
        self.kind = kind

    def _query_for_stock(self, stock_id: str):
        return self.db.query(self.model).filter(self.model.stock_id == _as_int_id(stock_id))

    def list_for_stock(
        self,
        stock_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[R]:
        q = self._query_for_stock(stock_id)
        if start_date:
            q = q.filter(self.model.trade_date >= start_date)
        if end_date:
            q = q.filter(self.model.trade_date <= end_date)

        rows = q.order_by(self.model.trade_date.desc()).all()
        return [self.record_cls.model_validate(row) for row in rows]

    def list_by_date(self, trade_date: date) -> List[R]:
        rows = (
            self.db.query(self.model)
            .filter(self.model.trade_date == trade_date)
            .order_by(self.model.stock_id.asc())
            .all()
        )
        return [self.record_cls.model_validate(row) for row in rows]

    def get(self, stock_id: str, trade_date: date) -> Optional[R]:
        row = self._query_for_stock(stock_id).filter(self.model.trade_date == trade_date).first()
        return self.record_cls.model_validate(row) if row else None

    def latest_for_stock(self, stock_id: str, on_or_before: Optional[date] = None) -> Optional[R]:
        q = self._query_for_stock(stock_id)
        if on_or_before:
            q = q.filter(self.model.trade_date <= on_or_before)
        row = q.order_by(self.model.trade_date.desc()).first()
        return self.record_cls.model_validate(row) if row else None

    def date_range(self) -> Tuple[Optional[date], Optional[date]]:
        first, last = self.db.query(
            func.min(self.model.trade_date),
            func.max(self.model.trade_date),
        ).one()
        return first, last

    def _insert(self, stock_id: str, values: Dict[str, Any], created_at: datetime) -> R:
        row = self.model(stock_id=_as_int_id(stock_id), created_at=_naive_utc(created_at), **values)
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(
                f"{self.kind} for {values['trade_date'].isoformat()} already exists"
            )
        self.db.refresh(row)
        return self.record_cls.model_validate(row)

    def delete_for_stock(self, stock_id: str) -> int:
        deleted = self._query_for_stock(stock_id).delete(synchronize_session=False)
        self.db.commit()
        return deleted


def create_sql_storage(db: Session) -> Storage:
    return Storage(
        stocks=SqlStockRepository(db),
        trading=SqlDailyRecordRepository(db, DailyTradingData, DailyTradingDataResponse, "Trading data"),
        institutional=SqlDailyRecordRepository(
            db, InstitutionalInvestor, InstitutionalInvestorResponse, "Institutional data"
        ),
        margin=SqlDailyRecordRepository(db, MarginTrading, MarginTradingResponse, "Margin data"),
    )
