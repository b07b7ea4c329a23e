from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """API 欄位一律使用 camelCase"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
        str_strip_whitespace = True
        allow_inf_nan = False


def coerce_id(value: Any) -> Any:
    """資料庫整數主鍵一律以字串對外"""
    if value is None or isinstance(value, str):
        return value
    return str(value)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """資料庫取回的 naive datetime 視為 UTC"""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Meta(CamelModel):
    """回應 meta 資訊"""
    timestamp: datetime
    page: Optional[int] = None
    page_size: Optional[int] = None
    total_count: Optional[int] = None
    total_pages: Optional[int] = None


class ErrorDetail(CamelModel):
    """欄位層級錯誤"""
    field: str
    message: str


class ErrorBody(CamelModel):
    code: str
    message: str
    details: Optional[List[ErrorDetail]] = None


class ErrorResponse(CamelModel):
    """失敗回應格式"""
    success: bool = False
    error: ErrorBody
    meta: Optional[Meta] = None


class DateRange(CamelModel):
    min: Optional[str] = Field(None, description="最早交易日 (YYYY-MM-DD)")
    max: Optional[str] = Field(None, description="最晚交易日 (YYYY-MM-DD)")


class FilterOptions(CamelModel):
    """篩選器選項"""
    industries: List[str]
    market_types: List[str]
    date_range: DateRange


class StoredRecord(CamelModel):
    """每日資料共用欄位 (id, stockId, createdAt)"""
    id: str
    stock_id: str
    created_at: datetime

    @field_validator("id", "stock_id", mode="before")
    @classmethod
    def ids_as_str(cls, v):
        return coerce_id(v)

    @field_validator("created_at")
    @classmethod
    def created_at_as_utc(cls, v):
        return ensure_utc(v)
