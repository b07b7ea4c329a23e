from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from twstock.schemas.common import CamelModel, coerce_id, ensure_utc


class StockBase(CamelModel):
    """股票基本 schema"""
    stock_code: str = Field(..., min_length=1, max_length=20, description="股票代碼 (e.g. 2330)")
    stock_name: str = Field(..., min_length=1, max_length=200, description="股票名稱 (e.g. 台積電)")
    industry: Optional[str] = Field(None, max_length=100, description="產業別")
    market_type: Optional[str] = Field(None, max_length=20, description="市場別 (上市/上櫃)")


class StockCreate(StockBase):
    """股票新增 schema"""
    pass


class StockUpdate(CamelModel):
    """
    股票更新 schema

    只允許修改名稱、產業別與市場別; id / stockCode / 時間戳記送出即視為錯誤
    """
    stock_name: Optional[str] = Field(None, min_length=1, max_length=200)
    industry: Optional[str] = Field(None, max_length=100)
    market_type: Optional[str] = Field(None, max_length=20)

    class Config:
        extra = "forbid"

    @field_validator("stock_name")
    @classmethod
    def stock_name_not_null(cls, v):
        if v is None:
            raise ValueError("stockName cannot be null")
        return v


class StockResponse(StockBase):
    """股票回應 schema"""
    id: str
    created_at: datetime
    updated_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def id_as_str(cls, v):
        return coerce_id(v)

    @field_validator("created_at", "updated_at")
    @classmethod
    def timestamps_as_utc(cls, v):
        return ensure_utc(v)
