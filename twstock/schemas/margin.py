from datetime import date
from typing import Optional

from pydantic import Field

from twstock.schemas.common import CamelModel, StoredRecord


class MarginTradingBase(CamelModel):
    """融資融券 schema (單位: 股, 餘額變化可為負)"""
    trade_date: date = Field(..., description="交易日期 (YYYY-MM-DD)")
    margin_buy: int = Field(..., ge=0, description="融資買進")
    margin_sell: int = Field(..., ge=0, description="融資賣出")
    margin_balance: int = Field(..., ge=0, description="融資餘額")
    margin_change: int = Field(..., description="融資餘額變化")
    short_sell: int = Field(..., ge=0, description="融券賣出")
    short_cover: int = Field(..., ge=0, description="融券買進")
    short_balance: int = Field(..., ge=0, description="融券餘額")
    short_change: int = Field(..., description="融券餘額變化")
    margin_quota: Optional[int] = Field(None, ge=0, description="融資限額")
    short_quota: Optional[int] = Field(None, ge=0, description="融券限額")


class MarginTradingCreate(MarginTradingBase):
    """融資融券新增 schema"""
    pass


class MarginTradingResponse(StoredRecord, MarginTradingBase):
    """融資融券回應 schema"""
    pass
