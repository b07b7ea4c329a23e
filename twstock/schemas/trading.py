from datetime import date
from typing import Optional

from pydantic import Field, model_validator

from twstock.schemas.common import CamelModel, StoredRecord


class DailyTradingDataBase(CamelModel):
    """每日交易資料 schema"""
    trade_date: date = Field(..., description="交易日期 (YYYY-MM-DD)")
    opening_price: float = Field(..., ge=0, description="開盤價")
    closing_price: float = Field(..., ge=0, description="收盤價")
    highest_price: float = Field(..., ge=0, description="最高價")
    lowest_price: float = Field(..., ge=0, description="最低價")
    trading_volume: int = Field(..., ge=0, description="成交量 (股)")
    trading_value: int = Field(..., ge=0, description="成交金額 (元)")
    transaction_count: int = Field(..., ge=0, description="成交筆數")
    change: Optional[float] = Field(None, description="漲跌")
    change_percent: Optional[float] = Field(None, description="漲跌幅 (比率)")


class DailyTradingDataCreate(DailyTradingDataBase):
    """交易資料新增 schema"""

    @model_validator(mode="after")
    def check_price_range(self):
        # 最低價 <= 開盤價, 收盤價 <= 最高價
        if self.lowest_price > self.highest_price:
            raise ValueError("lowestPrice must not exceed highestPrice")
        for name, price in (("openingPrice", self.opening_price), ("closingPrice", self.closing_price)):
            if not self.lowest_price <= price <= self.highest_price:
                raise ValueError(f"{name} must be between lowestPrice and highestPrice")
        return self


class DailyTradingDataResponse(StoredRecord, DailyTradingDataBase):
    """交易資料回應 schema"""
    pass
