from datetime import date
from typing import Optional

from pydantic import Field, model_validator

from twstock.schemas.common import CamelModel, StoredRecord


class InstitutionalInvestorCreate(CamelModel):
    """
    三大法人資料新增 schema (單位: 股)

    - 各法人買賣超未提供時以 買進 - 賣出 推算
    - totalNet 未提供時以三者合計推算, 提供時必須等於合計
    """
    trade_date: date = Field(..., description="交易日期 (YYYY-MM-DD)")
    foreign_buy: int = Field(..., ge=0, description="外資買進")
    foreign_sell: int = Field(..., ge=0, description="外資賣出")
    foreign_net: Optional[int] = Field(None, description="外資買賣超")
    investment_trust_buy: int = Field(..., ge=0, description="投信買進")
    investment_trust_sell: int = Field(..., ge=0, description="投信賣出")
    investment_trust_net: Optional[int] = Field(None, description="投信買賣超")
    dealer_buy: int = Field(..., ge=0, description="自營商買進")
    dealer_sell: int = Field(..., ge=0, description="自營商賣出")
    dealer_net: Optional[int] = Field(None, description="自營商買賣超")
    total_net: Optional[int] = Field(None, description="三大法人買賣超合計")

    @model_validator(mode="after")
    def derive_net_totals(self):
        if self.foreign_net is None:
            self.foreign_net = self.foreign_buy - self.foreign_sell
        if self.investment_trust_net is None:
            self.investment_trust_net = self.investment_trust_buy - self.investment_trust_sell
        if self.dealer_net is None:
            self.dealer_net = self.dealer_buy - self.dealer_sell

        expected = self.foreign_net + self.investment_trust_net + self.dealer_net
        if self.total_net is None:
            self.total_net = expected
        elif self.total_net != expected:
            raise ValueError(
                f"totalNet must equal foreignNet + investmentTrustNet + dealerNet ({expected})"
            )
        return self


class InstitutionalInvestorResponse(StoredRecord):
    """三大法人資料回應 schema"""
    trade_date: date
    foreign_buy: int
    foreign_sell: int
    foreign_net: int
    investment_trust_buy: int
    investment_trust_sell: int
    investment_trust_net: int
    dealer_buy: int
    dealer_sell: int
    dealer_net: int
    total_net: int
