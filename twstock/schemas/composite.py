from typing import List, Optional

from twstock.schemas.common import CamelModel
from twstock.schemas.institutional import InstitutionalInvestorResponse
from twstock.schemas.margin import MarginTradingResponse
from twstock.schemas.stock import StockResponse
from twstock.schemas.trading import DailyTradingDataResponse


class StockCompleteData(CamelModel):
    """股票綜合資料 (唯讀組合, 不落地)"""
    stock: StockResponse
    trading_data: Optional[DailyTradingDataResponse] = None
    institutional: Optional[InstitutionalInvestorResponse] = None
    margin: Optional[MarginTradingResponse] = None


class InstitutionalSummaryItem(CamelModel):
    stock: StockResponse
    institutional: InstitutionalInvestorResponse


class MarginSummaryItem(CamelModel):
    stock: StockResponse
    margin: MarginTradingResponse


class MarketOverview(CamelModel):
    """市場概況"""
    total_stocks: int
    trading_volume: int
    trading_value: int
    advancers: int  # 上漲家數
    decliners: int  # 下跌家數
    unchanged: int  # 平盤家數


class InstitutionalRankItem(CamelModel):
    stock: StockResponse
    net_buying: int


class MarginRankItem(CamelModel):
    stock: StockResponse
    margin_change: int
    short_change: int


class DashboardSummary(CamelModel):
    """儀表板摘要"""
    trade_date: Optional[str] = None
    market_overview: MarketOverview
    top_gainers: List[StockCompleteData]
    top_losers: List[StockCompleteData]
    top_volume: List[StockCompleteData]
    institutional_top: List[InstitutionalRankItem]
    margin_top: List[MarginRankItem]


class StockStatistics(CamelModel):
    """期間統計"""
    stock_code: str
    period: str
    trading_days: int
    avg_volume: Optional[float] = None
    avg_price: Optional[float] = None
    highest_price: Optional[float] = None
    lowest_price: Optional[float] = None
    price_change: Optional[float] = None
    price_change_percent: Optional[float] = None
    total_institutional_net: int = 0
    total_margin_change: int = 0
    total_short_change: int = 0


class StatCard(CamelModel):
    """儀表板統計卡片 (已格式化)"""
    title: str
    icon: str
    value: str
    caption: str
    tone: str = "neutral"


class RankingRow(CamelModel):
    """排行列表列 (已格式化)"""
    rank: int
    stock_code: str
    stock_name: str
    value: str
    change: str
    tone: str


class DashboardOverview(CamelModel):
    trade_date: str
    cards: List[StatCard]
    top_gainers: List[RankingRow]
    top_losers: List[RankingRow]
    top_volume: List[RankingRow]
    institutional_top: List[RankingRow]
    margin_top: List[RankingRow]
