from .common import ErrorDetail, ErrorResponse, FilterOptions, Meta
from .composite import (
    DashboardOverview,
    DashboardSummary,
    InstitutionalSummaryItem,
    MarginSummaryItem,
    StockCompleteData,
    StockStatistics,
)
from .institutional import InstitutionalInvestorCreate, InstitutionalInvestorResponse
from .margin import MarginTradingCreate, MarginTradingResponse
from .stock import StockCreate, StockResponse, StockUpdate
from .trading import DailyTradingDataCreate, DailyTradingDataResponse

__all__ = [
    "Meta",
    "ErrorDetail",
    "ErrorResponse",
    "FilterOptions",
    "StockCreate",
    "StockUpdate",
    "StockResponse",
    "DailyTradingDataCreate",
    "DailyTradingDataResponse",
    "InstitutionalInvestorCreate",
    "InstitutionalInvestorResponse",
    "MarginTradingCreate",
    "MarginTradingResponse",
    "StockCompleteData",
    "InstitutionalSummaryItem",
    "MarginSummaryItem",
    "DashboardSummary",
    "DashboardOverview",
    "StockStatistics",
]
