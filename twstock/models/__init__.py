from .institutional import InstitutionalInvestor
from .margin import MarginTrading
from .stock import Stock
from .trading import DailyTradingData

__all__ = ["Stock", "DailyTradingData", "InstitutionalInvestor", "MarginTrading"]
