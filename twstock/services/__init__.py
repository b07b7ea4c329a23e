from .dashboard_service import DashboardService
from .market_data_service import MarketDataService
from .report_service import ReportService
from .seed import seed_sample_stocks
from .stock_service import StockService

__all__ = ["StockService", "MarketDataService", "DashboardService", "ReportService", "seed_sample_stocks"]
