from .base import DailyRecordRepository, Page, Storage, StockQuery, StockRepository
from .memory import create_memory_storage
from .sql import create_sql_storage

__all__ = [
    "Storage",
    "StockQuery",
    "Page",
    "StockRepository",
    "DailyRecordRepository",
    "create_memory_storage",
    "create_sql_storage",
]
