"""
範例資料
twstock/services/seed.py
"""
import logging

from twstock.repositories import Storage
from twstock.schemas import StockCreate

logger = logging.getLogger(__name__)

SAMPLE_STOCKS = [
    {"stock_code": "2330", "stock_name": "台積電", "industry": "半導體", "market_type": "上市"},
    {"stock_code": "2317", "stock_name": "鴻海", "industry": "電子", "market_type": "上市"},
    {"stock_code": "2454", "stock_name": "聯發科", "industry": "半導體", "market_type": "上市"},
    {"stock_code": "2881", "stock_name": "富邦金", "industry": "金融", "market_type": "上市"},
    {"stock_code": "2882", "stock_name": "國泰金", "industry": "金融", "market_type": "上市"},
]


def seed_sample_stocks(storage: Storage) -> int:
    """寫入範例股票 (已存在的代碼略過), 回傳新增筆數"""
    created = 0
    for values in SAMPLE_STOCKS:
        if storage.stocks.get_by_code(values["stock_code"]) is not None:
            continue
        storage.stocks.create(StockCreate(**values))
        created += 1

    if created:
        logger.info(f"Seeded {created} sample stocks")
    return created
