"""
儲存層測試 (記憶體 / SQLAlchemy 兩種實作跑同一組案例)
"""
from datetime import date

import pytest

from twstock.exceptions import ConflictError, NotFoundError, ValidationError
from twstock.repositories import Page, StockQuery
from twstock.schemas import DailyTradingDataCreate, StockCreate
from twstock.services import seed_sample_stocks

from conftest import trading_payload


def _trading(trade_date: str, close: float = 100.0) -> DailyTradingDataCreate:
    return DailyTradingDataCreate.model_validate(trading_payload(trade_date, close=close))


def test_page_total_pages():
    assert Page(items=[], page=1, page_size=20, total_count=0).total_pages == 0
    assert Page(items=[], page=1, page_size=2, total_count=5).total_pages == 3
    assert Page(items=[], page=1, page_size=5, total_count=5).total_pages == 1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"page_size": 0},
        {"sort_by": "volume"},
        {"sort_order": "up"},
    ],
)
def test_stock_query_rejects_invalid_values(kwargs):
    with pytest.raises(ValidationError):
        StockQuery(**kwargs)


def test_stock_query_offset():
    assert StockQuery(page=3, page_size=10).offset == 20


def test_create_applies_defaults(storage):
    stock = storage.stocks.create(StockCreate(stock_code="9999", stock_name="測試"))

    assert stock.id
    assert stock.industry == ""
    assert stock.market_type == "上市"
    assert stock.created_at == stock.updated_at
    assert stock.created_at.tzinfo is not None


def test_create_conflict(storage):
    storage.stocks.create(StockCreate(stock_code="9999", stock_name="測試"))

    with pytest.raises(ConflictError):
        storage.stocks.create(StockCreate(stock_code="9999", stock_name="重複"))


def test_create_requires_code_and_name(storage):
    with pytest.raises(ValidationError):
        storage.stocks.create(StockCreate.model_construct(stock_code="", stock_name="測試"))


def test_lookup_by_code_and_id(storage):
    created = storage.stocks.create(StockCreate(stock_code="9999", stock_name="測試"))

    assert storage.stocks.get_by_code("9999").id == created.id
    assert storage.stocks.get_by_id(created.id).stock_code == "9999"
    assert storage.stocks.get_by_code("999") is None
    assert storage.stocks.get_by_id("not-an-id") is None


def test_update_rules(storage):
    created = storage.stocks.create(StockCreate(stock_code="9999", stock_name="測試"))

    updated = storage.stocks.update("9999", {"industry": "電子"})
    assert updated.industry == "電子"
    assert updated.stock_name == "測試"
    assert updated.updated_at >= created.updated_at
    assert updated.created_at == created.created_at

    with pytest.raises(ValidationError):
        storage.stocks.update("9999", {"stock_code": "8888"})
    with pytest.raises(NotFoundError):
        storage.stocks.update("0000", {"industry": "電子"})


def test_delete(storage):
    storage.stocks.create(StockCreate(stock_code="9999", stock_name="測試"))

    storage.stocks.delete("9999")

    assert storage.stocks.get_by_code("9999") is None
    with pytest.raises(NotFoundError):
        storage.stocks.delete("9999")


def test_list_paging_and_sorting(storage):
    seed_sample_stocks(storage)

    page = storage.stocks.list(StockQuery(page=2, page_size=2, sort_by="stockCode"))
    assert [s.stock_code for s in page.items] == ["2454", "2881"]
    assert page.total_count == 5
    assert page.total_pages == 3

    beyond = storage.stocks.list(StockQuery(page=9, page_size=2))
    assert beyond.items == []
    assert beyond.total_count == 5

    before = storage.stocks.list(StockQuery(page=0, page_size=2))
    assert before.items == []
    assert (before.total_count, before.total_pages) == (5, 3)

    financial = storage.stocks.list(StockQuery(industry="金融", sort_by="stockCode", sort_order="desc"))
    assert [s.stock_code for s in financial.items] == ["2882", "2881"]

    by_name = storage.stocks.list(StockQuery(search="鴻"))
    assert [s.stock_code for s in by_name.items] == ["2317"]


def test_seed_is_idempotent(storage):
    assert seed_sample_stocks(storage) == 5
    assert seed_sample_stocks(storage) == 0


def test_daily_records(storage):
    stock = storage.stocks.create(StockCreate(stock_code="9999", stock_name="測試"))

    for day, close in (("2026-02-02", 100), ("2026-02-04", 104), ("2026-02-03", 102)):
        storage.trading.create(stock.id, _trading(day, close))

    records = storage.trading.list_for_stock(stock.id)
    assert [r.trade_date for r in records] == [date(2026, 2, 4), date(2026, 2, 3), date(2026, 2, 2)]
    assert all(r.stock_id == stock.id for r in records)

    window = storage.trading.list_for_stock(stock.id, date(2026, 2, 3), date(2026, 2, 3))
    assert [r.closing_price for r in window] == [102]

    latest = storage.trading.latest_for_stock(stock.id, on_or_before=date(2026, 2, 3))
    assert latest.trade_date == date(2026, 2, 3)
    assert storage.trading.latest_for_stock(stock.id, on_or_before=date(2026, 1, 1)) is None

    assert storage.trading.date_range() == (date(2026, 2, 2), date(2026, 2, 4))
    assert storage.trading.get(stock.id, date(2026, 2, 4)).closing_price == 104
    assert len(storage.trading.list_by_date(date(2026, 2, 2))) == 1

    with pytest.raises(ConflictError):
        storage.trading.create(stock.id, _trading("2026-02-02"))

    assert storage.trading.delete_for_stock(stock.id) == 3
    assert storage.trading.list_for_stock(stock.id) == []
    assert storage.trading.date_range() == (None, None)


def test_ping(storage):
    assert storage.stocks.ping() is None
