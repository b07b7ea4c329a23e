from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from twstock.config import Settings
from twstock.database import build_engine, build_session_factory, init_db
from twstock.main import create_app
from twstock.repositories import create_memory_storage, create_sql_storage


def make_settings(**overrides) -> Settings:
    values = {
        "storage_backend": "memory",
        "database_url": "sqlite://",
        "seed_sample_data": False,
        "environment": "development",
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def trading_payload(trade_date: str, close: float = 100.0, **overrides) -> dict:
    payload = {
        "tradeDate": trade_date,
        "openingPrice": close,
        "closingPrice": close,
        "highestPrice": close + 2,
        "lowestPrice": close - 2,
        "tradingVolume": 1_500_000,
        "tradingValue": int(close * 1_500_000),
        "transactionCount": 1200,
    }
    payload.update(overrides)
    return payload


def institutional_payload(trade_date: str, **overrides) -> dict:
    payload = {
        "tradeDate": trade_date,
        "foreignBuy": 5000,
        "foreignSell": 2000,
        "investmentTrustBuy": 1000,
        "investmentTrustSell": 1500,
        "dealerBuy": 300,
        "dealerSell": 100,
    }
    payload.update(overrides)
    return payload


def margin_payload(trade_date: str, **overrides) -> dict:
    payload = {
        "tradeDate": trade_date,
        "marginBuy": 800,
        "marginSell": 500,
        "marginBalance": 20000,
        "marginChange": 300,
        "shortSell": 120,
        "shortCover": 80,
        "shortBalance": 3000,
        "shortChange": 40,
    }
    payload.update(overrides)
    return payload


@pytest.fixture(params=["memory", "database"])
def backend(request):
    return request.param


@pytest.fixture
def client(backend):
    app = create_app(make_settings(storage_backend=backend))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def seeded_client(backend):
    app = create_app(make_settings(storage_backend=backend, seed_sample_data=True))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def storage(backend):
    if backend == "memory":
        yield create_memory_storage()
        return

    engine = build_engine("sqlite://")
    init_db(engine)
    db = build_session_factory(engine)()
    try:
        yield create_sql_storage(db)
    finally:
        db.close()
        engine.dispose()
