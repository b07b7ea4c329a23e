"""
每日資料 API 測試 (交易資料 / 三大法人 / 融資融券)
"""
import json

import pytest

from conftest import institutional_payload, margin_payload, trading_payload

API = "/api/v1"


@pytest.fixture
def tsmc(client):
    client.post(f"{API}/stocks", json={"stockCode": "2330", "stockName": "台積電", "industry": "半導體"})
    return client


def test_trading_create_and_list(tsmc):
    response = tsmc.post(f"{API}/stocks/2330/trading", json=trading_payload("2026-02-02", close=100))

    assert response.status_code == 201
    record = response.json()["data"]
    assert record["id"]
    assert record["stockId"]
    assert record["tradeDate"] == "2026-02-02"
    assert record["closingPrice"] == 100
    assert record["change"] is None

    tsmc.post(f"{API}/stocks/2330/trading", json=trading_payload("2026-02-03", close=105))
    listed = tsmc.get(f"{API}/stocks/2330/trading").json()

    assert [r["tradeDate"] for r in listed["data"]] == ["2026-02-03", "2026-02-02"]
    assert listed["meta"]["totalCount"] == 2


def test_trading_change_derived_from_previous_close(tsmc):
    tsmc.post(f"{API}/stocks/2330/trading", json=trading_payload("2026-02-02", close=100))

    record = tsmc.post(f"{API}/stocks/2330/trading", json=trading_payload("2026-02-03", close=105)).json()["data"]

    assert record["change"] == pytest.approx(5.0)
    assert record["changePercent"] == pytest.approx(0.05)


def test_trading_explicit_change_kept(tsmc):
    tsmc.post(f"{API}/stocks/2330/trading", json=trading_payload("2026-02-02", close=100))

    payload = trading_payload("2026-02-03", close=105, change=4.5, changePercent=0.045)
    record = tsmc.post(f"{API}/stocks/2330/trading", json=payload).json()["data"]

    assert record["change"] == 4.5
    assert record["changePercent"] == 0.045


def test_trading_date_range_filter(tsmc):
    for day in ("2026-02-02", "2026-02-03", "2026-02-04"):
        tsmc.post(f"{API}/stocks/2330/trading", json=trading_payload(day))

    response = tsmc.get(
        f"{API}/stocks/2330/trading", params={"startDate": "2026-02-03", "endDate": "2026-02-04"}
    )
    assert [r["tradeDate"] for r in response.json()["data"]] == ["2026-02-04", "2026-02-03"]

    invalid = tsmc.get(
        f"{API}/stocks/2330/trading", params={"startDate": "2026-02-05", "endDate": "2026-02-01"}
    )
    assert invalid.status_code == 400


def test_trading_duplicate_date_conflict(tsmc):
    assert tsmc.post(f"{API}/stocks/2330/trading", json=trading_payload("2026-02-02")).status_code == 201

    response = tsmc.post(f"{API}/stocks/2330/trading", json=trading_payload("2026-02-02", close=110))
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"


@pytest.mark.parametrize(
    "overrides",
    [
        {"lowestPrice": 101},  # 最低價高於開盤價
        {"highestPrice": 99},  # 最高價低於收盤價
        {"closingPrice": 120},
        {"tradingVolume": -1},
        {"openingPrice": -5},
        {"tradeDate": "2026-02-30"},
        {"tradeDate": "yesterday"},
    ],
)
def test_trading_validation(tsmc, overrides):
    response = tsmc.post(f"{API}/stocks/2330/trading", json=trading_payload("2026-02-02", close=100, **overrides))

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"]


def test_unknown_stock_market_data(client):
    for kind in ("trading", "institutional", "margin"):
        assert client.get(f"{API}/stocks/0000/{kind}").status_code == 404

    response = client.post(f"{API}/stocks/0000/trading", json=trading_payload("2026-02-02"))
    assert response.status_code == 404


def test_institutional_nets_derived(tsmc):
    response = tsmc.post(f"{API}/stocks/2330/institutional", json=institutional_payload("2026-02-02"))

    assert response.status_code == 201
    record = response.json()["data"]
    assert record["foreignNet"] == 3000
    assert record["investmentTrustNet"] == -500
    assert record["dealerNet"] == 200
    assert record["totalNet"] == 2700


def test_institutional_total_net_must_match(tsmc):
    ok = institutional_payload("2026-02-02", foreignNet=3000, investmentTrustNet=-500, dealerNet=200, totalNet=2700)
    assert tsmc.post(f"{API}/stocks/2330/institutional", json=ok).status_code == 201

    bad = institutional_payload("2026-02-03", totalNet=9999)
    response = tsmc.post(f"{API}/stocks/2330/institutional", json=bad)
    assert response.status_code == 400
    assert "totalNet" in response.json()["error"]["details"][0]["message"]


def test_institutional_duplicate_and_negative(tsmc):
    tsmc.post(f"{API}/stocks/2330/institutional", json=institutional_payload("2026-02-02"))

    assert tsmc.post(
        f"{API}/stocks/2330/institutional", json=institutional_payload("2026-02-02")
    ).status_code == 409
    assert tsmc.post(
        f"{API}/stocks/2330/institutional", json=institutional_payload("2026-02-03", foreignBuy=-1)
    ).status_code == 400


def test_margin_create_and_list(tsmc):
    response = tsmc.post(f"{API}/stocks/2330/margin", json=margin_payload("2026-02-02", marginChange=-300))

    assert response.status_code == 201
    record = response.json()["data"]
    assert record["marginChange"] == -300
    assert record["marginQuota"] is None

    listed = tsmc.get(f"{API}/stocks/2330/margin").json()["data"]
    assert len(listed) == 1

    assert tsmc.post(f"{API}/stocks/2330/margin", json=margin_payload("2026-02-02")).status_code == 409
    assert tsmc.post(
        f"{API}/stocks/2330/margin", json=margin_payload("2026-02-03", shortBalance=-1)
    ).status_code == 400


def test_list_by_date(tsmc):
    tsmc.post(f"{API}/stocks", json={"stockCode": "2317", "stockName": "鴻海"})
    tsmc.post(f"{API}/stocks/2330/trading", json=trading_payload("2026-02-02"))
    tsmc.post(f"{API}/stocks/2317/trading", json=trading_payload("2026-02-02", close=150))
    tsmc.post(f"{API}/stocks/2317/trading", json=trading_payload("2026-02-03", close=151))

    response = tsmc.get(f"{API}/trading/date/2026-02-02")
    assert response.status_code == 200
    assert len(response.json()["data"]) == 2

    assert tsmc.get(f"{API}/institutional/date/2026-02-02").json()["data"] == []
    assert tsmc.get(f"{API}/margin/date/2026-02-02").json()["data"] == []
    assert tsmc.get(f"{API}/trading/date/not-a-date").status_code == 400


def test_institutional_and_margin_summary(tsmc):
    tsmc.post(f"{API}/stocks", json={"stockCode": "2317", "stockName": "鴻海"})
    tsmc.post(f"{API}/stocks/2330/institutional", json=institutional_payload("2026-02-02"))
    tsmc.post(
        f"{API}/stocks/2317/institutional",
        json=institutional_payload("2026-02-02", foreignBuy=90000),
    )
    tsmc.post(f"{API}/stocks/2330/margin", json=margin_payload("2026-02-02", marginChange=100))
    tsmc.post(f"{API}/stocks/2317/margin", json=margin_payload("2026-02-02", marginChange=-50))

    ranking = tsmc.get(f"{API}/institutional/summary").json()["data"]
    assert [item["stock"]["stockCode"] for item in ranking] == ["2317", "2330"]
    assert ranking[0]["institutional"]["totalNet"] > ranking[1]["institutional"]["totalNet"]

    limited = tsmc.get(f"{API}/institutional/summary", params={"limit": 1}).json()["data"]
    assert len(limited) == 1

    margin = tsmc.get(f"{API}/margin/summary", params={"date": "2026-02-02"}).json()["data"]
    assert [item["stock"]["stockCode"] for item in margin] == ["2330", "2317"]

    assert tsmc.get(f"{API}/margin/summary", params={"date": "2020-01-01"}).json()["data"] == []


@pytest.mark.parametrize("token", ["Infinity", "-Infinity", "NaN"])
def test_trading_rejects_non_finite_numbers(tsmc, token):
    tsmc.post(f"{API}/stocks/2330/trading", json=trading_payload("2026-02-02"))
    body = json.dumps(trading_payload("2026-02-03", close=100, lowestPrice=1))
    body = body.replace('"openingPrice": 100', f'"openingPrice": {token}', 1)
    body = body.replace('"highestPrice": 102', f'"highestPrice": {token}', 1)

    response = tsmc.post(
        f"{API}/stocks/2330/trading",
        content=body,
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    listed = tsmc.get(f"{API}/stocks/2330/trading")
    assert listed.status_code == 200
    assert [r["tradeDate"] for r in listed.json()["data"]] == ["2026-02-02"]
    assert tsmc.get(f"{API}/stocks/2330/complete").status_code == 200
