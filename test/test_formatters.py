"""
格式化工具測試
"""
import math
from datetime import date, datetime

from twstock.utils.formatters import (
    calculate_change_percent,
    format_change,
    format_change_percent,
    format_currency,
    format_date,
    format_datetime,
    format_large_number,
    format_number,
    format_percent,
    format_relative_time,
    format_stock_code,
    format_trading_value,
    format_volume,
    truncate_text,
)


def test_format_number():
    assert format_number(None) == "-"
    assert format_number(float("nan")) == "-"
    assert format_number(1234567) == "1,234,567"
    assert format_number(-9876) == "-9,876"
    assert format_number(1234.5) == "1,234.5"
    assert format_number(0.12345) == "0.123"
    assert format_number(100.0) == "100"


def test_format_currency_and_percent():
    assert format_currency(1234567) == "NT$ 1,234,567"
    assert format_currency(500, currency="US$") == "US$ 500"
    assert format_currency(None) == "-"
    assert format_percent(0.1234) == "12.34%"
    assert format_percent(0.5, decimals=0) == "50%"
    assert format_percent(math.nan) == "-"


def test_format_change_percent_classification():
    assert format_change_percent(0.055) == ("+5.50%", "positive")
    assert format_change_percent(-0.02) == ("-2.00%", "negative")

    flat = format_change_percent(0)
    assert flat.text == "0.00%"
    assert flat.tone == "neutral"

    assert format_change_percent(None) == ("-", "neutral")


def test_format_change():
    assert format_change(5.5) == ("+5.50", "positive")
    assert format_change(-1.234, decimals=1) == ("-1.2", "negative")
    assert format_change(0).tone == "neutral"
    assert format_change(float("nan")).text == "-"


def test_format_date_patterns():
    assert format_date("2026-02-03") == "2026/02/03"
    assert format_date("2026-02-03", "YYYY-MM-DD") == "2026-02-03"
    assert format_date("2026-02-03", "MM/DD") == "02/03"
    assert format_date("2026-02-03", "YYYY年MM月DD日") == "2026年02月03日"
    assert format_date("2026-02-03", "unknown") == "2026/02/03"
    assert format_date(date(2026, 1, 5)) == "2026/01/05"
    assert format_date("2026/02/03") == "2026/02/03"


def test_format_date_invalid_inputs():
    assert format_date(None) == "-"
    assert format_date("") == "-"
    assert format_date("not a date") == "-"
    assert format_datetime("2026-13-45T00:00:00") == "-"


def test_format_datetime():
    assert format_datetime("2026-02-03T10:30:00") == "2026/02/03 10:30"
    assert format_datetime(datetime(2026, 2, 3, 9, 5)) == "2026/02/03 09:05"


def test_format_relative_time_buckets():
    now = datetime(2026, 2, 3, 12, 0, 0)

    assert format_relative_time("2026-02-03T11:59:30", now=now) == "剛剛"
    assert format_relative_time("2026-02-03T11:55:00", now=now) == "5 分鐘前"
    assert format_relative_time("2026-02-03T09:00:00", now=now) == "3 小時前"
    assert format_relative_time("2026-02-01T12:00:00", now=now) == "2 天前"
    assert format_relative_time("2026-01-01T12:00:00", now=now) == "2026/01/01"
    assert format_relative_time(None, now=now) == "-"


def test_format_large_number():
    assert format_large_number(1234567) == "1.23M"
    assert format_large_number(2_500_000_000) == "2.50B"
    assert format_large_number(-4500) == "-4.50K"
    assert format_large_number(999) == "999.00"
    assert format_large_number(None) == "-"


def test_volume_and_trading_value():
    assert format_volume(1_000_000) == "1,000 張"
    assert format_volume(1_999) == "1 張"
    assert format_volume(None) == "-"

    assert format_trading_value(123_456_789) == "1.23 億"
    assert format_trading_value(123_456) == "12.35 萬"
    assert format_trading_value(9_999) == "9,999"
    assert format_trading_value(None) == "-"


def test_text_helpers():
    assert format_stock_code(" 2330 ") == "2330"
    assert format_stock_code("00631l") == "00631L"
    assert format_stock_code(None) == "-"

    assert truncate_text("這是一段很長的文字內容", 6) == "這是一段很長..."
    assert truncate_text("短", 6) == "短"
    assert truncate_text("", 6) == "-"


def test_calculate_change_percent():
    assert calculate_change_percent(100, 110) == 0.1
    assert calculate_change_percent(0, 110) is None
    assert calculate_change_percent(None, 110) is None
