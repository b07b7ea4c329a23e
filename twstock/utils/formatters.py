"""
顯示用格式化工具

所有函式都不會拋出例外: None / NaN / 無法解析的輸入一律回傳 '-'.
"""
import math
from datetime import date, datetime
from typing import NamedTuple, Optional, Union

Number = Optional[Union[int, float]]
DateLike = Optional[Union[str, date, datetime]]

PLACEHOLDER = "-"

DATE_PATTERNS = {
    "YYYY/MM/DD": "{y}/{m}/{d}",
    "YYYY-MM-DD": "{y}-{m}-{d}",
    "MM/DD": "{m}/{d}",
    "YYYY年MM月DD日": "{y}年{m}月{d}日",
}
DEFAULT_DATE_PATTERN = "YYYY/MM/DD"

# 無時區的字串格式 (ISO 8601 以外)
_FALLBACK_FORMATS = ("%Y/%m/%d %H:%M:%S", "%Y/%m/%d %H:%M", "%Y/%m/%d", "%Y%m%d")


class FormattedChange(NamedTuple):
    """帶正負號的文字與漲跌分類 (positive / negative / neutral)"""
    text: str
    tone: str


def _is_missing(value) -> bool:
    if value is None or isinstance(value, bool):
        return True
    try:
        return not math.isfinite(value)
    except TypeError:
        return True


def _tone(value: float) -> str:
    if value > 0:
        return "positive"
    if value < 0:
        return "negative"
    return "neutral"


def _parse_datetime(value: DateLike) -> Optional[datetime]:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            for fmt in _FALLBACK_FORMATS:
                try:
                    parsed = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
            else:
                return None
    else:
        return None

    # 帶時區的時間轉成本地時間顯示
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed


def format_number(num: Number) -> str:
    """
    千分位格式

    >>> format_number(1234567)
    '1,234,567'
    """
    if _is_missing(num):
        return PLACEHOLDER
    if float(num).is_integer():
        return f"{int(num):,}"
    return f"{num:,.3f}".rstrip("0").rstrip(".")


def format_currency(amount: Number, currency: str = "NT$") -> str:
    """
    >>> format_currency(1234567)
    'NT$ 1,234,567'
    """
    if _is_missing(amount):
        return PLACEHOLDER
    return f"{currency} {format_number(amount)}"


def format_percent(value: Number, decimals: int = 2) -> str:
    """比率轉百分比, 0.1234 -> '12.34%'"""
    if _is_missing(value):
        return PLACEHOLDER
    return f"{value * 100:.{decimals}f}%"


def format_change(value: Number, decimals: int = 2) -> FormattedChange:
    """漲跌值, 5.5 -> ('+5.50', 'positive')"""
    if _is_missing(value):
        return FormattedChange(PLACEHOLDER, "neutral")

    sign = "+" if value > 0 else ""
    return FormattedChange(f"{sign}{value:.{decimals}f}", _tone(value))


def format_change_percent(value: Number, decimals: int = 2) -> FormattedChange:
    """漲跌幅 (比率), 0.055 -> ('+5.50%', 'positive')"""
    if _is_missing(value):
        return FormattedChange(PLACEHOLDER, "neutral")

    percent = value * 100
    sign = "+" if percent > 0 else ""
    return FormattedChange(f"{sign}{percent:.{decimals}f}%", _tone(percent))


def format_date(value: DateLike, pattern: str = DEFAULT_DATE_PATTERN) -> str:
    """
    日期格式化

    支援 YYYY/MM/DD, YYYY-MM-DD, MM/DD, YYYY年MM月DD日; 其他格式使用 YYYY/MM/DD
    """
    try:
        parsed = _parse_datetime(value)
    except (ValueError, OverflowError, OSError):
        return PLACEHOLDER
    if parsed is None:
        return PLACEHOLDER

    template = DATE_PATTERNS.get(pattern, DATE_PATTERNS[DEFAULT_DATE_PATTERN])
    return template.format(y=parsed.year, m=f"{parsed.month:02d}", d=f"{parsed.day:02d}")


def format_datetime(value: DateLike) -> str:
    """'2026-02-03T10:30:00' -> '2026/02/03 10:30'"""
    try:
        parsed = _parse_datetime(value)
    except (ValueError, OverflowError, OSError):
        return PLACEHOLDER
    if parsed is None:
        return PLACEHOLDER

    return f"{format_date(parsed)} {parsed.hour:02d}:{parsed.minute:02d}"


def format_relative_time(value: DateLike, now: Optional[datetime] = None) -> str:
    """
    相對時間

    一分鐘內 '剛剛', 一小時內 'N 分鐘前', 一天內 'N 小時前', 七天內 'N 天前',
    其餘顯示日期
    """
    try:
        parsed = _parse_datetime(value)
        if parsed is None:
            return PLACEHOLDER

        # 兩邊統一成帶時區的本地時間再相減
        current = (now or datetime.now()).astimezone()
        diff_sec = math.floor((current - parsed.astimezone()).total_seconds())
    except (ValueError, OverflowError, OSError):
        return PLACEHOLDER

    diff_min = diff_sec // 60
    diff_hour = diff_min // 60
    diff_day = diff_hour // 24

    if diff_sec < 60:
        return "剛剛"
    if diff_min < 60:
        return f"{diff_min} 分鐘前"
    if diff_hour < 24:
        return f"{diff_hour} 小時前"
    if diff_day < 7:
        return f"{diff_day} 天前"
    return format_date(parsed)


def format_large_number(num: Number, decimals: int = 2) -> str:
    """1234567 -> '1.23M'"""
    if _is_missing(num):
        return PLACEHOLDER

    abs_num = abs(num)
    sign = "-" if num < 0 else ""

    if abs_num >= 1e9:
        return f"{sign}{abs_num / 1e9:.{decimals}f}B"
    if abs_num >= 1e6:
        return f"{sign}{abs_num / 1e6:.{decimals}f}M"
    if abs_num >= 1e3:
        return f"{sign}{abs_num / 1e3:.{decimals}f}K"
    return f"{sign}{abs_num:.{decimals}f}"


def format_stock_code(code: Optional[str]) -> str:
    if not code or not isinstance(code, str):
        return PLACEHOLDER
    return code.strip().upper()


def truncate_text(text: Optional[str], max_length: int) -> str:
    """超過長度加上省略號"""
    if not text or not isinstance(text, str):
        return PLACEHOLDER
    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}..."


def calculate_change_percent(previous_value: Number, current_value: Number) -> Optional[float]:
    """(現值 - 前值) / 前值; 前值為 0 或缺值時回傳 None"""
    if _is_missing(previous_value) or previous_value == 0 or _is_missing(current_value):
        return None
    return (current_value - previous_value) / previous_value


def format_volume(shares: Number) -> str:
    """股數轉張數 (1 張 = 1000 股), 1000000 -> '1,000 張'"""
    if _is_missing(shares):
        return PLACEHOLDER
    lots = math.floor(shares / 1000)
    return f"{format_number(lots)} 張"


def format_trading_value(value: Number) -> str:
    """成交金額轉萬 / 億, 123456789 -> '1.23 億'"""
    if _is_missing(value):
        return PLACEHOLDER

    if value >= 1e8:
        return f"{value / 1e8:.2f} 億"
    if value >= 1e4:
        return f"{value / 1e4:.2f} 萬"
    return format_number(value)
