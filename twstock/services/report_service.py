"""
統計與匯出服務
twstock/services/report_service.py
"""
import logging
from datetime import date
from typing import Optional, Tuple

import pandas as pd

from twstock.exceptions import ValidationError
from twstock.schemas import DailyTradingDataResponse, StockStatistics
from twstock.services.market_data_service import MarketDataService

logger = logging.getLogger(__name__)

EXPORT_FORMATS = {
    "csv": "text/csv; charset=utf-8",
    "json": "application/json",
}


class ReportService:
    """股票期間統計與交易資料匯出"""

    def __init__(self, market_data: MarketDataService):
        self.market_data = market_data

    def get_statistics(
            self,
            stock_code: str,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
    ) -> StockStatistics:
        """
        期間統計

        - 平均成交量 / 平均收盤價 / 期間最高最低價
        - 價格變化: 期末收盤價 - 期初開盤價
        - 法人買賣超, 融資融券餘額變化合計
        """
        trading = self.market_data.list_trading(stock_code, start_date, end_date)
        institutional = self.market_data.list_institutional(stock_code, start_date, end_date)
        margin = self.market_data.list_margin(stock_code, start_date, end_date)

        stats = StockStatistics(
            stock_code=stock_code,
            period=self._period(trading, start_date, end_date),
            trading_days=len(trading),
            total_institutional_net=sum(r.total_net for r in institutional),
            total_margin_change=sum(r.margin_change for r in margin),
            total_short_change=sum(r.short_change for r in margin),
        )

        if trading:
            df = pd.DataFrame([r.model_dump() for r in trading]).sort_values("trade_date")
            first_open = float(df["opening_price"].iloc[0])
            last_close = float(df["closing_price"].iloc[-1])

            stats.avg_volume = round(float(df["trading_volume"].mean()), 2)
            stats.avg_price = round(float(df["closing_price"].mean()), 4)
            stats.highest_price = float(df["highest_price"].max())
            stats.lowest_price = float(df["lowest_price"].min())
            stats.price_change = round(last_close - first_open, 4)
            stats.price_change_percent = (
                round((last_close - first_open) / first_open, 6) if first_open else None
            )

        return stats

    @staticmethod
    def _period(trading: list, start_date: Optional[date], end_date: Optional[date]) -> str:
        if trading:
            start_date = start_date or trading[-1].trade_date
            end_date = end_date or trading[0].trade_date
        if not start_date and not end_date:
            return "-"
        return f"{start_date.isoformat() if start_date else ''} ~ {end_date.isoformat() if end_date else ''}"

    def export_trading_data(
            self,
            stock_code: str,
            fmt: str = "csv",
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
    ) -> Tuple[bytes, str, str]:
        """
        匯出交易資料

        Returns:
            (檔案內容, media type, 檔名)
        """
        if fmt not in EXPORT_FORMATS:
            raise ValidationError(
                f"format must be one of {', '.join(EXPORT_FORMATS)}",
                [{"field": "format", "message": "unsupported export format"}],
            )

        records = self.market_data.list_trading(stock_code, start_date, end_date)
        columns = [
            info.alias or name for name, info in DailyTradingDataResponse.model_fields.items()
        ]
        df = pd.DataFrame(
            [r.model_dump(mode="json", by_alias=True) for r in reversed(records)],
            columns=columns,
        )

        if fmt == "csv":
            # utf-8-sig 讓 Excel 正確顯示中文
            content = df.to_csv(index=False).encode("utf-8-sig")
        else:
            content = df.to_json(orient="records", force_ascii=False).encode("utf-8")

        logger.info(f"Exported {len(df)} trading records for {stock_code} as {fmt}")
        return content, EXPORT_FORMATS[fmt], f"{stock_code}_{fmt}.{fmt}"
