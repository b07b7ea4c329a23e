"""
API 客戶端

前端 / 腳本呼叫後端 API 用的 requests 封裝.
- 預設 base URL 取自 API_BASE_URL (或 VITE_API_BASE_URL), timeout 10 秒
- 傳輸錯誤與 API 錯誤回應統一轉成 ApiClientError
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

import requests

from twstock.config import get_settings
from twstock.schemas import (
    DailyTradingDataResponse,
    DashboardSummary,
    InstitutionalInvestorResponse,
    InstitutionalSummaryItem,
    MarginSummaryItem,
    MarginTradingResponse,
    StockCompleteData,
    StockResponse,
    StockStatistics,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNKNOWN_ERROR_MESSAGE = "發生未知錯誤"


class ApiClientError(Exception):
    """API 呼叫失敗 (連線失敗或錯誤回應)"""

    def __init__(
            self,
            message: str,
            status_code: Optional[int] = None,
            code: Optional[str] = None,
            details: Optional[List[Dict[str, str]]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details


@dataclass
class ApiResult(Generic[T]):
    """成功回應 (data 已轉成 schema)"""
    data: T
    meta: Dict[str, Any] = field(default_factory=dict)


def get_error_message(error: BaseException) -> str:
    """從任何例外取得可讀的錯誤訊息"""
    if isinstance(error, ApiClientError):
        return error.message or UNKNOWN_ERROR_MESSAGE
    if isinstance(error, Exception) and str(error):
        return str(error)
    return UNKNOWN_ERROR_MESSAGE


def _date_param(value: Optional[Union[date, str]]) -> Optional[str]:
    if isinstance(value, date):
        return value.isoformat()
    return value


class TwStockApiClient:
    """台股資料管理系統 API 客戶端"""

    def __init__(
            self,
            base_url: Optional[str] = None,
            timeout: Optional[float] = None,
            session: Optional[requests.Session] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.api_timeout_seconds
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    # ==================== 通用 ====================

    def _send(self, method: str, path: str, params: Optional[Dict] = None, json: Any = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            response = self.session.request(method, url, params=params or None, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"No response received: {method} {url} ({e})")
            raise ApiClientError(f"無法連線至伺服器: {e}") from e

        if response.status_code >= 400:
            raise self._to_error(response)
        return response

    def _request(self, method: str, path: str, params: Optional[Dict] = None, json: Any = None) -> Dict[str, Any]:
        response = self._send(method, path, params=params, json=json)
        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    @staticmethod
    def _to_error(response: requests.Response) -> ApiClientError:
        try:
            body = response.json()
        except ValueError:
            body = {}

        error = (body.get("error") or {}) if isinstance(body, dict) else {}
        message = error.get("message") or response.reason or f"HTTP {response.status_code}"

        if response.status_code >= 500:
            logger.error(f"Internal server error: {message}")
        elif response.status_code == 404:
            logger.warning(f"Resource not found: {message}")
        else:
            logger.warning(f"API error {response.status_code}: {message}")

        return ApiClientError(
            message,
            status_code=response.status_code,
            code=error.get("code"),
            details=error.get("details"),
        )

    @staticmethod
    def _result(body: Dict[str, Any], schema=None, many: bool = False) -> ApiResult:
        data = body.get("data")
        if schema is not None and data is not None:
            data = [schema.model_validate(item) for item in data] if many else schema.model_validate(data)
        return ApiResult(data=data, meta=body.get("meta") or {})

    # ==================== 股票管理 ====================

    def get_stocks(
            self,
            search: Optional[str] = None,
            page: Optional[int] = None,
            page_size: Optional[int] = None,
            industry: Optional[str] = None,
            market_type: Optional[str] = None,
            sort_by: Optional[str] = None,
            sort_order: Optional[str] = None,
    ) -> ApiResult[List[StockResponse]]:
        params = {
            "search": search,
            "page": page,
            "pageSize": page_size,
            "industry": industry,
            "marketType": market_type,
            "sortBy": sort_by,
            "sortOrder": sort_order,
        }
        return self._result(self._request("GET", "/stocks", params=params), StockResponse, many=True)

    def search_stocks(self, query: str) -> ApiResult[List[StockResponse]]:
        """搜尋股票 (代碼或名稱), 最多 10 筆"""
        return self.get_stocks(search=query, page_size=10)

    def get_stock(self, stock_code: str) -> ApiResult[StockResponse]:
        return self._result(self._request("GET", f"/stocks/{stock_code}"), StockResponse)

    def create_stock(
            self,
            stock_code: str,
            stock_name: str,
            industry: Optional[str] = None,
            market_type: Optional[str] = None,
    ) -> ApiResult[StockResponse]:
        payload = {"stockCode": stock_code, "stockName": stock_name}
        if industry is not None:
            payload["industry"] = industry
        if market_type is not None:
            payload["marketType"] = market_type
        return self._result(self._request("POST", "/stocks", json=payload), StockResponse)

    def update_stock(self, stock_code: str, **changes: Any) -> ApiResult[StockResponse]:
        """部分更新: stock_name / industry / market_type"""
        names = {"stock_name": "stockName", "industry": "industry", "market_type": "marketType"}
        payload = {names.get(k, k): v for k, v in changes.items()}
        return self._result(self._request("PUT", f"/stocks/{stock_code}", json=payload), StockResponse)

    def delete_stock(self, stock_code: str) -> None:
        self._request("DELETE", f"/stocks/{stock_code}")

    # ==================== 每日交易資料 ====================

    def get_trading_data(
            self,
            stock_code: str,
            start_date: Optional[Union[date, str]] = None,
            end_date: Optional[Union[date, str]] = None,
    ) -> ApiResult[List[DailyTradingDataResponse]]:
        params = {"startDate": _date_param(start_date), "endDate": _date_param(end_date)}
        body = self._request("GET", f"/stocks/{stock_code}/trading", params=params)
        return self._result(body, DailyTradingDataResponse, many=True)

    def create_trading_data(self, stock_code: str, data: Dict[str, Any]) -> ApiResult[DailyTradingDataResponse]:
        body = self._request("POST", f"/stocks/{stock_code}/trading", json=data)
        return self._result(body, DailyTradingDataResponse)

    def get_trading_data_by_date(self, trade_date: Union[date, str]) -> ApiResult[List[DailyTradingDataResponse]]:
        body = self._request("GET", f"/trading/date/{_date_param(trade_date)}")
        return self._result(body, DailyTradingDataResponse, many=True)

    # ==================== 三大法人資料 ====================

    def get_institutional_data(
            self,
            stock_code: str,
            start_date: Optional[Union[date, str]] = None,
            end_date: Optional[Union[date, str]] = None,
    ) -> ApiResult[List[InstitutionalInvestorResponse]]:
        params = {"startDate": _date_param(start_date), "endDate": _date_param(end_date)}
        body = self._request("GET", f"/stocks/{stock_code}/institutional", params=params)
        return self._result(body, InstitutionalInvestorResponse, many=True)

    def create_institutional_data(
            self,
            stock_code: str,
            data: Dict[str, Any],
    ) -> ApiResult[InstitutionalInvestorResponse]:
        body = self._request("POST", f"/stocks/{stock_code}/institutional", json=data)
        return self._result(body, InstitutionalInvestorResponse)

    def get_institutional_data_by_date(
            self,
            trade_date: Union[date, str],
    ) -> ApiResult[List[InstitutionalInvestorResponse]]:
        body = self._request("GET", f"/institutional/date/{_date_param(trade_date)}")
        return self._result(body, InstitutionalInvestorResponse, many=True)

    def get_institutional_summary(
            self,
            trade_date: Optional[Union[date, str]] = None,
            limit: Optional[int] = None,
    ) -> ApiResult[List[InstitutionalSummaryItem]]:
        params = {"date": _date_param(trade_date), "limit": limit}
        body = self._request("GET", "/institutional/summary", params=params)
        return self._result(body, InstitutionalSummaryItem, many=True)

    # ==================== 融資融券資料 ====================

    def get_margin_data(
            self,
            stock_code: str,
            start_date: Optional[Union[date, str]] = None,
            end_date: Optional[Union[date, str]] = None,
    ) -> ApiResult[List[MarginTradingResponse]]:
        params = {"startDate": _date_param(start_date), "endDate": _date_param(end_date)}
        body = self._request("GET", f"/stocks/{stock_code}/margin", params=params)
        return self._result(body, MarginTradingResponse, many=True)

    def create_margin_data(self, stock_code: str, data: Dict[str, Any]) -> ApiResult[MarginTradingResponse]:
        body = self._request("POST", f"/stocks/{stock_code}/margin", json=data)
        return self._result(body, MarginTradingResponse)

    def get_margin_data_by_date(self, trade_date: Union[date, str]) -> ApiResult[List[MarginTradingResponse]]:
        body = self._request("GET", f"/margin/date/{_date_param(trade_date)}")
        return self._result(body, MarginTradingResponse, many=True)

    def get_margin_summary(
            self,
            trade_date: Optional[Union[date, str]] = None,
            limit: Optional[int] = None,
    ) -> ApiResult[List[MarginSummaryItem]]:
        params = {"date": _date_param(trade_date), "limit": limit}
        body = self._request("GET", "/margin/summary", params=params)
        return self._result(body, MarginSummaryItem, many=True)

    # ==================== 綜合查詢 ====================

    def get_stock_complete_data(
            self,
            stock_code: str,
            on_date: Optional[Union[date, str]] = None,
    ) -> ApiResult[StockCompleteData]:
        body = self._request("GET", f"/stocks/{stock_code}/complete", params={"date": _date_param(on_date)})
        return self._result(body, StockCompleteData)

    def get_dashboard_summary(self, trade_date: Optional[Union[date, str]] = None) -> ApiResult[DashboardSummary]:
        body = self._request("GET", "/dashboard/summary", params={"date": _date_param(trade_date)})
        return self._result(body, DashboardSummary)

    def get_stock_statistics(
            self,
            stock_code: str,
            start_date: Optional[Union[date, str]] = None,
            end_date: Optional[Union[date, str]] = None,
    ) -> ApiResult[StockStatistics]:
        params = {"startDate": _date_param(start_date), "endDate": _date_param(end_date)}
        body = self._request("GET", f"/stocks/{stock_code}/statistics", params=params)
        return self._result(body, StockStatistics)

    # ==================== 匯出 ====================

    def export_stock_data(
            self,
            stock_code: str,
            fmt: str = "csv",
            destination: Union[str, Path] = ".",
            start_date: Optional[Union[date, str]] = None,
            end_date: Optional[Union[date, str]] = None,
    ) -> Path:
        """下載交易資料並存成 <stockCode>_<format>.<format>, 回傳檔案路徑"""
        params = {"format": fmt, "startDate": _date_param(start_date), "endDate": _date_param(end_date)}
        response = self._send("GET", f"/stocks/{stock_code}/export", params=params)

        path = Path(destination) / f"{stock_code}_{fmt}.{fmt}"
        path.write_bytes(response.content)
        logger.info(f"Exported {stock_code} trading data to {path}")
        return path
