"""
API 錯誤類型

每個錯誤都帶有 HTTP 狀態碼與錯誤代碼, 由 main.py 的 exception handler
轉成統一的錯誤回應格式.
"""
from typing import Dict, List, Optional


class TwStockError(Exception):
    """所有業務錯誤的基底類別"""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(TwStockError):
    """必填欄位缺漏或格式錯誤"""

    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(TwStockError):
    """股票代碼或路由不存在"""

    status_code = 404
    code = "NOT_FOUND"


class ConflictError(TwStockError):
    """資料重複 (股票代碼, 同一股票同一交易日)"""

    status_code = 409
    code = "CONFLICT"
