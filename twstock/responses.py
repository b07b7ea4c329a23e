"""
統一回應格式

成功: { success: true, data, meta: { timestamp, page?, pageSize?, totalCount?, totalPages? } }
失敗: { success: false, error: { code, message, details? }, meta: { timestamp } }
"""
import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from twstock.exceptions import TwStockError
from twstock.repositories import Page
from twstock.schemas import ErrorResponse, Meta

logger = logging.getLogger(__name__)

# HTTP 狀態碼 -> 錯誤代碼
ERROR_CODES = {
    400: "VALIDATION_ERROR",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    500: "INTERNAL_ERROR",
}

GENERIC_ERROR_MESSAGE = "An error occurred"


def _meta(**fields) -> Dict[str, Any]:
    meta = Meta(timestamp=datetime.now(timezone.utc), **fields)
    return meta.model_dump(mode="json", by_alias=True, exclude_none=True)


def success_response(data: Any, status_code: int = 200, **meta) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": True,
            "data": jsonable_encoder(data, by_alias=True),
            "meta": _meta(**meta),
        },
    )


def page_response(page: Page) -> JSONResponse:
    """分頁清單回應"""
    return success_response(
        page.items,
        page=page.page,
        page_size=page.page_size,
        total_count=page.total_count,
        total_pages=page.total_pages,
    )


def error_response(
        status_code: int,
        code: str,
        message: str,
        details: Optional[List[Dict[str, str]]] = None,
) -> JSONResponse:
    body = ErrorResponse(
        error={"code": code, "message": message, "details": details},
        meta=Meta(timestamp=datetime.now(timezone.utc)),
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


def _validation_details(exc: RequestValidationError) -> List[Dict[str, str]]:
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        details.append({
            "field": ".".join(loc) or "body",
            "message": error.get("msg", "Invalid value"),
        })
    return details


def register_exception_handlers(app: FastAPI, production: bool = False) -> None:
    """把各種例外轉成統一錯誤格式"""

    @app.exception_handler(TwStockError)
    async def handle_app_error(request: Request, exc: TwStockError):
        return error_response(exc.status_code, exc.code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        details = _validation_details(exc)
        missing = [
            d["field"] for d, e in zip(details, exc.errors()) if e.get("type") == "missing"
        ]
        if missing and len(missing) == len(details):
            message = f"Missing required fields: {', '.join(missing)}"
        else:
            message = "Request validation failed"
        return error_response(400, "VALIDATION_ERROR", message, details)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        code = ERROR_CODES.get(exc.status_code, f"HTTP_{exc.status_code}")
        if exc.status_code == 404 and exc.detail == HTTPStatus.NOT_FOUND.phrase:
            message = "Route not found"
        else:
            message = str(exc.detail)
        return error_response(exc.status_code, code, message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        message = GENERIC_ERROR_MESSAGE if production else (str(exc) or GENERIC_ERROR_MESSAGE)
        return error_response(500, "INTERNAL_ERROR", message)
