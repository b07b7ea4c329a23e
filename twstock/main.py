import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from twstock.config import Settings, get_settings
from twstock.database import build_engine, build_session_factory, init_db
from twstock.repositories import create_memory_storage, create_sql_storage
from twstock.responses import register_exception_handlers
from twstock.routers import dashboard, health, market_data, stock
from twstock.services import seed_sample_stocks

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("memory", "database")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _setup_storage(app: FastAPI, settings: Settings) -> None:
    """儲存層初始化 (記憶體或資料庫), 並視設定寫入範例股票"""
    if settings.storage_backend not in STORAGE_BACKENDS:
        raise ValueError(
            f"storage_backend must be one of {', '.join(STORAGE_BACKENDS)}, got {settings.storage_backend!r}"
        )

    if settings.storage_backend == "memory":
        app.state.storage = create_memory_storage()
        if settings.seed_sample_data:
            seed_sample_stocks(app.state.storage)
        return

    engine = build_engine(settings.database_url)
    init_db(engine)
    app.state.session_factory = build_session_factory(engine)

    if settings.seed_sample_data:
        db = app.state.session_factory()
        try:
            seed_sample_stocks(create_sql_storage(db))
        finally:
            db.close()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Taiwan Stock Data Management API (股票 / 每日交易 / 三大法人 / 融資融券)",
    )
    app.state.settings = settings
    _setup_storage(app, settings)

    # CORS 設定
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 請求日誌
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)")
        return response

    register_exception_handlers(app, production=settings.is_production)

    # 路由註冊
    app.include_router(health.router)
    app.include_router(stock.router, prefix="/api/v1")
    app.include_router(market_data.router, prefix="/api/v1")
    app.include_router(dashboard.router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "status": "running",
            "environment": settings.environment,
            "storage": settings.storage_backend,
        }

    logger.info(
        f"{settings.app_name} {settings.app_version} ready "
        f"(environment={settings.environment}, storage={settings.storage_backend})"
    )
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=get_settings().app_host, port=get_settings().port)
