from typing import Generator

from fastapi import Request

from twstock.config import Settings
from twstock.repositories import Storage, create_sql_storage


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> Generator[Storage, None, None]:
    """
    依設定提供儲存庫

    - memory: 應用程式啟動時建立的單一記憶體儲存庫
    - database: 每個請求一個 Session, 請求結束後關閉
    """
    if request.app.state.settings.storage_backend == "database":
        db = request.app.state.session_factory()
        try:
            yield create_sql_storage(db)
        finally:
            db.close()
    else:
        yield request.app.state.storage
