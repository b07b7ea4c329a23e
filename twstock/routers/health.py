from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from twstock.config import Settings
from twstock.dependencies import get_app_settings, get_storage
from twstock.repositories import Storage

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(settings: Settings = Depends(get_app_settings)):
    """服務健康檢查"""
    return {
        "success": True,
        "message": "Server is running",
        "service": settings.app_name,
        "version": settings.app_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/storage")
async def storage_health_check(
        storage: Storage = Depends(get_storage),
        settings: Settings = Depends(get_app_settings),
):
    """儲存層連線檢查"""
    try:
        storage.stocks.ping()
        return {
            "success": True,
            "status": "healthy",
            "backend": settings.storage_backend,
        }
    except Exception as e:
        return {
            "success": False,
            "status": "unhealthy",
            "backend": settings.storage_backend,
            "error": str(e),
        }
