"""API 라우터 패키지"""
from routers.admin import router as admin_router
from routers.participants import router as participants_router

__all__ = [
    "admin_router",
    "participants_router",
]
