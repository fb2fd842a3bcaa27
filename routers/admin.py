"""관리자 라우터"""
from fastapi import APIRouter, Depends

from middleware.basic_auth import verify_admin
from schemas import AdminIdentity, AdminTestResponse

router = APIRouter()


@router.get("/test", response_model=AdminTestResponse)
async def admin_test(admin: AdminIdentity = Depends(verify_admin)):
    """Basic 인증 확인용"""
    return AdminTestResponse(message="Admin access granted", admin=admin)
