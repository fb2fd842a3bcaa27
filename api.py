import time
import logging
from typing import Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from config import Settings, settings
from database import Database
from errors import register_error_handlers, unwrap
from routers import admin_router, participants_router
from services.admin_service import AdminService

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """앱 생성 (DB는 lifespan에서 연결)"""
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # 시작 시: 설정 확인 → DB 연결/테이블 생성 → 관리자 계정 생성
        db = None
        try:
            db = Database.from_settings(app_settings)
            await db.connect()
            print("✅ Database connected (schema synced)")

            async with db.session() as session:
                admin = unwrap(await AdminService(session).ensure_admin(
                    app_settings.ADMIN_USERNAME,
                    app_settings.ADMIN_PASSWORD,
                ))
            print(f"✅ Admin seeded/exists: {admin.login}")
        except Exception:
            logger.exception("Startup failed")
            if db is not None:
                await db.dispose()
            raise

        app.state.db = db
        yield

        # 종료 시
        await db.dispose()
        print("✅ Connections closed")

    app = FastAPI(
        title="Census Participant API",
        description="참가자 개인/직장/거주지 정보 관리 API (HTTP Basic 인증)",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.started_at = time.monotonic()

    register_error_handlers(app)

    # API 라우터 등록
    app.include_router(admin_router, prefix="/admin", tags=["admin"])
    app.include_router(participants_router, prefix="/participants", tags=["participants"])

    @app.get("/status")
    async def status(request: Request):
        """헬스체크 (인증 불필요)"""
        auth = request.headers.get("authorization", "")
        db = getattr(request.app.state, "db", None)
        database_ok = db is not None and await db.ping()
        return {
            "status": "ok",
            "database": "ok" if database_ok else "unavailable",
            "auth_header_present": bool(auth),
            "auth_header_is_basic": auth.startswith("Basic "),
            "uptime_seconds": int(time.monotonic() - request.app.state.started_at),
        }

    @app.get("/")
    async def api_info():
        return {
            "message": "Census Participant API",
            "public": {
                "GET /status": "헬스체크",
            },
            "admin (Basic Auth)": {
                "GET /admin/test": "인증 확인",
                "POST /participants": "참가자 생성",
                "POST /participants/add": "참가자 + 직장 + 거주지 생성",
                "GET /participants": "전체 목록",
                "GET /participants/details": "이름/이메일 목록",
                "GET /participants/details/{email}": "개인 정보",
                "GET /participants/work/{email}": "직장 정보",
                "GET /participants/home/{email}": "거주지 정보",
                "GET /participants/{email}": "참가자 전체 정보",
                "PUT /participants/{email}": "전체 수정",
                "PATCH /participants/{email}": "부분 수정",
                "DELETE /participants/{email}": "삭제",
            },
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
