"""데이터베이스 연결 모듈"""
import ssl
import logging
from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from config import Settings

logger = logging.getLogger(__name__)

# Base 클래스
Base = declarative_base()


def build_ssl_context(ca_path: Optional[str]) -> ssl.SSLContext:
    """서버 인증서를 검증하는 TLS 컨텍스트 (ca_path가 없으면 시스템 CA 사용)"""
    return ssl.create_default_context(cafile=ca_path)


class Database:
    """엔진/세션 팩토리 묶음 (앱 시작 시 생성, 종료 시 dispose)"""

    def __init__(self, url: str, ssl_context: Optional[ssl.SSLContext] = None, **engine_options):
        connect_args = {"ssl": ssl_context} if ssl_context else {}

        # 커넥션 풀 설정은 Settings.pool_options()에서 전달
        self.engine = create_async_engine(
            url,
            echo=False,
            connect_args=connect_args,
            **engine_options,
        )

        # 세션 팩토리
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """설정으로부터 생성 (ConfigError는 호출자에게 전달)"""
        ssl_context = None
        if settings.DB_SSL:
            ca_path = settings.ca_path()
            ssl_context = build_ssl_context(ca_path)
            print(f"🔒 Database TLS enabled (CA: {ca_path or 'system trust store'})")
        return cls(settings.database_url, ssl_context, **settings.pool_options())

    async def connect(self) -> None:
        """연결 확인 후 테이블 생성"""
        import models  # noqa: F401  모든 테이블을 메타데이터에 등록

        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """헬스체크"""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database health check failed: {e}")
            return False

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI 의존성 주입용 DB 세션"""
    async with request.app.state.db.session() as session:
        try:
            yield session
        finally:
            await session.close()
