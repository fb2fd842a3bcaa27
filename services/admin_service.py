"""관리자 계정 서비스"""
import hashlib
import hmac
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from errors import ErrorKind, Ok, Err, Result
from models.admin import Admin

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode()).hexdigest()


def verify_password(password: str, hashed: str) -> bool:
    """상수 시간 비교"""
    return hmac.compare_digest(hash_password(password), hashed)


class AdminService:
    """관리자 조회 및 초기 계정 생성"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_login(self, login: str) -> Result[Optional[Admin]]:
        try:
            result = await self.db.execute(select(Admin).where(Admin.login == login))
            return Ok(result.scalar_one_or_none())
        except SQLAlchemyError:
            logger.exception(f"Admin lookup failed for login={login!r}")
            return Err(ErrorKind.SERVER_ERROR, "Could not verify admin credentials.")

    async def ensure_admin(self, login: str, password: str) -> Result[Admin]:
        """login 행이 있으면 그대로 사용, 없으면 생성 (기존 비밀번호는 유지)"""
        existing = await self.find_by_login(login)
        if isinstance(existing, Err):
            return existing
        if existing.value:
            return Ok(existing.value)

        admin = Admin(login=login, password_hash=hash_password(password))
        self.db.add(admin)
        try:
            await self.db.commit()
        except IntegrityError:
            # 동시에 다른 프로세스가 생성한 경우
            await self.db.rollback()
            return await self.find_by_login(login)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Admin seeding failed for login={login!r}")
            return Err(ErrorKind.SERVER_ERROR, "Could not seed admin.")

        await self.db.refresh(admin)
        return Ok(admin)
