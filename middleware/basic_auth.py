"""HTTP Basic 인증 미들웨어 (DB에 저장된 관리자 계정 기준)"""
import base64
import binascii
from typing import Callable, Optional, Tuple

from fastapi import Depends, Header, Request, Response
from fastapi.routing import APIRoute
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from errors import ApiError, ErrorKind, Ok, Err, Result, unwrap
from schemas import AdminIdentity
from services.admin_service import AdminService, verify_password

# 401 응답에 포함
WWW_AUTHENTICATE = {"WWW-Authenticate": 'Basic realm="census"'}


def _unauthorized(message: str) -> Err:
    return Err(ErrorKind.UNAUTHORIZED, message)


def parse_basic_authorization(authorization: Optional[str]) -> Result[Tuple[str, str]]:
    """Authorization: Basic base64(login:password) 파싱

    비밀번호에 ':'가 포함될 수 있으므로 첫 번째 ':' 기준으로만 분리
    """
    if not authorization or not authorization.startswith("Basic "):
        return _unauthorized("Missing or invalid Authorization header (Basic Auth required).")

    encoded = authorization[len("Basic "):].strip()
    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return _unauthorized("Invalid Basic Auth format.")

    login, separator, password = decoded.partition(":")
    if not separator or not login or not password:
        return _unauthorized("Invalid Basic Auth format.")

    return Ok((login, password))


async def authenticate(
    request: Request,
    authorization: Optional[str],
    db: AsyncSession
) -> AdminIdentity:
    """관리자 인증

    Returns:
        AdminIdentity: 인증된 관리자 (request.state.admin에도 저장)

    Raises:
        ApiError: 401 (헤더 누락/형식 오류/자격 증명 불일치), 500 (조회 실패)
    """
    login, password = unwrap(parse_basic_authorization(authorization), WWW_AUTHENTICATE)

    # 조회 실패는 500 (인증 실패로 처리하지 않음)
    admin = unwrap(await AdminService(db).find_by_login(login))

    if admin is None or not verify_password(password, admin.password_hash):
        raise ApiError(ErrorKind.UNAUTHORIZED, "Invalid admin credentials.", WWW_AUTHENTICATE)

    identity = AdminIdentity(login=admin.login, id=admin.id)
    request.state.admin = identity
    return identity


async def verify_admin(
    request: Request,
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db)
) -> AdminIdentity:
    """개별 엔드포인트용 인증 의존성"""
    return await authenticate(request, authorization, db)


class BasicAuthRoute(APIRoute):
    """요청 본문 파싱 전에 인증을 수행하는 라우트 클래스

    라우터 전체를 보호할 때 APIRouter(route_class=BasicAuthRoute)로 사용
    """

    def get_route_handler(self) -> Callable:
        handler = super().get_route_handler()

        async def authenticated_handler(request: Request) -> Response:
            async with request.app.state.db.session() as db:
                await authenticate(request, request.headers.get("authorization"), db)
            return await handler(request)

        return authenticated_handler
