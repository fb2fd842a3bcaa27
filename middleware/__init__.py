"""인증 미들웨어 패키지"""
from middleware.basic_auth import BasicAuthRoute, verify_admin, parse_basic_authorization

__all__ = ["BasicAuthRoute", "verify_admin", "parse_basic_authorization"]
