"""환경 설정 모듈"""
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL

# .env 파일 로드
load_dotenv()

# CA 인증서 탐색 경로 (시크릿 마운트 → 로컬 순서)
SECRET_CA_PATH = "/etc/secrets/ca.pem"
LOCAL_CA_PATH = os.path.join("certs", "ca.pem")


class ConfigError(RuntimeError):
    """필수 환경 설정 누락"""


class Settings:
    """애플리케이션 설정"""

    def __init__(self):
        # 데이터베이스 (DATABASE_URL이 있으면 우선 사용)
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "")
        self.DB_DRIVER: str = os.getenv("DB_DRIVER", "postgresql+asyncpg")
        self.DB_HOST: str = os.getenv("DB_HOST", "")
        self.DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
        self.DB_NAME: str = os.getenv("DB_NAME", "")
        self.DB_USER: str = os.getenv("DB_USER", "")
        self.DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")

        # TLS
        self.DB_SSL: bool = os.getenv("DB_SSL", "false").lower() == "true"
        self.DB_CA_PATH: str = os.getenv("DB_CA_PATH", "")

        # 커넥션 풀 (0이면 드라이버 기본 풀)
        self.DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))

        # 초기 관리자 계정
        self.ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "admin")
        self.ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "P4ssword")

        # 서버
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("PORT", "3000"))
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def database_url(self) -> str:
        """SQLAlchemy 비동기 접속 URL

        Raises:
            ConfigError: DATABASE_URL도 없고 접속 정보도 불완전한 경우
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL

        missing = [
            name for name in ("DB_HOST", "DB_NAME", "DB_USER")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigError(f"Missing required database settings: {', '.join(missing)}")

        url = URL.create(
            self.DB_DRIVER,
            username=self.DB_USER,
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )
        return url.render_as_string(hide_password=False)

    def pool_options(self) -> Dict[str, Any]:
        """create_async_engine에 전달할 풀 옵션"""
        options: Dict[str, Any] = dict(
            pool_recycle=1800,     # 30분마다 연결 재활용
            pool_pre_ping=True,
        )
        if self.DB_POOL_SIZE > 0:
            options.update(
                pool_size=self.DB_POOL_SIZE,
                max_overflow=20,
                pool_timeout=30,
            )
        return options

    def ca_path(self) -> Optional[str]:
        """사용할 CA 인증서 경로 (없으면 None → 시스템 신뢰 저장소)"""
        candidates = [self.DB_CA_PATH, SECRET_CA_PATH, LOCAL_CA_PATH]
        for path in candidates:
            if path and os.path.exists(path):
                return path
        return None


settings = Settings()
