# backend/tranquil/config.py
from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEV_SECRET_KEY = "your-secret-key-change-in-production"

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _database_url_from_parts() -> str:
    user = os.getenv("DB_USER", "postgres")
    password = os.getenv("DB_PASSWORD", "")
    host = os.getenv("DB_HOST", "localhost")
    port = os.getenv("DB_PORT", "5432")
    name = os.getenv("DB_NAME", "tranquil_db")
    auth = f"{user}:{password}" if password else user
    return f"postgresql+asyncpg://{auth}@{host}:{port}/{name}"


@dataclass(frozen=True)
class Settings:
    """
    프로세스 단위 설정 객체.
    create_app()에 주입되어 DB 엔진과 토큰 서비스를 만드는 데 사용됩니다.
    """
    database_url: str
    secret_key: str = DEV_SECRET_KEY
    algorithm: str = "HS256"
    access_token_expire_days: int = 7
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    create_tables: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "Settings":
        """.env 파일과 환경변수에서 설정을 읽습니다."""
        if env_file is None:
            env_file = os.path.join(
                os.path.dirname(os.path.dirname(os.path.abspath(__file__))), ".env"
            )
        load_dotenv(dotenv_path=env_file)

        secret_key = os.getenv("SECRET_KEY") or os.getenv("JWT_SECRET") or DEV_SECRET_KEY
        if secret_key == DEV_SECRET_KEY:
            logger.warning("SECRET_KEY is not set; using the development placeholder")

        raw_origins = os.getenv("ALLOWED_ORIGINS", "").strip()
        if raw_origins:
            origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
        else:
            origins = list(DEFAULT_CORS_ORIGINS)

        return cls(
            database_url=os.getenv("ASYNC_DATABASE_URL") or _database_url_from_parts(),
            secret_key=secret_key,
            algorithm=os.getenv("ALGORITHM", "HS256"),
            access_token_expire_days=int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "7")),
            cors_origins=origins,
            create_tables=_env_flag("CREATE_TABLES"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
