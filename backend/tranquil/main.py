# /backend/tranquil/main.py

from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from tranquil.api.routers import auth, breathing, user
from tranquil.config import Settings, configure_logging
from tranquil.db import Base, build_engine, build_sessionmaker, get_db
from tranquil.results import GENERIC_FAILURE_MESSAGE
from tranquil.services.auth_service import TokenService
from tranquil.services.techniques import validate_catalog

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    # 앱 시작 시: 기법 카탈로그 검증, DB 엔진과 토큰 서비스 준비
    validate_catalog()
    engine = build_engine(settings)
    app.state.engine = engine
    app.state.sessionmaker = build_sessionmaker(engine)
    if getattr(app.state, "token_service", None) is None:
        app.state.token_service = TokenService.from_settings(settings)

    if settings.create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    logger.info("Database engine ready")
    try:
        yield
    finally:
        # 앱 종료 시
        await engine.dispose()
        logger.info("Database engine disposed")


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    field = ".".join(loc) if loc else "body"
    return f"{field}: {first.get('msg', 'invalid value')}"


def install_exception_handlers(app: FastAPI) -> None:
    """모든 오류 응답을 {"message": ...} 형태로 통일합니다."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": _validation_message(exc)},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": GENERIC_FAILURE_MESSAGE},
        )


def create_app(settings: Optional[Settings] = None, token_service: Optional[TokenService] = None) -> FastAPI:
    if settings is None:
        settings = Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Tranquil API",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.token_service = token_service

    # CORS 미들웨어를 가장 먼저 등록합니다.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(user.router)
    app.include_router(breathing.router)

    @app.get("/health")
    async def health():
        return {"message": "ok", "ok": True}

    @app.get("/api/test-db")
    async def db_health(db: AsyncSession = Depends(get_db)):
        try:
            result = await db.execute(select(func.current_timestamp()))
            current_time = result.scalar_one()
        except SQLAlchemyError:
            logger.exception("Database test failed")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"status": "error", "message": "Database connection failed"},
            )
        return {
            "status": "success",
            "message": "Database connection successful",
            "timestamp": current_time,
        }

    return app


app = create_app()
