import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tranquil.db import get_db
from tranquil.results import Outcome, raise_for_outcome
from tranquil.schemas import SignupRequest, LoginRequest, AuthResponse, UserPublic
from tranquil.services import credential_store
from tranquil.services.auth_service import TokenService, get_token_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_in: SignupRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    # 이메일 중복이면 409, DB 오류면 500
    result = await credential_store.create_user(db, user_in.email, user_in.name, user_in.password)
    if not result.ok:
        logger.info("Signup rejected for %s: %s", user_in.email, result.outcome.value)
    user = raise_for_outcome(result)

    token = tokens.issue_token(user.id, user.email)
    return AuthResponse(
        message="Account created successfully",
        token=token,
        user=UserPublic.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    form: LoginRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    result = await credential_store.authenticate(db, form.email, form.password)
    if result.outcome is Outcome.NOT_FOUND:
        logger.info("Failed login for %s", form.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = raise_for_outcome(result)

    logger.info("User id=%s logged in", user.id)
    return AuthResponse(
        message="Login successful",
        token=tokens.issue_token(user.id, user.email),
        user=UserPublic.model_validate(user),
    )
