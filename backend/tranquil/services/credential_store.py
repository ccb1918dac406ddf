import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tranquil.models import User
from tranquil.results import StoreResult
from tranquil.services.auth_service import hash_password, verify_password

logger = logging.getLogger(__name__)

EMAIL_IN_USE = "Email already in use"
USER_NOT_FOUND = "User not found"


async def _find_by_email(db: AsyncSession, email: str) -> Optional[User]:
    res = await db.execute(select(User).where(User.email == email))
    return res.scalar_one_or_none()


async def create_user(db: AsyncSession, email: str, name: str, password: str) -> StoreResult[User]:
    """비밀번호를 해시한 뒤 사용자를 생성합니다. 이메일 중복이면 conflict."""
    try:
        if await _find_by_email(db, email) is not None:
            return StoreResult.conflict(EMAIL_IN_USE)

        user = User(email=email, name=name, password_hash=hash_password(password))
        db.add(user)
        await db.commit()
        await db.refresh(user)
    except IntegrityError:
        # 동시에 들어온 가입 요청은 unique 제약이 최종적으로 걸러냄
        await db.rollback()
        return StoreResult.conflict(EMAIL_IN_USE)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error creating user")
        return StoreResult.internal()

    logger.info("Created user id=%s", user.id)
    return StoreResult.success(user)


async def get_user_by_email(db: AsyncSession, email: str) -> StoreResult[User]:
    try:
        user = await _find_by_email(db, email)
    except SQLAlchemyError:
        logger.exception("Error fetching user by email")
        return StoreResult.internal()
    if user is None:
        return StoreResult.not_found(USER_NOT_FOUND)
    return StoreResult.success(user)


async def get_user_by_id(db: AsyncSession, user_id: int) -> StoreResult[User]:
    try:
        user = await db.get(User, user_id)
    except SQLAlchemyError:
        logger.exception("Error fetching user id=%s", user_id)
        return StoreResult.internal()
    if user is None:
        return StoreResult.not_found(USER_NOT_FOUND)
    return StoreResult.success(user)


async def authenticate(db: AsyncSession, email: str, password: str) -> StoreResult[User]:
    """
    이메일로 조회 후 비밀번호를 검증합니다.
    존재하지 않는 이메일과 틀린 비밀번호는 같은 not_found 결과를 돌려줍니다.
    """
    result = await get_user_by_email(db, email)
    if not result.ok:
        return result
    user = result.value
    if not user.password_hash or not verify_password(password, user.password_hash):
        return StoreResult.not_found(USER_NOT_FOUND)
    return result


async def update_profile(
    db: AsyncSession,
    user: User,
    name: Optional[str] = None,
    avatar_url: Optional[str] = None,
    bio: Optional[str] = None,
) -> StoreResult[User]:
    update_data = {
        k: v for k, v in {"name": name, "avatar_url": avatar_url, "bio": bio}.items()
        if v is not None
    }
    if not update_data:
        return StoreResult.validation("Nothing to update")

    for field, value in update_data.items():
        setattr(user, field, value)
    try:
        await db.commit()
        await db.refresh(user)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error updating profile for user id=%s", user.id)
        return StoreResult.internal()
    return StoreResult.success(user)
