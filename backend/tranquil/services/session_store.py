import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tranquil.models import BreathingSession
from tranquil.results import StoreResult

logger = logging.getLogger(__name__)

RECENT_SESSIONS_LIMIT = 30


async def record_session(
    db: AsyncSession,
    user_id: int,
    technique: str,
    duration_seconds: int,
    cycles_completed: int = 0,
    notes: Optional[str] = None,
    completed_at: Optional[datetime] = None,
) -> StoreResult[BreathingSession]:
    """완료된 호흡 세션 한 건을 저장합니다."""
    if not technique:
        return StoreResult.validation("Technique and duration are required")
    if duration_seconds is None or duration_seconds <= 0:
        return StoreResult.validation("Technique and duration are required")

    session = BreathingSession(
        user_id=user_id,
        technique=technique,
        duration_seconds=duration_seconds,
        cycles_completed=cycles_completed or 0,
        notes=notes or None,
    )
    if completed_at is not None:
        session.completed_at = completed_at

    try:
        db.add(session)
        await db.commit()
        await db.refresh(session)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error saving breathing session for user id=%s", user_id)
        return StoreResult.internal()
    return StoreResult.success(session)


async def list_recent_sessions(
    db: AsyncSession, user_id: int, limit: int = RECENT_SESSIONS_LIMIT
) -> StoreResult[List[BreathingSession]]:
    query = (
        select(BreathingSession)
        .where(BreathingSession.user_id == user_id)
        .order_by(BreathingSession.completed_at.desc(), BreathingSession.id.desc())
        .limit(limit)
    )
    try:
        result = await db.execute(query)
    except SQLAlchemyError:
        logger.exception("Error fetching breathing sessions for user id=%s", user_id)
        return StoreResult.internal()
    return StoreResult.success(list(result.scalars().all()))
