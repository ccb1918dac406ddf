from __future__ import annotations
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tranquil.db import get_db
from tranquil.results import raise_for_outcome
from tranquil.schemas import (
    BreathingSessionCreate, BreathingSessionCreateResponse, BreathingSessionInfo,
    BreathingSessionListResponse, TechniqueInfo, TechniqueListResponse,
)
from tranquil.services import session_store
from tranquil.services.auth_service import TokenClaims, get_current_identity
from tranquil.services.techniques import list_techniques

router = APIRouter(prefix="/api/breathing", tags=["breathing"])


@router.get("/techniques", response_model=TechniqueListResponse)
async def get_techniques():
    techniques = [
        TechniqueInfo(
            key=technique.value,
            name=profile.name,
            description=profile.description,
            inhale_seconds=profile.inhale_seconds,
            hold_seconds=profile.hold_seconds,
            exhale_seconds=profile.exhale_seconds,
            cycle_count=profile.cycle_count,
            total_seconds=profile.total_seconds,
        )
        for technique, profile in list_techniques()
    ]
    return TechniqueListResponse(message="Techniques retrieved successfully", techniques=techniques)


@router.get("/sessions", response_model=BreathingSessionListResponse)
async def get_my_sessions(
    identity: TokenClaims = Depends(get_current_identity),  # 💡 인증이 DB 세션보다 먼저
    db: AsyncSession = Depends(get_db),
):
    """현재 로그인한 사용자의 최근 30개 세션을 최신순으로 반환합니다."""
    sessions = raise_for_outcome(await session_store.list_recent_sessions(db, identity.subject_id))
    return BreathingSessionListResponse(
        message="Sessions retrieved successfully",
        sessions=[BreathingSessionInfo.model_validate(s) for s in sessions],
    )


@router.post("/sessions", response_model=BreathingSessionCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: BreathingSessionCreate,
    identity: TokenClaims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    session = raise_for_outcome(
        await session_store.record_session(
            db,
            user_id=identity.subject_id,
            technique=payload.technique,
            duration_seconds=payload.duration_seconds,
            cycles_completed=payload.cycles_completed,
            notes=payload.notes,
        )
    )
    return BreathingSessionCreateResponse(
        message="Session saved successfully",
        session=BreathingSessionInfo.model_validate(session),
    )
