from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tranquil.db import get_db
from tranquil.results import raise_for_outcome
from tranquil.schemas import ProfileResponse, ProfileUpdate, UserProfile
from tranquil.services import credential_store
from tranquil.services.auth_service import TokenClaims, get_current_identity

# user 라우터 정의
router = APIRouter(prefix="/api/user", tags=["user"])


# [1] 프로필 조회
@router.get("/profile", response_model=ProfileResponse)
async def get_user_profile(
    identity: TokenClaims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """
    토큰의 사용자 id로 프로필을 조회합니다. 계정이 없으면 404.
    """
    user = raise_for_outcome(await credential_store.get_user_by_id(db, identity.subject_id))
    return ProfileResponse(message="Profile retrieved successfully", user=UserProfile.model_validate(user))


# [2] 프로필 업데이트 (이름, 아바타, 소개)
@router.put("/profile", response_model=ProfileResponse)
async def update_user_profile(
    profile_in: ProfileUpdate,
    identity: TokenClaims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    user = raise_for_outcome(await credential_store.get_user_by_id(db, identity.subject_id))
    update_data = profile_in.model_dump(exclude_unset=True)
    user = raise_for_outcome(await credential_store.update_profile(db, user, **update_data))
    return ProfileResponse(message="Profile updated successfully", user=UserProfile.model_validate(user))
