from __future__ import annotations
from typing import Optional, List
from pydantic import BaseModel, Field, EmailStr
from datetime import datetime


# 인증
class SignupRequest(BaseModel):
    """
    /api/auth/signup 요청 스키마.
    """
    name: str = Field(..., min_length=1)
    # EmailStr로 이메일 형식을 검증합니다.
    email: EmailStr
    # 해시하기 전에 최소 8자리를 강제합니다.
    password: str = Field(..., min_length=8)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserPublic(BaseModel):
    """
    비밀번호 해시 등 민감 정보를 제외한 공개 사용자 정보.
    """
    id: int
    email: str
    name: str
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserPublic


# 프로필
class UserProfile(UserPublic):
    bio: Optional[str] = None
    created_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    avatar_url: Optional[str] = None
    bio: Optional[str] = None


class ProfileResponse(BaseModel):
    message: str
    user: UserProfile


# 호흡 세션
class BreathingSessionCreate(BaseModel):
    technique: str = Field(..., min_length=1, max_length=64)
    duration_seconds: int = Field(..., gt=0)
    cycles_completed: Optional[int] = Field(0, ge=0)
    notes: Optional[str] = None


class BreathingSessionInfo(BaseModel):
    id: int
    user_id: int
    technique: str
    duration_seconds: int
    cycles_completed: int
    notes: Optional[str] = None
    completed_at: datetime

    class Config:
        from_attributes = True


class BreathingSessionListResponse(BaseModel):
    message: str
    sessions: List[BreathingSessionInfo]


class BreathingSessionCreateResponse(BaseModel):
    message: str
    session: BreathingSessionInfo


class TechniqueInfo(BaseModel):
    key: str
    name: str
    description: str
    inhale_seconds: int
    hold_seconds: int
    exhale_seconds: int
    cycle_count: int
    total_seconds: int


class TechniqueListResponse(BaseModel):
    message: str
    techniques: List[TechniqueInfo]
