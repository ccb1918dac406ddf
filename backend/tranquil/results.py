from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from fastapi import HTTPException, status

T = TypeVar("T")


class Outcome(str, Enum):
    OK = "ok"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


_STATUS_FOR_OUTCOME = {
    Outcome.VALIDATION: status.HTTP_400_BAD_REQUEST,
    Outcome.CONFLICT: status.HTTP_409_CONFLICT,
    Outcome.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    Outcome.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

GENERIC_FAILURE_MESSAGE = "Internal server error"


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """
    저장소 작업의 결과. 성공이면 value를, 실패면 outcome과 message를 담습니다.
    """
    outcome: Outcome
    value: Optional[T] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK

    @classmethod
    def success(cls, value: T) -> "StoreResult[T]":
        return cls(Outcome.OK, value=value)

    @classmethod
    def validation(cls, message: str) -> "StoreResult[T]":
        return cls(Outcome.VALIDATION, message=message)

    @classmethod
    def conflict(cls, message: str) -> "StoreResult[T]":
        return cls(Outcome.CONFLICT, message=message)

    @classmethod
    def not_found(cls, message: str) -> "StoreResult[T]":
        return cls(Outcome.NOT_FOUND, message=message)

    @classmethod
    def internal(cls, message: str = GENERIC_FAILURE_MESSAGE) -> "StoreResult[T]":
        return cls(Outcome.INTERNAL, message=message)


def raise_for_outcome(result: StoreResult[T]) -> T:
    """성공이면 값을 돌려주고, 실패면 outcome에 맞는 HTTPException을 던집니다."""
    if result.ok:
        return result.value
    if result.outcome is Outcome.INTERNAL:
        # 내부 오류의 상세 내용은 응답에 노출하지 않음
        raise HTTPException(status_code=_STATUS_FOR_OUTCOME[result.outcome], detail=GENERIC_FAILURE_MESSAGE)
    raise HTTPException(status_code=_STATUS_FOR_OUTCOME[result.outcome], detail=result.message)
