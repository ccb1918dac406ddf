"""Breathing technique catalog.

The set of techniques is closed: every member of :class:`Technique` maps to
exactly one :class:`TechniqueProfile`, and :func:`validate_catalog` is run at
application startup to make sure the table is complete and sane.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Union


class Technique(str, Enum):
    BOX = "box"
    DEEP = "deep"
    FOUR_SEVEN_EIGHT = "478"
    ALTERNATE = "alternate"


class UnknownTechniqueError(KeyError):
    pass


@dataclass(frozen=True)
class TechniqueProfile:
    name: str
    description: str
    inhale_seconds: int
    hold_seconds: int
    exhale_seconds: int
    cycle_count: int

    @property
    def effective_hold_seconds(self) -> int:
        # hold 0초 기법도 최소 1초 동안 hold 단계를 보여줌
        return max(self.hold_seconds, 1)

    @property
    def cycle_seconds(self) -> int:
        return self.inhale_seconds + self.effective_hold_seconds + self.exhale_seconds

    @property
    def total_seconds(self) -> int:
        return self.cycle_seconds * self.cycle_count


CATALOG: Dict[Technique, TechniqueProfile] = {
    Technique.BOX: TechniqueProfile(
        name="Box Breathing",
        description="Equal counts: inhale, hold, exhale, hold (4-4-4-4)",
        inhale_seconds=4, hold_seconds=4, exhale_seconds=4, cycle_count=5,
    ),
    Technique.DEEP: TechniqueProfile(
        name="Deep Breathing",
        description="Slow and deep breathing (4-0-6)",
        inhale_seconds=4, hold_seconds=0, exhale_seconds=6, cycle_count=5,
    ),
    Technique.FOUR_SEVEN_EIGHT: TechniqueProfile(
        name="4-7-8 Breathing",
        description="Calming technique (4-7-8)",
        inhale_seconds=4, hold_seconds=7, exhale_seconds=8, cycle_count=4,
    ),
    Technique.ALTERNATE: TechniqueProfile(
        name="Alternate Nostril",
        description="Balancing technique (4-4-4)",
        inhale_seconds=4, hold_seconds=4, exhale_seconds=4, cycle_count=5,
    ),
}


def parse_technique(key: Union[Technique, str]) -> Technique:
    if isinstance(key, Technique):
        return key
    try:
        return Technique(str(key))
    except ValueError:
        raise UnknownTechniqueError(key) from None


def get_technique(key: Union[Technique, str]) -> TechniqueProfile:
    return CATALOG[parse_technique(key)]


def list_techniques() -> List[tuple[Technique, TechniqueProfile]]:
    return [(technique, CATALOG[technique]) for technique in Technique]


def validate_catalog(catalog: Dict[Technique, TechniqueProfile] = CATALOG) -> None:
    """Raise ``ValueError`` if any technique is missing or has impossible timings."""
    missing = [t.value for t in Technique if t not in catalog]
    if missing:
        raise ValueError(f"No timing profile for techniques: {', '.join(missing)}")

    for technique, profile in catalog.items():
        if profile.inhale_seconds <= 0 or profile.exhale_seconds <= 0:
            raise ValueError(f"{technique.value}: inhale and exhale must be positive")
        if profile.hold_seconds < 0:
            raise ValueError(f"{technique.value}: hold must not be negative")
        if profile.cycle_count < 1:
            raise ValueError(f"{technique.value}: at least one cycle is required")
