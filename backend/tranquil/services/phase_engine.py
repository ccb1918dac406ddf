"""Breathing phase engine.

A small single-threaded state machine that walks a technique's
inhale -> hold -> exhale phases for its number of cycles. It knows nothing
about timers or rendering: the host calls :meth:`BreathingEngine.tick` once
per second while an exercise runs (see ``breathing_timer``).
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from tranquil.services.techniques import (
    CATALOG, Technique, TechniqueProfile, parse_technique,
)

EXPANDED_SCALE = 1.5
CONTRACTED_SCALE = 1.0


class Phase(str, Enum):
    INHALE = "inhale"
    HOLD = "hold"
    EXHALE = "exhale"


class EngineStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class InvalidTransitionError(RuntimeError):
    pass


@dataclass(frozen=True)
class ExerciseSummary:
    technique: Technique
    duration_seconds: int
    cycles_completed: int


@dataclass(frozen=True)
class TickResult:
    phase: Phase
    seconds_remaining: int
    phase_changed: bool = False
    summary: Optional[ExerciseSummary] = None

    @property
    def completed(self) -> bool:
        return self.summary is not None


@dataclass(frozen=True)
class PhaseEngineState:
    technique: Technique
    status: EngineStatus
    current_phase: Phase
    seconds_remaining: int
    cycles_completed: int
    total_sessions_completed: int
    scale: float

    @property
    def is_running(self) -> bool:
        return self.status is EngineStatus.RUNNING


def scale_for_phase(phase: Phase) -> float:
    if phase is Phase.EXHALE:
        return CONTRACTED_SCALE
    return EXPANDED_SCALE


class BreathingEngine:
    def __init__(self, technique: Union[Technique, str] = Technique.BOX):
        self._technique = parse_technique(technique)
        self.status = EngineStatus.IDLE
        self.current_phase = Phase.INHALE
        self.seconds_remaining = 0
        self.cycles_completed = 0
        self.total_sessions_completed = 0
        self.last_summary: Optional[ExerciseSummary] = None
        self._elapsed = 0

    @property
    def technique(self) -> Technique:
        return self._technique

    @property
    def profile(self) -> TechniqueProfile:
        return CATALOG[self._technique]

    @property
    def is_running(self) -> bool:
        return self.status is EngineStatus.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.status is EngineStatus.PAUSED

    @property
    def scale(self) -> float:
        return scale_for_phase(self.current_phase)

    def snapshot(self) -> PhaseEngineState:
        return PhaseEngineState(
            technique=self._technique,
            status=self.status,
            current_phase=self.current_phase,
            seconds_remaining=self.seconds_remaining,
            cycles_completed=self.cycles_completed,
            total_sessions_completed=self.total_sessions_completed,
            scale=self.scale,
        )

    def start(self) -> None:
        # 첫 사이클에서 일시정지한 경우에는 이어하기 대신 처음부터 다시 시작
        restartable = self.status is EngineStatus.PAUSED and self.cycles_completed == 0
        if self.status is not EngineStatus.IDLE and not restartable:
            raise InvalidTransitionError(f"cannot start while {self.status.value}")
        self.cycles_completed = 0
        self._elapsed = 0
        self.current_phase = Phase.INHALE
        self.seconds_remaining = self.profile.inhale_seconds
        self.status = EngineStatus.RUNNING

    def pause(self) -> None:
        if self.status is not EngineStatus.RUNNING:
            raise InvalidTransitionError(f"cannot pause while {self.status.value}")
        self.status = EngineStatus.PAUSED

    def resume(self) -> None:
        if self.status is not EngineStatus.PAUSED:
            raise InvalidTransitionError(f"cannot resume while {self.status.value}")
        if self.cycles_completed == 0:
            raise InvalidTransitionError("cannot resume before the first cycle completes; start again")
        self.status = EngineStatus.RUNNING

    def reset(self) -> None:
        self.status = EngineStatus.IDLE
        self.current_phase = Phase.INHALE
        self.seconds_remaining = 0
        self.cycles_completed = 0
        self._elapsed = 0

    def change_technique(self, technique: Union[Technique, str]) -> None:
        selected = parse_technique(technique)
        self.reset()
        self._technique = selected

    def tick(self) -> TickResult:
        """Advance one second. A no-op unless the engine is running."""
        if self.status is not EngineStatus.RUNNING:
            return TickResult(self.current_phase, self.seconds_remaining)

        self._elapsed += 1
        self.seconds_remaining -= 1
        if self.seconds_remaining > 0:
            return TickResult(self.current_phase, self.seconds_remaining)
        return self._advance()

    def _advance(self) -> TickResult:
        profile = self.profile
        if self.current_phase is Phase.INHALE:
            self._enter(Phase.HOLD, profile.effective_hold_seconds)
        elif self.current_phase is Phase.HOLD:
            self._enter(Phase.EXHALE, profile.exhale_seconds)
        elif self.cycles_completed < profile.cycle_count - 1:
            self.cycles_completed += 1
            self._enter(Phase.INHALE, profile.inhale_seconds)
        else:
            return self._complete()
        return TickResult(self.current_phase, self.seconds_remaining, phase_changed=True)

    def _enter(self, phase: Phase, seconds: int) -> None:
        self.current_phase = phase
        self.seconds_remaining = seconds

    def _complete(self) -> TickResult:
        summary = ExerciseSummary(
            technique=self._technique,
            duration_seconds=self._elapsed,
            cycles_completed=self.profile.cycle_count,
        )
        self.total_sessions_completed += 1
        self.last_summary = summary
        self.reset()
        return TickResult(self.current_phase, self.seconds_remaining, phase_changed=True, summary=summary)
