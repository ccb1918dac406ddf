import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from tranquil.services.phase_engine import (
    BreathingEngine, EngineStatus, ExerciseSummary, TickResult,
)

logger = logging.getLogger(__name__)

TickCallback = Callable[[TickResult], Union[None, Awaitable[None]]]
CompleteCallback = Callable[[ExerciseSummary], Union[None, Awaitable[Any]]]


async def _call(callback: Optional[Callable], arg) -> None:
    if callback is None:
        return
    result = callback(arg)
    if inspect.isawaitable(result):
        await result


class BreathingTimer:
    """
    엔진에 1초마다 tick을 공급하는 호스트 쪽 루프.
    완료된 운동은 자동 저장하지 않고 on_complete로 요약만 넘깁니다.
    """

    def __init__(
        self,
        engine: BreathingEngine,
        interval: float = 1.0,
        on_tick: Optional[TickCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
    ):
        self.engine = engine
        self.interval = interval
        self.on_tick = on_tick
        self.on_complete = on_complete
        self._stopped = False

    def stop(self) -> None:
        """run() 전에 호출해도 유효합니다. 멈춘 타이머는 다시 돌지 않습니다."""
        self._stopped = True

    async def run(self) -> Optional[ExerciseSummary]:
        """운동이 끝나면 요약을, stop()이나 reset()으로 중단되면 None을 돌려줍니다."""
        if self._stopped:
            return None
        if self.engine.status is EngineStatus.IDLE:
            self.engine.start()
        logger.debug("Breathing timer started (technique=%s)", self.engine.technique.value)

        while not self._stopped:
            await asyncio.sleep(self.interval)
            if self.engine.status is EngineStatus.IDLE:
                # 외부에서 reset()된 경우
                return None
            if self.engine.status is EngineStatus.PAUSED:
                continue

            result = self.engine.tick()
            await _call(self.on_tick, result)
            if result.completed:
                logger.info(
                    "Breathing exercise complete (technique=%s, %ss)",
                    result.summary.technique.value, result.summary.duration_seconds,
                )
                await _call(self.on_complete, result.summary)
                return result.summary
        return None
