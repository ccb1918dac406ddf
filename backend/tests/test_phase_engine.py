import pytest

from tranquil.services.phase_engine import (
    BreathingEngine, EngineStatus, InvalidTransitionError, Phase,
    CONTRACTED_SCALE, EXPANDED_SCALE,
)
from tranquil.services.techniques import Technique, UnknownTechniqueError


def tick_n(engine, n):
    result = None
    for _ in range(n):
        result = engine.tick()
    return result


def test_new_engine_is_idle():
    engine = BreathingEngine()
    state = engine.snapshot()
    assert state.status is EngineStatus.IDLE
    assert not state.is_running
    assert state.technique is Technique.BOX
    assert state.cycles_completed == 0
    assert state.seconds_remaining == 0
    assert state.total_sessions_completed == 0


def test_start_enters_inhale():
    engine = BreathingEngine("box")
    engine.start()
    assert engine.is_running
    assert engine.current_phase is Phase.INHALE
    assert engine.seconds_remaining == 4
    assert engine.cycles_completed == 0


def test_box_phase_sequence():
    engine = BreathingEngine("box")
    engine.start()

    result = tick_n(engine, 3)
    assert engine.current_phase is Phase.INHALE
    assert engine.seconds_remaining == 1
    assert not result.phase_changed

    result = engine.tick()
    assert result.phase_changed
    assert (engine.current_phase, engine.seconds_remaining) == (Phase.HOLD, 4)

    tick_n(engine, 4)
    assert (engine.current_phase, engine.seconds_remaining) == (Phase.EXHALE, 4)

    tick_n(engine, 4)
    assert (engine.current_phase, engine.seconds_remaining) == (Phase.INHALE, 4)
    assert engine.cycles_completed == 1


def test_box_completes_after_five_cycles():
    engine = BreathingEngine("box")
    engine.start()

    result = tick_n(engine, 5 * 12 - 1)
    assert engine.is_running
    assert engine.cycles_completed == 4
    assert engine.current_phase is Phase.EXHALE
    assert not result.completed

    result = engine.tick()
    assert result.completed
    assert engine.total_sessions_completed == 1
    assert engine.status is EngineStatus.IDLE
    assert engine.cycles_completed == 0
    assert engine.current_phase is Phase.INHALE
    assert engine.seconds_remaining == 0

    summary = result.summary
    assert summary == engine.last_summary
    assert summary.technique is Technique.BOX
    assert summary.duration_seconds == 60
    assert summary.cycles_completed == 5


def test_completion_does_not_restart():
    engine = BreathingEngine("box")
    engine.start()
    tick_n(engine, 60)
    assert engine.status is EngineStatus.IDLE

    result = tick_n(engine, 10)
    assert engine.total_sessions_completed == 1
    assert not result.completed
    assert engine.seconds_remaining == 0


def test_lifetime_counter_accumulates_across_runs():
    engine = BreathingEngine("478")
    for _ in range(2):
        engine.start()
        tick_n(engine, engine.profile.total_seconds)
    assert engine.total_sessions_completed == 2


def test_zero_hold_lasts_one_tick():
    engine = BreathingEngine("deep")
    engine.start()
    tick_n(engine, 4)
    assert (engine.current_phase, engine.seconds_remaining) == (Phase.HOLD, 1)

    engine.tick()
    assert (engine.current_phase, engine.seconds_remaining) == (Phase.EXHALE, 6)


def test_deep_total_duration_counts_hold_floor():
    engine = BreathingEngine("deep")
    engine.start()
    result = tick_n(engine, (4 + 1 + 6) * 5)
    assert result.completed
    assert result.summary.duration_seconds == 55


def test_pause_freezes_phase_and_time():
    engine = BreathingEngine("box")
    engine.start()
    tick_n(engine, 18)
    assert engine.cycles_completed == 1
    before = (engine.current_phase, engine.seconds_remaining, engine.cycles_completed)

    engine.pause()
    assert engine.is_paused
    tick_n(engine, 30)
    assert (engine.current_phase, engine.seconds_remaining, engine.cycles_completed) == before

    engine.resume()
    assert engine.is_running
    assert (engine.current_phase, engine.seconds_remaining) == before[:2]
    engine.tick()
    assert engine.seconds_remaining == before[1] - 1


@pytest.mark.parametrize("ticks", [0, 2, 5, 9, 30])
def test_reset_returns_to_idle_from_any_point(ticks):
    engine = BreathingEngine("478")
    engine.start()
    tick_n(engine, ticks)
    engine.reset()
    assert engine.status is EngineStatus.IDLE
    assert engine.cycles_completed == 0
    assert engine.seconds_remaining == 0
    assert engine.current_phase is Phase.INHALE


def test_reset_while_paused_keeps_lifetime_count():
    engine = BreathingEngine("box")
    engine.start()
    tick_n(engine, 60)
    engine.start()
    tick_n(engine, 3)
    engine.pause()
    engine.reset()
    assert engine.status is EngineStatus.IDLE
    assert engine.total_sessions_completed == 1


def test_invalid_transitions_raise():
    engine = BreathingEngine()
    with pytest.raises(InvalidTransitionError):
        engine.pause()
    with pytest.raises(InvalidTransitionError):
        engine.resume()

    engine.start()
    with pytest.raises(InvalidTransitionError):
        engine.start()
    with pytest.raises(InvalidTransitionError):
        engine.resume()

    tick_n(engine, 12)
    engine.pause()
    with pytest.raises(InvalidTransitionError):
        engine.start()
    with pytest.raises(InvalidTransitionError):
        engine.pause()


def test_pause_in_first_cycle_cannot_resume():
    engine = BreathingEngine("box")
    engine.start()
    tick_n(engine, 2)
    engine.pause()
    assert engine.cycles_completed == 0

    with pytest.raises(InvalidTransitionError):
        engine.resume()
    assert engine.is_paused
    assert engine.seconds_remaining == 2


def test_start_from_pause_in_first_cycle_restarts_run():
    engine = BreathingEngine("box")
    engine.start()
    tick_n(engine, 6)
    engine.pause()
    assert engine.current_phase is Phase.HOLD

    engine.start()
    assert engine.is_running
    assert engine.current_phase is Phase.INHALE
    assert engine.seconds_remaining == 4
    assert engine.cycles_completed == 0

    result = tick_n(engine, 60)
    assert result.completed
    assert result.summary.duration_seconds == 60


def test_change_technique_resets_and_switches_profile():
    engine = BreathingEngine("box")
    engine.start()
    tick_n(engine, 5)
    engine.change_technique(Technique.FOUR_SEVEN_EIGHT)
    assert engine.status is EngineStatus.IDLE
    assert engine.cycles_completed == 0
    assert engine.technique is Technique.FOUR_SEVEN_EIGHT

    engine.start()
    assert engine.seconds_remaining == 4
    tick_n(engine, 4)
    assert (engine.current_phase, engine.seconds_remaining) == (Phase.HOLD, 7)


def test_change_to_unknown_technique_leaves_engine_untouched():
    engine = BreathingEngine("box")
    engine.start()
    engine.tick()
    with pytest.raises(UnknownTechniqueError):
        engine.change_technique("square")
    assert engine.is_running
    assert engine.technique is Technique.BOX
    assert engine.seconds_remaining == 3


def test_unknown_technique_on_construction():
    with pytest.raises(UnknownTechniqueError):
        BreathingEngine("triangle")


def test_scale_follows_phase():
    engine = BreathingEngine("box")
    engine.start()
    assert engine.scale == EXPANDED_SCALE
    tick_n(engine, 4)
    assert engine.current_phase is Phase.HOLD
    assert engine.scale == EXPANDED_SCALE
    tick_n(engine, 4)
    assert engine.current_phase is Phase.EXHALE
    assert engine.scale == CONTRACTED_SCALE
    assert engine.snapshot().scale == CONTRACTED_SCALE
