# -*- coding: utf-8 -*-

import logging
from enum import Enum
from typing import Optional

from core.timer_engine import TimerEngine
from domain.models import LoadStatus, PersistedSnapshot, clamp_index

logger = logging.getLogger(__name__)


class RecoveryOutcome(str, Enum):
    FRESH = "fresh"  # nothing stored
    RESUMED = "resumed"  # caught up, still running mid-phase
    RESTORED = "restored"  # restored as-is, not running
    FINISHED = "finished"  # caught up past the last phase
    DISCARDED = "discarded"  # stored state was corrupt


def _discard(engine: TimerEngine, store, error: Optional[Exception]) -> RecoveryOutcome:
    logger.warning("Timer state restore failed, clearing corrupted data: %s", error)
    store.clear()
    engine.set_phase(0, skip_persist=True)
    engine.state.running = False
    engine.state.last_tick = None
    engine.render()
    return RecoveryOutcome.DISCARDED


def catch_up(phase_index: int, remaining: float, elapsed: float, durations_sec) -> tuple:
    """
    Replay `elapsed` seconds against the schedule starting at
    (phase_index, remaining). Phases passed through are consumed whole.

    Returns (phase_index, remaining); phase_index == len(durations_sec)
    means the schedule ran out.
    """
    count = len(durations_sec)
    idx = phase_index
    while elapsed > 0 and idx < count:
        if remaining > elapsed:
            remaining -= elapsed
            elapsed = 0
        else:
            elapsed -= remaining
            idx += 1
            if idx >= count:
                remaining = 0.0
                break
            remaining = durations_sec[idx]
    return idx, remaining


def _apply(engine: TimerEngine, snap: PersistedSnapshot, now_ms: float) -> RecoveryOutcome:
    # configured minutes first so duration lookups below see them
    engine.durations.restore(snap.durations_minutes)

    count = len(engine.phases)
    idx = clamp_index(snap.phase_index, count)
    remaining = snap.remaining_sec
    st = engine.state

    if snap.running and remaining is not None:
        elapsed = max(0.0, now_ms - snap.saved_at_ms) / 1000.0 if snap.saved_at_ms else 0.0
        idx, remaining = catch_up(idx, remaining, elapsed, engine.durations.durations_sec())

        if idx >= count:
            engine.set_phase(count - 1, keep_progress=True, remaining=0.0, skip_persist=True)
            st.running = False
            st.last_tick = None
            engine.render()
            engine.persist(force=True)
            logger.info("Schedule finished while closed (%.1fs elapsed)", elapsed)
            return RecoveryOutcome.FINISHED

        engine.set_phase(idx, keep_progress=True, remaining=remaining, skip_persist=True)
        st.running = st.remaining_sec > 0
        st.last_tick = None
        engine.render()
        engine.persist(force=True)
        if st.running:
            engine.arm()
            logger.info("Resumed %r with %.1fs remaining", engine.phase.name, st.remaining_sec)
            return RecoveryOutcome.RESUMED
        return RecoveryOutcome.RESTORED

    if remaining is None:
        engine.set_phase(idx, skip_persist=True)
    else:
        engine.set_phase(idx, keep_progress=True, remaining=remaining, skip_persist=True)
    st.running = False
    st.last_tick = None
    engine.render()
    engine.persist(force=True)
    logger.info("Restored %r with %.1fs remaining", engine.phase.name, st.remaining_sec)
    return RecoveryOutcome.RESTORED


def recover(engine: TimerEngine, store, now_ms: Optional[float] = None) -> RecoveryOutcome:
    """
    Seed the engine from the stored snapshot, fast-forwarding a running
    timer through the wall-clock time that passed since it was saved.
    Never raises on bad stored data.
    """
    if now_ms is None:
        now_ms = engine.wall_clock_ms()

    result = store.load()
    if result.status is LoadStatus.ABSENT:
        engine.state.running = False
        engine.set_phase(0)
        return RecoveryOutcome.FRESH
    if result.status is LoadStatus.CORRUPT:
        return _discard(engine, store, result.error)

    try:
        return _apply(engine, result.snapshot, now_ms)
    except (TypeError, ValueError, OverflowError) as e:
        return _discard(engine, store, e)
