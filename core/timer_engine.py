# -*- coding: utf-8 -*-

import logging
import math
import time
from dataclasses import replace
from typing import Any, Callable, Optional, Sequence

from domain.models import PHASES, PersistedSnapshot, Phase, RenderFrame, TimerState, clamp_index

logger = logging.getLogger(__name__)

# remaining-time comparisons tolerate frame jitter
EPSILON_SEC = 0.01
PERSIST_INTERVAL_SEC = 1.0


def epoch_ms() -> float:
    return time.time() * 1000.0


def format_time(seconds: float) -> str:
    total = max(0, int(math.floor(seconds)))
    m = total // 60
    s = total % 60
    return f"{m:02d}:{s:02d}"


def percent_complete(remaining_sec: float, duration_sec: float) -> float:
    if duration_sec <= 0:
        return 0.0
    pct = 100.0 * (1.0 - remaining_sec / duration_sec)
    return min(100.0, max(0.0, pct))


class TimerEngine:
    """
    Phase countdown state machine (no Tkinter).

    Collaborators are injected:
    - durations: DurationSource (minutes_for / as_snapshot)
    - store: SnapshotStore (save / available)
    - scheduler: request_tick(callback) -> handle, cancel_tick(handle);
      the callback receives a monotonic timestamp in seconds
    - on_render: receives a RenderFrame after every state mutation
    """

    def __init__(
        self,
        durations,
        store,
        scheduler,
        on_render: Optional[Callable[[RenderFrame], None]] = None,
        clock: Callable[[], float] = time.monotonic,
        wall_clock_ms: Callable[[], float] = epoch_ms,
        phases: Sequence[Phase] = PHASES,
    ):
        self.durations = durations
        self.store = store
        self.scheduler = scheduler
        self.on_render = on_render
        self.clock = clock
        self.wall_clock_ms = wall_clock_ms
        self.phases = tuple(phases)

        self.state = TimerState()
        self._tick_handle: Any = None
        self._last_persist: Optional[float] = None

    # ----- Read side -----
    @property
    def phase(self) -> Phase:
        return self.phases[self.state.phase_index]

    @property
    def is_last_phase(self) -> bool:
        return self.state.phase_index >= len(self.phases) - 1

    @property
    def is_finished(self) -> bool:
        st = self.state
        return self.is_last_phase and (not st.running) and st.remaining_sec <= 0

    @property
    def tick_pending(self) -> bool:
        return self._tick_handle is not None

    def snapshot(self) -> TimerState:
        return replace(self.state)

    def frame(self) -> RenderFrame:
        st = self.state
        pct = percent_complete(st.remaining_sec, st.duration_sec)
        return RenderFrame(
            formatted_time=format_time(st.remaining_sec),
            percent_complete=pct,
            phase_name=self.phase.name,
            progress_value=int(round(pct)),
        )

    def render(self) -> None:
        if self.on_render:
            self.on_render(self.frame())

    # ----- Persistence -----
    def persist(self, force: bool = False) -> None:
        if not self.store.available:
            return
        now = self.clock()
        if (
            self.state.running
            and not force
            and self._last_persist is not None
            and now - self._last_persist < PERSIST_INTERVAL_SEC
        ):
            return
        self._last_persist = now
        self.store.save(
            PersistedSnapshot(
                phase_index=self.state.phase_index,
                remaining_sec=max(0.0, self.state.remaining_sec),
                running=self.state.running,
                durations_minutes=self.durations.as_snapshot(),
                saved_at_ms=self.wall_clock_ms(),
            )
        )

    # ----- Tick loop -----
    def _schedule_tick(self) -> None:
        if self._tick_handle is None:
            self._tick_handle = self.scheduler.request_tick(self._on_frame)

    def _cancel_tick(self) -> None:
        if self._tick_handle is not None:
            self.scheduler.cancel_tick(self._tick_handle)
            self._tick_handle = None

    def arm(self) -> None:
        """Re-arm the tick loop after state was seeded externally (recovery)."""
        if self.state.running:
            self._schedule_tick()

    def _on_frame(self, now: float) -> None:
        self._tick_handle = None
        self.tick(now)

    def tick(self, now: float) -> None:
        st = self.state
        if not st.running:
            return

        # no baseline: this frame only establishes one
        if st.last_tick is None:
            st.last_tick = now
        dt = max(0.0, now - st.last_tick)
        st.last_tick = now
        st.remaining_sec = max(0.0, st.remaining_sec - dt)

        if st.remaining_sec <= EPSILON_SEC:
            nxt = st.phase_index + 1
            if nxt < len(self.phases):
                logger.info("Phase %r complete, moving to %r", self.phase.name, self.phases[nxt].name)
                self.set_phase(nxt, skip_persist=True)
                st.last_tick = now
            else:
                logger.info("Schedule complete")
                st.running = False
                st.remaining_sec = 0.0
                self._cancel_tick()
                self.render()
                self.persist(force=True)
                return

        self.render()
        self.persist()
        self._schedule_tick()

    # ----- Commands -----
    def set_phase(
        self,
        index: int,
        keep_progress: bool = False,
        remaining: Optional[float] = None,
        skip_persist: bool = False,
    ) -> None:
        st = self.state
        st.phase_index = clamp_index(index, len(self.phases))
        st.duration_sec = self.durations.minutes_for(st.phase_index) * 60.0
        if keep_progress and isinstance(remaining, (int, float)) and not isinstance(remaining, bool):
            st.remaining_sec = min(st.duration_sec, max(0.0, float(remaining)))
        else:
            st.remaining_sec = st.duration_sec
        st.last_tick = None
        self.render()
        if not skip_persist:
            self.persist(force=True)

    def start(self) -> None:
        st = self.state
        if st.running:
            return
        logger.debug("start: phase=%s remaining=%.2f", st.phase_index, st.remaining_sec)
        st.running = True
        st.last_tick = None
        self.render()
        self.persist(force=True)
        self._schedule_tick()

    def pause(self) -> None:
        st = self.state
        if not st.running:
            return
        logger.debug("pause: phase=%s remaining=%.2f", st.phase_index, st.remaining_sec)
        st.running = False
        st.last_tick = None
        self._cancel_tick()
        self.render()
        self.persist(force=True)

    def reset_to_start(self) -> None:
        logger.debug("reset to first phase")
        st = self.state
        st.running = False
        st.last_tick = None
        self._cancel_tick()
        self.set_phase(0)

    def advance_manually(self) -> None:
        st = self.state
        if self.is_last_phase:
            logger.debug("next on last phase: finishing")
            st.running = False
            st.remaining_sec = 0.0
            st.last_tick = None
            self._cancel_tick()
            self.render()
            self.persist(force=True)
            return

        was_running = st.running
        self.set_phase(st.phase_index + 1)
        st.running = was_running
        st.last_tick = None
        if was_running:
            self._schedule_tick()
        else:
            self._cancel_tick()

    def on_duration_edited(self, index: int) -> None:
        st = self.state
        index = clamp_index(index, len(self.phases))
        minutes = self.durations.minutes_for(index)
        if st.phase_index == index:
            st.duration_sec = minutes * 60.0
            if st.running:
                # keep elapsed progress; remaining never grows
                st.remaining_sec = min(st.remaining_sec, st.duration_sec)
            else:
                st.remaining_sec = st.duration_sec
            st.last_tick = None
            self.render()
        self.persist(force=True)

    def on_visibility_lost(self) -> None:
        if self.state.running:
            self.state.last_tick = None
