# -*- coding: utf-8 -*-

import logging
import time
from typing import Callable, List, Optional

from core.recovery import RecoveryOutcome, recover
from core.timer_engine import TimerEngine, epoch_ms
from domain.models import RenderFrame, TimerState
from services.duration_source import DurationSource
from storage.repos import AppStateRepo
from storage.snapshot_store import STORAGE_KEY, SnapshotStore

logger = logging.getLogger(__name__)


class TimerService:
    """
    Orchestrates one timer session:
    - SnapshotStore over the app_state slot
    - TimerEngine wired to durations, store and scheduler
    - start-up recovery
    - Callbacks for UI
    """

    def __init__(
        self,
        state_repo: AppStateRepo,
        durations: DurationSource,
        scheduler,
        storage_key: str = STORAGE_KEY,
        clock: Callable[[], float] = time.monotonic,
        wall_clock_ms: Callable[[], float] = epoch_ms,
    ):
        self.durations = durations
        self.store = SnapshotStore(state_repo, key=storage_key)
        self.engine = TimerEngine(
            durations,
            self.store,
            scheduler,
            on_render=self._emit_render,
            clock=clock,
            wall_clock_ms=wall_clock_ms,
        )

        self._on_render: List[Callable[[RenderFrame], None]] = []
        self._on_state_change: Optional[Callable[[TimerState], None]] = None

    # ----- Callbacks -----
    def add_render_listener(self, fn: Callable[[RenderFrame], None]) -> None:
        self._on_render.append(fn)

    def set_on_state_change(self, fn: Callable[[TimerState], None]) -> None:
        self._on_state_change = fn

    def _emit_render(self, frame: RenderFrame) -> None:
        for fn in self._on_render:
            fn(frame)

    def _emit_state_change(self) -> None:
        if self._on_state_change:
            self._on_state_change(self.engine.snapshot())

    # ----- Public API -----
    def boot(self, now_ms: Optional[float] = None) -> RecoveryOutcome:
        outcome = recover(self.engine, self.store, now_ms=now_ms)
        logger.info("Timer recovered: %s", outcome.value)
        self._emit_state_change()
        return outcome

    def get_frame(self) -> RenderFrame:
        return self.engine.frame()

    def get_state(self) -> TimerState:
        return self.engine.snapshot()

    @property
    def storage_available(self) -> bool:
        return self.store.available

    def start(self) -> None:
        self.engine.start()
        self._emit_state_change()

    def pause(self) -> None:
        self.engine.pause()
        self._emit_state_change()

    def toggle(self) -> None:
        if self.engine.state.running:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        self.engine.reset_to_start()
        self._emit_state_change()

    def next_phase(self) -> None:
        self.engine.advance_manually()
        self._emit_state_change()

    def duration_changed(self, index: int) -> None:
        self.engine.on_duration_edited(index)
        self._emit_state_change()

    def visibility_lost(self) -> None:
        self.engine.on_visibility_lost()
