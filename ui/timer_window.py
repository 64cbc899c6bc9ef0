# -*- coding: utf-8 -*-

import time
import tkinter as tk
from tkinter import ttk
from typing import Callable, List, Sequence

from domain.models import PHASES, RenderFrame, TimerState
from services.duration_source import MAX_MINUTES, MIN_MINUTES
from services.timer_service import TimerService


class TkScheduler:
    """Frame-cadence tick source on top of Tk's after()."""

    def __init__(self, widget: tk.Misc, frame_ms: int = 16):
        self.widget = widget
        self.frame_ms = frame_ms

    def request_tick(self, callback: Callable[[float], None]):
        return self.widget.after(self.frame_ms, lambda: callback(time.monotonic()))

    def cancel_tick(self, handle) -> None:
        try:
            self.widget.after_cancel(handle)
        except tk.TclError:
            pass


class DurationVar(tk.StringVar):
    """StringVar carrying the min/max bounds of its spinbox."""

    def __init__(self, master, value: str, min_value: int = MIN_MINUTES, max_value: int = MAX_MINUTES):
        super().__init__(master, value=value)
        self.min_value = min_value
        self.max_value = max_value


def make_duration_vars(master) -> List[DurationVar]:
    return [DurationVar(master, value=str(p.default_minutes)) for p in PHASES]


# widgets that already handle space themselves (typing, button activation)
_SPACE_OWNERS = (tk.Entry, ttk.Entry, tk.Button, ttk.Button)


def space_toggles(widget) -> bool:
    return not isinstance(widget, _SPACE_OWNERS)


class TimerWindow(ttk.Frame):
    def __init__(self, master, service: TimerService, duration_vars: Sequence[DurationVar]):
        super().__init__(master, padding=12)

        self.service = service
        self.duration_vars = list(duration_vars)

        self._build_ui()

        # wire callbacks from service -> window UI
        self.service.add_render_listener(self._render)
        self.service.set_on_state_change(self._on_state_change)

        top = self.winfo_toplevel()
        top.bind("<Unmap>", self._on_unmap)
        top.bind("<space>", self._on_space)

    def _build_ui(self):
        self.columnconfigure(0, weight=1)

        self.phase_var = tk.StringVar(value=PHASES[0].name)
        self.time_var = tk.StringVar(value="00:00")
        self.info_var = tk.StringVar(value="Ready")

        self.phase_label = ttk.Label(self, textvariable=self.phase_var, font=("Sans", 14, "bold"))
        self.phase_label.grid(row=0, column=0, sticky="w")

        self.time_label = ttk.Label(self, textvariable=self.time_var, font=("Sans", 48, "bold"))
        self.time_label.grid(row=1, column=0, sticky="w", pady=(6, 4))

        self.progress = ttk.Progressbar(self, orient="horizontal", mode="determinate", maximum=100)
        self.progress.grid(row=2, column=0, sticky="ew", pady=(0, 6))

        self.info_label = ttk.Label(self, textvariable=self.info_var)
        self.info_label.grid(row=3, column=0, sticky="w", pady=(0, 10))

        # duration inputs
        inputs = ttk.Frame(self)
        inputs.grid(row=4, column=0, sticky="w", pady=(0, 10))
        for phase, var in zip(PHASES, self.duration_vars):
            ttk.Label(inputs, text=f"{phase.name} (min)").grid(
                row=0, column=phase.index, sticky="w", padx=(0, 8)
            )
            spin = ttk.Spinbox(
                inputs,
                from_=var.min_value,
                to=var.max_value,
                width=5,
                textvariable=var,
                command=lambda i=phase.index: self.service.duration_changed(i),
            )
            spin.grid(row=1, column=phase.index, sticky="w", padx=(0, 8))
            # change + blur
            spin.bind("<Return>", lambda e, i=phase.index: self.service.duration_changed(i))
            spin.bind("<FocusOut>", lambda e, i=phase.index: self.service.duration_changed(i))

        btns = ttk.Frame(self)
        btns.grid(row=5, column=0, sticky="w")

        self.start_btn = ttk.Button(btns, text="Start", command=self.service.start)
        self.pause_btn = ttk.Button(btns, text="Pause", command=self.service.pause)
        self.reset_btn = ttk.Button(btns, text="Reset", command=self.service.reset)
        self.next_btn = ttk.Button(btns, text="Next", command=self.service.next_phase)

        self.start_btn.grid(row=0, column=0, padx=(0, 6))
        self.pause_btn.grid(row=0, column=1, padx=(0, 6))
        self.reset_btn.grid(row=0, column=2, padx=(0, 6))
        self.next_btn.grid(row=0, column=3)

    def _update_buttons(self, state: TimerState):
        if state.running:
            self.start_btn.state(["disabled"])
            self.pause_btn.state(["!disabled"])
        else:
            self.start_btn.state(["!disabled"])
            self.pause_btn.state(["disabled"])

    # ---- Service callbacks ----
    def _render(self, frame: RenderFrame):
        self.time_var.set(frame.formatted_time)
        self.phase_var.set(frame.phase_name)
        self.progress["value"] = frame.percent_complete
        # phase changes and completion happen inside ticks, not commands
        self._on_state_change(self.service.get_state())

    def _on_state_change(self, state: TimerState):
        if state.running:
            self.info_var.set("Running...")
        elif state.remaining_sec <= 0:
            self.info_var.set("Done")
        else:
            self.info_var.set("Paused" if state.remaining_sec < state.duration_sec else "Ready")
        if not self.service.storage_available:
            self.info_var.set(self.info_var.get() + " (not saved)")
        self._update_buttons(state)

    # ---- Window events ----
    def _on_unmap(self, event):
        # only the toplevel itself, not child widgets
        if event.widget is self.winfo_toplevel():
            self.service.visibility_lost()

    def _on_space(self, event):
        if not space_toggles(event.widget):
            return
        self.service.toggle()
