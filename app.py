#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
import sqlite3
import tkinter as tk

from config import load_settings
from services.duration_source import DurationSource
from services.timer_service import TimerService
from storage.db import Database
from storage.repos import AppStateRepo
from ui.timer_window import TimerWindow, TkScheduler, make_duration_vars

logger = logging.getLogger(__name__)


def open_database(db_path: str) -> Database:
    try:
        db = Database(db_path=db_path)
        db.init_schema()
        return db
    except sqlite3.Error as e:
        logger.warning("Cannot open %s (%s); timer state will not survive a restart", db_path, e)
        db = Database(db_path=":memory:")
        db.init_schema()
        return db


def main():
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    db = open_database(settings.db_path)

    root = tk.Tk()
    root.title("Class Timer")

    duration_vars = make_duration_vars(root)
    service = TimerService(
        AppStateRepo(db),
        DurationSource(duration_vars),
        TkScheduler(root, frame_ms=settings.frame_ms),
        storage_key=settings.storage_key,
    )

    window = TimerWindow(root, service, duration_vars)
    window.pack(fill="both", expand=True)

    service.boot()
    try:
        root.mainloop()
    finally:
        db.close()


if __name__ == "__main__":
    main()
