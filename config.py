# -*- coding: utf-8 -*-

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_DB_PATH = "class_timer.db"
DEFAULT_STORAGE_KEY = "tech-class-timer"
DEFAULT_FRAME_MS = 16


@dataclass(frozen=True)
class Settings:
    db_path: str = DEFAULT_DB_PATH
    storage_key: str = DEFAULT_STORAGE_KEY
    log_level: str = "INFO"
    frame_ms: int = DEFAULT_FRAME_MS


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return max(1, int(raw))
    except ValueError:
        return default


def load_settings(dotenv_path: str = ".env") -> Settings:
    load_dotenv(dotenv_path=dotenv_path)
    return Settings(
        db_path=os.getenv("CLASS_TIMER_DB") or DEFAULT_DB_PATH,
        storage_key=os.getenv("CLASS_TIMER_STORAGE_KEY") or DEFAULT_STORAGE_KEY,
        log_level=(os.getenv("CLASS_TIMER_LOG_LEVEL") or "INFO").upper(),
        frame_ms=_int_env("CLASS_TIMER_FRAME_MS", DEFAULT_FRAME_MS),
    )
