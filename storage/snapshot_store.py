# -*- coding: utf-8 -*-

import json
import logging
import sqlite3

from domain.models import LoadResult, PersistedSnapshot
from storage.repos import AppStateRepo

logger = logging.getLogger(__name__)

STORAGE_KEY = "tech-class-timer"


class SnapshotStore:
    """
    Best-effort single-slot persistence for the timer snapshot.

    Availability is probed once. After the store is marked unavailable
    every save is skipped; it is never retried.
    """

    def __init__(self, repo: AppStateRepo, key: str = STORAGE_KEY):
        self.repo = repo
        self.key = key
        self._available = self._probe()

    @property
    def available(self) -> bool:
        return self._available

    def _probe(self) -> bool:
        try:
            self.repo.probe()
            return True
        except sqlite3.Error as e:
            logger.warning("Timer state storage unavailable, running session-only: %s", e)
            return False

    def _mark_unavailable(self, message: str, err: Exception) -> None:
        if self._available:
            self._available = False
            logger.warning("%s: %s", message, err)

    def save(self, snapshot: PersistedSnapshot) -> None:
        if not self._available:
            return
        try:
            self.repo.set(self.key, json.dumps(snapshot.to_dict()))
        except sqlite3.Error as e:
            self._mark_unavailable("Unable to persist timer state", e)

    def load(self) -> LoadResult:
        if not self._available:
            return LoadResult.absent()
        try:
            raw = self.repo.get(self.key)
        except sqlite3.Error as e:
            self._mark_unavailable("Unable to read timer state", e)
            return LoadResult.absent()

        if not raw:
            return LoadResult.absent()

        try:
            payload = json.loads(raw)
            return LoadResult.ok(PersistedSnapshot.from_dict(payload))
        except (ValueError, TypeError, OverflowError, RecursionError) as e:
            # json.JSONDecodeError is a ValueError; deep nesting overflows the decoder stack
            return LoadResult.corrupt(e)

    def clear(self) -> bool:
        try:
            self.repo.delete(self.key)
            return True
        except sqlite3.Error as e:
            logger.warning("Cannot clear stored timer state: %s", e)
            self._available = False
            return False
