# storage/repos.py
#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from typing import Optional

from storage.db import Database


class AppStateRepo:
    def __init__(self, db: Database):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        row = self.db.conn.execute(
            "SELECT value FROM app_state WHERE key=?",
            (key,),
        ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        self.db.conn.execute(
            """
            INSERT INTO app_state(key, value) VALUES(?, ?)
            ON CONFLICT(key) DO UPDATE SET value=excluded.value
            """,
            (key, value),
        )
        self.db.conn.commit()

    def delete(self, key: str) -> None:
        self.db.conn.execute("DELETE FROM app_state WHERE key=?", (key,))
        self.db.conn.commit()

    def probe(self, key: str = "__storage_test__") -> None:
        """Write then delete a throwaway row. Raises sqlite3.Error if the slot is unusable."""
        self.set(key, key)
        self.delete(key)
