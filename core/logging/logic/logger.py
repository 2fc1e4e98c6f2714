"""
core/logging/logic/logger.py
============================

Thread-safe event logger with a SQLite backend.

Every feature reports user-visible events through ``logger.log(feature, event, ...)``.
The connection is opened lazily on first use, so importing this module never
touches the disk.
"""

from __future__ import annotations

import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from core.common.db_interface import create_sqlite_connection
from core.config.config_service import config_service
from core.logging.models.log_entry import LogEntry

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class Logger:
    """SQLite event log. One reused connection guarded by a lock."""

    def __init__(self, db_path: Path | str | None = None) -> None:
        self._lock = threading.RLock()
        self.db_path: Path = Path(db_path) if db_path is not None else config_service.database.logging
        self._conn: sqlite3.Connection | None = None

    # ------------------------------------------------------------------ #
    #  Connection management                                             #
    # ------------------------------------------------------------------ #
    def _get_connection(self) -> sqlite3.Connection:
        with self._lock:
            if self._conn is None:
                self._conn = create_sqlite_connection(self.db_path, check_same_thread=False)
                self._ensure_db(self._conn)
            return self._conn

    def close(self) -> None:
        """Close the database connection and release resources."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    # ------------------------------------------------------------------ #
    #  Public API                                                        #
    # ------------------------------------------------------------------ #
    def log(
        self,
        feature: str,
        event: str,
        *,
        username: Optional[str] = None,
        level: str = "INFO",
        reference_id: Optional[str] = None,
        message: Optional[str] = None,
    ) -> LogEntry:
        """Persist one entry and return it."""
        level = level.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level '{level}'")

        entry = LogEntry(
            id=None,
            timestamp=datetime.now(timezone.utc),
            log_level=level,
            username=username,
            feature=feature,
            event=event,
            reference_id=reference_id,
            message=message,
        )
        with self._lock:
            conn = self._get_connection()
            with conn:
                cur = conn.execute(
                    """
                    INSERT INTO logs
                        (timestamp, username, feature, event,
                         reference_id, message, log_level)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        entry.timestamp.isoformat(),
                        entry.username,
                        entry.feature,
                        entry.event,
                        entry.reference_id,
                        entry.message,
                        entry.log_level,
                    ),
                )
            entry.id = cur.lastrowid
        return entry

    def fetch_logs(self, limit: int = 100) -> List[LogEntry]:
        return self.query_logs(limit=limit)

    def query_logs(
        self,
        *,
        feature: Optional[str] = None,
        event: Optional[str] = None,
        reference_id: Optional[str] = None,
        level: Optional[str] = None,
        limit: int = 1_000,
    ) -> List[LogEntry]:
        query = "SELECT * FROM logs WHERE 1=1"
        params: list[object] = []

        if feature is not None:
            query += " AND feature = ?"
            params.append(feature)
        if event is not None:
            query += " AND event = ?"
            params.append(event)
        if reference_id is not None:
            query += " AND reference_id = ?"
            params.append(reference_id)
        if level is not None:
            query += " AND log_level = ?"
            params.append(level.upper())

        query += " ORDER BY id DESC LIMIT ?"
        params.append(limit)

        with self._lock:
            rows = self._get_connection().execute(query, params).fetchall()
        return [LogEntry.from_dict(dict(row)) for row in rows]

    def clear_logs(self) -> None:
        with self._lock:
            conn = self._get_connection()
            with conn:
                conn.execute("DELETE FROM logs")

    # ------------------------------------------------------------------ #
    #  Internal helpers                                                  #
    # ------------------------------------------------------------------ #
    @staticmethod
    def _ensure_db(conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                timestamp TEXT NOT NULL,
                username TEXT,
                feature TEXT NOT NULL,
                event TEXT NOT NULL,
                reference_id TEXT,
                message TEXT,
                log_level TEXT NOT NULL DEFAULT 'INFO'
            )
            """
        )
        conn.commit()


# --------------------------------------------------------------------------- #
#  Global instance                                                            #
# --------------------------------------------------------------------------- #
logger: Logger = Logger()
