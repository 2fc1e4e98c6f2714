# signature/logic/catalog_store.py
"""
PersistentCatalogStore – durable key/value storage for the signature catalog.

One SQLite table ``catalog(key, value)``; every value is a complete JSON
document. Reads deserialize the whole collection, writes replace the whole
value of one key inside one transaction. There are no partial updates and no
cross-key transactions. Two processes writing the same key are not
coordinated: the last writer wins.
"""
from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Callable, List, Optional, TypeVar

from cryptography.fernet import InvalidToken

from core.common.db_interface import SQLiteRepository
from core.config.config_service import config_service
from core.logging.logic.logger import Logger, logger as default_logger

from ..exceptions.errors import StorageError
from ..models.history_entry import HistoryEntry
from ..models.signature_record import SignatureRecord
from .encryption import CatalogCipher

log = logging.getLogger(__name__)

T = TypeVar("T")

SIGNATURES_KEY = "signatures"
HISTORY_KEY = "history"
GOV_CONNECTED_KEY = "govConnected"
DOCUMENTS_KEY = "documents"


class CatalogStore(SQLiteRepository):
    """
    Explicitly constructed repository passed to every component that needs it.

    Lifecycle: ``open()`` → reads/writes → ``flush()`` → ``close()``; also usable
    as a context manager. Using a closed store raises ``RuntimeError``.
    """

    def __init__(
        self,
        db_path: Path | str | None = None,
        *,
        history_limit: Optional[int] = None,
        encrypt_at_rest: Optional[bool] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        super().__init__(db_path if db_path is not None else config_service.database.catalog)
        limit = config_service.catalog.history_limit if history_limit is None else history_limit
        if limit < 1:
            raise ValueError("history_limit must be at least 1")
        self._history_limit = int(limit)
        self._encrypt = (
            config_service.catalog.encrypt_at_rest if encrypt_at_rest is None else bool(encrypt_at_rest)
        )
        self._logger = logger or default_logger
        self._cipher: Optional[CatalogCipher] = None

    # -------- Lifecycle ------------------------------------------------------
    def open(self) -> "CatalogStore":
        conn = self.connect()
        self._cipher = CatalogCipher(conn) if self._encrypt else None
        return self

    def flush(self) -> None:
        if self._conn is not None:
            self._conn.commit()

    def close(self) -> None:
        self.flush()
        self._cipher = None
        super().close()

    def __enter__(self) -> "CatalogStore":
        return self.open()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS catalog(
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            """
        )
        conn.commit()

    def _require_open(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Catalog store is not open.")
        return self._conn

    @property
    def history_limit(self) -> int:
        return self._history_limit

    # -------- Raw JSON per key ----------------------------------------------
    def read_json(self, key: str, default: Callable[[], T]) -> Any | T:
        """
        Deserialize the full value for *key*. Missing keys and unreadable
        values both yield ``default()``; the latter is logged as a StorageError.
        """
        row = self._require_open().execute(
            "SELECT value FROM catalog WHERE key=?", (key,)
        ).fetchone()
        if row is None:
            return default()
        try:
            return self._decode(row["value"])
        except StorageError as exc:
            log.warning("catalog key %r unreadable, using empty value: %s", key, exc)
            self._logger.log("Catalog", "StorageError", level="WARNING",
                             reference_id=key, message=str(exc))
            return default()

    def write_json(self, key: str, value: Any) -> None:
        """Serialize *value* and replace the stored value for *key* atomically."""
        text = self._encode(value)
        conn = self._require_open()
        with conn:
            conn.execute(
                "INSERT INTO catalog(key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                (key, text),
            )

    def _encode(self, value: Any) -> str:
        try:
            text = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Value is not JSON serializable: {exc}") from exc
        return self._cipher.encrypt_text(text) if self._cipher else text

    def _decode(self, stored: str) -> Any:
        try:
            text = self._cipher.decrypt_text(stored) if self._cipher else stored
            return json.loads(text)
        except (InvalidToken, json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise StorageError(f"Cannot deserialize catalog value: {exc!r}") from exc

    def _read_list(self, key: str, parse: Callable[[dict], T]) -> List[T]:
        raw = self.read_json(key, list)
        if not isinstance(raw, list):
            log.warning("catalog key %r is not a list, ignoring", key)
            return []
        items: List[T] = []
        for item in raw:
            try:
                items.append(parse(item))
            except (KeyError, TypeError, ValueError) as exc:
                log.warning("skipping malformed %s entry: %r", key, exc)
        return items

    # -------- Signatures -----------------------------------------------------
    def load_signatures(self) -> List[SignatureRecord]:
        return self._read_list(SIGNATURES_KEY, SignatureRecord.from_dict)

    def save_signatures(self, records: List[SignatureRecord]) -> None:
        self.write_json(SIGNATURES_KEY, [r.to_dict() for r in records])

    def append_signature(self, record: SignatureRecord) -> None:
        records = self.load_signatures()
        records.append(record)
        self.save_signatures(records)

    def get_signature(self, signature_id: str) -> Optional[SignatureRecord]:
        return next((r for r in self.load_signatures() if r.id == signature_id), None)

    def remove_signature(self, signature_id: str) -> bool:
        records = self.load_signatures()
        kept = [r for r in records if r.id != signature_id]
        if len(kept) == len(records):
            return False
        self.save_signatures(kept)
        return True

    # -------- History (bounded ring) ----------------------------------------
    def load_history(self) -> List[HistoryEntry]:
        return self._read_list(HISTORY_KEY, HistoryEntry.from_dict)

    def append_history(self, entry: HistoryEntry) -> None:
        """Append and drop the oldest entries beyond ``history_limit``."""
        entries = self.load_history()
        entries.append(entry)
        if len(entries) > self._history_limit:
            entries = entries[-self._history_limit:]
        self.write_json(HISTORY_KEY, [e.to_dict() for e in entries])

    def clear_history(self) -> None:
        self.write_json(HISTORY_KEY, [])

    # -------- Feature flag ---------------------------------------------------
    def is_gov_connected(self) -> bool:
        return self.read_json(GOV_CONNECTED_KEY, bool) is True

    def set_gov_connected(self, value: bool) -> None:
        self.write_json(GOV_CONNECTED_KEY, bool(value))
