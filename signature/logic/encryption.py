# signature/logic/encryption.py
from __future__ import annotations

import json
import sqlite3
from typing import List

from cryptography.fernet import Fernet, MultiFernet

_KEY_FIELD = "fernet_key"
_RING_FIELD = "fernet_key_ring"

# Fernet tokens are urlsafe base64 of a version byte 0x80 -> always start like this
_TOKEN_PREFIX = "gAAAAA"


def _ensure_key_table(conn: sqlite3.Connection) -> None:
    conn.execute(
        "CREATE TABLE IF NOT EXISTS catalog_keys(name TEXT PRIMARY KEY, value TEXT NOT NULL)"
    )


def _get(conn: sqlite3.Connection, name: str) -> str | None:
    row = conn.execute("SELECT value FROM catalog_keys WHERE name=?", (name,)).fetchone()
    return row[0] if row else None


def _put(conn: sqlite3.Connection, name: str, value: str) -> None:
    conn.execute(
        "INSERT INTO catalog_keys(name, value) VALUES (?, ?) "
        "ON CONFLICT(name) DO UPDATE SET value=excluded.value",
        (name, value),
    )


def load_keyring(conn: sqlite3.Connection) -> List[Fernet]:
    """
    Create a list of Fernet instances:
    - first entry is the current key (used for ENCRYPT),
    - remaining entries are legacy keys (used only for DECRYPT).
    The current key is generated on first use.
    """
    with conn:
        _ensure_key_table(conn)
        cur_key = _get(conn, _KEY_FIELD)
        if not cur_key:
            cur_key = Fernet.generate_key().decode("ascii")
            _put(conn, _KEY_FIELD, cur_key)
            _put(conn, _RING_FIELD, "[]")

    ring_raw = _get(conn, _RING_FIELD) or "[]"
    try:
        ring_list = json.loads(ring_raw)
    except json.JSONDecodeError:
        ring_list = []

    ferns = [Fernet(cur_key.encode("ascii"))]
    for k in ring_list if isinstance(ring_list, list) else []:
        try:
            ferns.append(Fernet(str(k).encode("ascii")))
        except ValueError:
            # malformed legacy entry
            continue
    return ferns


def rotate_key(conn: sqlite3.Connection) -> None:
    """Make a fresh key current; the old one stays in the ring for decryption."""
    load_keyring(conn)  # ensures table + current key
    old = _get(conn, _KEY_FIELD)
    ring = json.loads(_get(conn, _RING_FIELD) or "[]")
    with conn:
        _put(conn, _KEY_FIELD, Fernet.generate_key().decode("ascii"))
        _put(conn, _RING_FIELD, json.dumps([old] + list(ring)))


class CatalogCipher:
    """Encrypts catalog values at rest with the key ring stored next to them."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def _fernet(self) -> MultiFernet:
        return MultiFernet(load_keyring(self._conn))

    def encrypt_text(self, text: str) -> str:
        return self._fernet().encrypt(text.encode("utf-8")).decode("ascii")

    def decrypt_text(self, stored: str) -> str:
        """
        Decrypt with the current key, then legacy keys.
        Plain (never encrypted) JSON is returned as-is.
        Raises InvalidToken if a token matches no key.
        """
        if not stored.startswith(_TOKEN_PREFIX):
            return stored
        return self._fernet().decrypt(stored.encode("ascii")).decode("utf-8")
