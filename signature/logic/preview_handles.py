# signature/logic/preview_handles.py
"""
Scoped preview handles.

A preview of an in-memory buffer (the uploaded PDF, a signature PNG) is backed
by a temporary file the GUI can load. Each handle is released exactly once:
when a newer buffer supersedes it in the same slot, or when the owning
session closes.
"""
from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Dict, Optional

log = logging.getLogger(__name__)


class PreviewHandle:
    def __init__(self, slot: str, path: Path) -> None:
        self.slot = slot
        self.path = path
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def read_bytes(self) -> bytes:
        if self._released:
            raise RuntimeError(f"Preview handle '{self.slot}' was already released.")
        return self.path.read_bytes()

    def release(self) -> bool:
        """Delete the backing file. Returns False if it was already released."""
        if self._released:
            return False
        self._released = True
        self.path.unlink(missing_ok=True)
        return True

    def __enter__(self) -> "PreviewHandle":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


class PreviewHandleRegistry:
    """One live handle per slot (e.g. ``"document"``, ``"signature"``)."""

    def __init__(self, tmp_dir: Optional[Path] = None) -> None:
        self._tmp_dir = Path(tmp_dir) if tmp_dir else Path(tempfile.gettempdir()) / "signpad_previews"
        self._tmp_dir.mkdir(parents=True, exist_ok=True)
        self._handles: Dict[str, PreviewHandle] = {}

    @property
    def active_count(self) -> int:
        return len(self._handles)

    def get(self, slot: str) -> Optional[PreviewHandle]:
        return self._handles.get(slot)

    def acquire(self, slot: str, data: bytes, *, suffix: str = "") -> PreviewHandle:
        self.release(slot)
        fd, name = tempfile.mkstemp(prefix=f"{slot}_", suffix=suffix, dir=self._tmp_dir)
        with open(fd, "wb") as fh:
            fh.write(data)
        handle = PreviewHandle(slot, Path(name))
        self._handles[slot] = handle
        log.debug("preview %s acquired at %s", slot, name)
        return handle

    def release(self, slot: str) -> bool:
        handle = self._handles.pop(slot, None)
        return handle.release() if handle else False

    def release_all(self) -> None:
        for slot in list(self._handles):
            self.release(slot)
