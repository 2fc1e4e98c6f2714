# signature/logic/gov_connector.py
"""
Stub for the "government signature" connection.

Nothing leaves the machine: connecting only flips the persisted
``govConnected`` flag after a fixed delay, so the GUI can show a
"connecting..." state.
"""
from __future__ import annotations

import threading
from typing import Callable, Optional, Protocol

from core.logging.logic.logger import Logger, logger as default_logger

from .catalog_store import CatalogStore


class Scheduler(Protocol):
    def __call__(self, delay_ms: int, callback: Callable[[], None]) -> object: ...


def timer_scheduler(delay_ms: int, callback: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(delay_ms / 1000.0, callback)
    timer.daemon = True
    timer.start()
    return timer


class GovConnector:
    def __init__(
        self,
        store: CatalogStore,
        *,
        delay_ms: int = 2000,
        scheduler: Scheduler = timer_scheduler,
        logger: Optional[Logger] = None,
    ) -> None:
        self._store = store
        self._delay_ms = int(delay_ms)
        self._schedule = scheduler
        self._logger = logger or default_logger
        self._pending = False

    @property
    def is_connected(self) -> bool:
        return self._store.is_gov_connected()

    @property
    def is_pending(self) -> bool:
        return self._pending

    def connect(self, on_done: Optional[Callable[[bool], None]] = None) -> bool:
        """Schedule the connection. Returns False if already connected or pending."""
        if self._pending or self.is_connected:
            return False
        self._pending = True

        def _finish() -> None:
            self._pending = False
            self._store.set_gov_connected(True)
            self._logger.log("GovConnector", "Connected")
            if on_done is not None:
                on_done(True)

        self._schedule(self._delay_ms, _finish)
        return True

    def disconnect(self) -> None:
        self._store.set_gov_connected(False)
        self._logger.log("GovConnector", "Disconnected")
