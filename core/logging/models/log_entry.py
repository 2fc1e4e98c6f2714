"""
log_entry.py

Dataclass for one event-log row.

• from_dict()  – builds the object from a DB row dict
• as_dict()    – GUI/export dict with both the UTC ISO timestamp and a
                 local, human-readable one
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass
class LogEntry:
    id: Optional[int]
    timestamp: datetime          # always UTC
    log_level: str
    username: Optional[str]
    feature: str
    event: str
    reference_id: Optional[str]
    message: Optional[str]

    # -------------------- Factory ------------------------------------ #
    @classmethod
    def from_dict(cls, data: dict) -> "LogEntry":
        ts = data["timestamp"]
        if isinstance(ts, str):
            ts = datetime.fromisoformat(ts)
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return cls(
            id=data.get("id"),
            timestamp=ts,
            log_level=data.get("log_level", "INFO"),
            username=data.get("username"),
            feature=data.get("feature", ""),
            event=data.get("event", ""),
            reference_id=data.get("reference_id"),
            message=data.get("message"),
        )

    # -------------------- Dict for GUI / export ---------------------- #
    def as_dict(self) -> dict:
        utc = self.timestamp.replace(microsecond=0)
        return {
            "id": self.id,
            "timestamp_utc": utc.isoformat(),
            "timestamp": utc.astimezone().strftime("%d.%m.%Y %H:%M:%S"),
            "log_level": self.log_level,
            "username": self.username,
            "feature": self.feature,
            "event": self.event,
            "reference_id": self.reference_id,
            "message": self.message,
        }
