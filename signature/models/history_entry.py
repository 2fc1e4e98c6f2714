# signature/models/history_entry.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping

from .signature_placement import Position


def parse_iso(value: str) -> datetime:
    """Parse ISO-8601, accepting the trailing ``Z`` JavaScript writes."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    ts = datetime.fromisoformat(value)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


@dataclass(frozen=True)
class HistoryEntry:
    """One applied signature: when, which (by display name) and where."""
    timestamp: datetime
    signature_display_name: str
    position: Position

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "signature": self.signature_display_name,
            "position": {"x": self.position.x, "y": self.position.y},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HistoryEntry":
        pos = data["position"]
        return cls(
            timestamp=parse_iso(str(data["timestamp"])),
            signature_display_name=str(data["signature"]),
            position=Position(float(pos["x"]), float(pos["y"])),
        )
