# signature/models/signature_record.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class SignatureRecord:
    """
    A saved hand-drawn signature.

    ``image_data`` is a PNG data URL (``data:image/png;base64,...``).
    ``fingerprint`` is a bookkeeping identifier salted with the creation time;
    it is not a content digest and proves nothing about integrity.
    """
    id: str
    display_name: str
    image_data: str
    fingerprint: str

    @property
    def label(self) -> str:
        """Display name plus the fingerprint tail (creation time); names alone need not be unique."""
        return f"{self.display_name} [{self.fingerprint[-8:]}]"

    def to_dict(self) -> dict[str, str]:
        """Persisted shape: ``{id, name, data, hash}``."""
        return {
            "id": self.id,
            "name": self.display_name,
            "data": self.image_data,
            "hash": self.fingerprint,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SignatureRecord":
        return cls(
            id=str(data["id"]),
            display_name=str(data["name"]),
            image_data=str(data["data"]),
            fingerprint=str(data["hash"]),
        )
