"""
Document domain models for the Documents feature.

A document's binary content only lives for the current session. The payload is
a tagged variant (:class:`WithPayload` or :class:`MetadataOnly`) so every use
site has to say what it does when the bytes are gone.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional, Union


class DocumentType(str, Enum):
    PAYSLIP = "holerite"
    ADMISSION = "admissao"
    TERMINATION = "rescisao"
    VACATION = "ferias"
    OTHER = "outros"

    @classmethod
    def parse(cls, value: str) -> "DocumentType":
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER

    @property
    def label(self) -> str:
        return _TYPE_LABELS[self]


_TYPE_LABELS = {
    DocumentType.PAYSLIP: "Payslip",
    DocumentType.ADMISSION: "Admission contract",
    DocumentType.TERMINATION: "Termination agreement",
    DocumentType.VACATION: "Vacation document",
    DocumentType.OTHER: "Other",
}


@dataclass(frozen=True)
class WithPayload:
    """The session holds the uploaded bytes."""
    data: bytes = field(repr=False)

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class MetadataOnly:
    """Reloaded from storage: only metadata survived."""


DocumentPayload = Union[WithPayload, MetadataOnly]


@dataclass(frozen=True)
class DocumentRecord:
    id: str
    display_name: str
    document_type: DocumentType
    payload: DocumentPayload
    upload_timestamp: datetime
    signed_artifact_ref: Optional[str] = None

    @property
    def is_signed(self) -> bool:
        return self.signed_artifact_ref is not None

    def with_signed(self, ref: str) -> "DocumentRecord":
        return replace(self, signed_artifact_ref=ref)

    def to_dict(self) -> dict[str, Any]:
        """Persisted metadata. The payload is never written."""
        return {
            "id": self.id,
            "name": self.display_name,
            "type": self.document_type.value,
            "uploadDate": self.upload_timestamp.isoformat(),
            "signedVersion": self.signed_artifact_ref,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DocumentRecord":
        raw_ts = str(data["uploadDate"])
        if raw_ts.endswith("Z"):
            raw_ts = raw_ts[:-1] + "+00:00"
        ts = datetime.fromisoformat(raw_ts)
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return cls(
            id=str(data["id"]),
            display_name=str(data["name"]),
            document_type=DocumentType.parse(str(data.get("type", "outros"))),
            payload=MetadataOnly(),
            upload_timestamp=ts,
            signed_artifact_ref=data.get("signedVersion"),
        )
