# signature/models/signed_metadata.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SignedMetadata:
    """
    Token handed to the document-state owner after a successful composition and
    embedded in the artifact's PDF info dictionary.
    """
    fingerprint_token: str
    applied_timestamp: datetime

    @classmethod
    def derive(cls, fingerprint: str, applied: datetime) -> "SignedMetadata":
        millis = int(applied.timestamp() * 1000)
        return cls(fingerprint_token=f"signed_{millis}_{fingerprint}", applied_timestamp=applied)


@dataclass(frozen=True)
class ComposedArtifact:
    """One downloadable signed artifact (PDF bytes) and its metadata."""
    filename: str
    data: bytes
    metadata: SignedMetadata

    def __len__(self) -> int:
        return len(self.data)
