# signature/logic/signing_session.py
"""
SigningSession – one document being signed.

Owns the single live PlacementController for the document and the preview
handles of the document and the selected signature. A successful apply marks
the document as signed in the registry.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from documents.logic.document_registry import DocumentRegistry
from documents.models.document_models import DocumentRecord, MetadataOnly

from ..exceptions.errors import InputError, ValidationError
from ..models.signature_record import SignatureRecord
from ..models.signed_metadata import ComposedArtifact, SignedMetadata
from .composition_engine import DocumentCompositionEngine
from .image_codec import data_url_to_bytes
from .placement_controller import PlacementController
from .preview_handles import PreviewHandle, PreviewHandleRegistry

DOCUMENT_SLOT = "document"
SIGNATURE_SLOT = "signature"


class SigningSession:
    def __init__(
        self,
        composer: DocumentCompositionEngine,
        registry: DocumentRegistry,
        document: DocumentRecord,
        *,
        previews: Optional[PreviewHandleRegistry] = None,
    ) -> None:
        self._composer = composer
        self._registry = registry
        self._document = document
        self._previews = previews or PreviewHandleRegistry()
        self.controller = PlacementController(composer)
        self._closed = False
        composer.add_signed_listener(self._on_signed)

    @property
    def document(self) -> DocumentRecord:
        return self._document

    @property
    def previews(self) -> PreviewHandleRegistry:
        return self._previews

    @property
    def closed(self) -> bool:
        return self._closed

    # -------- Previews -------------------------------------------------------
    def document_preview(self) -> PreviewHandle:
        if isinstance(self._document.payload, MetadataOnly):
            raise InputError("The document content is no longer available. Upload it again.")
        handle = self._previews.get(DOCUMENT_SLOT)
        if handle is None:
            handle = self._previews.acquire(DOCUMENT_SLOT, self._document.payload.data, suffix=".pdf")
        return handle

    def select_signature(self, record: Optional[SignatureRecord]) -> Optional[PreviewHandle]:
        """Select a signature and refresh its preview (the previous one is released)."""
        self._check_open()
        self.controller.select_signature(record)
        if record is None:
            self._previews.release(SIGNATURE_SLOT)
            return None
        return self._previews.acquire(SIGNATURE_SLOT, data_url_to_bytes(record.image_data), suffix=".png")

    # -------- Signing --------------------------------------------------------
    def apply(self) -> ComposedArtifact:
        self._check_open()
        return self.controller.apply(self._document)

    def save_artifact(self, target: Path | str) -> Path:
        """Write the composed artifact. *target* may be a directory or a file path."""
        artifact = self.controller.artifact
        if artifact is None:
            raise ValidationError("Apply the signature before downloading the document.")
        path = Path(target)
        if path.is_dir():
            path = path / artifact.filename
        path.write_bytes(artifact.data)
        return path

    def _on_signed(self, document: DocumentRecord, metadata: SignedMetadata) -> None:
        if document.id != self._document.id:
            return
        updated = self._registry.mark_signed(document.id, metadata.fingerprint_token)
        self._document = updated or document.with_signed(metadata.fingerprint_token)

    # -------- Lifecycle ------------------------------------------------------
    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("Signing session is closed.")

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._composer.remove_signed_listener(self._on_signed)
        self._previews.release_all()

    def __enter__(self) -> "SigningSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
