# signature/logic/composition_engine.py
"""
DocumentCompositionEngine – renders the signed artifact.

The source document's bytes are opaque: the output is a fresh A4 page with
placeholder document text, the chosen signature image centred at the placement
position and an attestation line under it. It is a visual stand-in for a signed
document, not an edit of the original PDF.

Uses reportlab (drawing, invariant mode so identical inputs and an identical
clock give identical bytes), Pillow (signature decode) and pypdf (reading the
embedded metadata back).
"""
from __future__ import annotations

from datetime import datetime, timezone
from io import BytesIO
from typing import Callable, List, Optional

from pypdf import PdfReader
from pypdf.errors import PdfReadError
from reportlab.lib.colors import Color
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from core.logging.logic.logger import Logger, logger as default_logger
from documents.models.document_models import DocumentRecord, WithPayload

from ..exceptions.errors import InputError
from ..models.history_entry import HistoryEntry, parse_iso
from ..models.signature_config import SignatureConfig
from ..models.signature_placement import Position
from ..models.signature_record import SignatureRecord
from ..models.signed_metadata import ComposedArtifact, SignedMetadata
from .catalog_store import CatalogStore
from .image_codec import decode_image
from .naming_strategy import DefaultSuffixStrategy, NamingContext, NamingStrategy

SignedListener = Callable[[DocumentRecord, SignedMetadata], None]

ATTESTATION_TEXT = "Digitally signed"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DocumentCompositionEngine:
    PAGE_SIZE = A4

    def __init__(
        self,
        store: CatalogStore,
        *,
        config: Optional[SignatureConfig] = None,
        clock: Callable[[], datetime] = _utc_now,
        naming: Optional[NamingStrategy] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._store = store
        self._cfg = config or SignatureConfig()
        self._clock = clock
        self._naming = naming or DefaultSuffixStrategy(self._cfg.output_suffix)
        self._logger = logger or default_logger
        self._listeners: List[SignedListener] = []

    @property
    def config(self) -> SignatureConfig:
        return self._cfg

    # -------- Document-state owner ------------------------------------------
    def add_signed_listener(self, listener: SignedListener) -> None:
        """Register a callback receiving the SignedMetadata of each composition."""
        self._listeners.append(listener)

    def remove_signed_listener(self, listener: SignedListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # -------- Compose --------------------------------------------------------
    def compose(
        self,
        document: Optional[DocumentRecord],
        signature: SignatureRecord,
        position: Position,
    ) -> ComposedArtifact:
        """
        Render the artifact, notify listeners and append one history entry.

        Raises InputError when the document or its bytes are missing and
        RenderError when the signature image does not decode. Nothing is
        recorded in either case. A listener that raises aborts the
        composition before the history entry is written.
        """
        if document is None or not isinstance(document.payload, WithPayload):
            raise InputError("Select a document file before signing.")

        applied = self._clock()
        metadata = SignedMetadata.derive(signature.fingerprint, applied)
        pdf = self.render(document, signature, position, metadata)

        artifact = ComposedArtifact(
            filename=self._naming.propose_output_name(
                NamingContext(display_name=document.display_name, document_id=document.id)
            ),
            data=pdf,
            metadata=metadata,
        )

        for listener in list(self._listeners):
            listener(document, metadata)
        self._store.append_history(HistoryEntry(
            timestamp=applied,
            signature_display_name=signature.display_name,
            position=position,
        ))
        self._logger.log("Signature", "Applied", reference_id=document.id,
                         message=f"'{signature.display_name}' at ({position.x:.1f}%, {position.y:.1f}%)")
        return artifact

    def render(
        self,
        document: DocumentRecord,
        signature: SignatureRecord,
        position: Position,
        metadata: SignedMetadata,
    ) -> bytes:
        """Pure rendering step: same arguments, same bytes."""
        sig = decode_image(signature.image_data)

        buf = BytesIO()
        pw, ph = self.PAGE_SIZE
        c = canvas.Canvas(buf, pagesize=self.PAGE_SIZE, invariant=1)
        c.setTitle(f"{document.display_name} (signed)")
        c.setSubject(metadata.fingerprint_token)
        c.setKeywords(metadata.applied_timestamp.isoformat())

        self._draw_placeholder(c, document, metadata.applied_timestamp, pw, ph)

        # --- Signature, centred at the normalized position
        sw = float(self._cfg.signature_width_pt)
        sh = float(self._cfg.signature_height_pt)
        cx = position.x / 100.0 * pw
        cy = ph - position.y / 100.0 * ph      # PDF origin is bottom-left
        x0, y0 = cx - sw / 2.0, cy - sh / 2.0
        c.drawImage(ImageReader(sig), x0, y0, width=sw, height=sh,
                    mask="auto", preserveAspectRatio=True, anchor="c")

        # --- Attestation line under the image
        c.setFillColor(Color(0.25, 0.25, 0.25))
        c.setFont("Helvetica-Oblique", 7)
        stamp = metadata.applied_timestamp.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
        c.drawString(x0, y0 - 9, f"{ATTESTATION_TEXT} {stamp} - {signature.fingerprint[:16]}")

        c.showPage()
        c.save()
        return buf.getvalue()

    @staticmethod
    def _draw_placeholder(c: canvas.Canvas, document: DocumentRecord,
                          applied: datetime, pw: float, ph: float) -> None:
        """Stand-in document content: header lines and grey text bars."""
        margin = 2 * cm
        y = ph - margin
        c.setFillColor(Color(0, 0, 0))
        c.setFont("Helvetica-Bold", 18)
        c.drawString(margin, y, document.display_name)

        c.setFont("Helvetica", 10)
        for line in (
            f"Type: {document.document_type.label}",
            f"Uploaded: {document.upload_timestamp.strftime('%Y-%m-%d %H:%M')}",
            f"Signed: {applied.strftime('%Y-%m-%d %H:%M')}",
        ):
            y -= 16
            c.drawString(margin, y, line)

        c.setStrokeColor(Color(0.6, 0.6, 0.6))
        c.line(margin, y - 10, pw - margin, y - 10)

        c.setFillColor(Color(0.88, 0.88, 0.88))
        bar_y = y - 40
        row = 0
        while bar_y > 3 * cm:
            width = (pw - 2 * margin) * (0.6 if row % 5 == 4 else 1.0)
            c.rect(margin, bar_y, width, 6, stroke=0, fill=1)
            bar_y -= 14
            row += 1

    # -------- Read back ------------------------------------------------------
    @staticmethod
    def read_signed_metadata(pdf_bytes: bytes) -> Optional[SignedMetadata]:
        """Return the SignedMetadata embedded by :meth:`render`, if any."""
        try:
            info = PdfReader(BytesIO(pdf_bytes)).metadata
        except PdfReadError:
            return None
        if not info or not info.subject or not str(info.subject).startswith("signed_"):
            return None
        keywords = info.get("/Keywords")
        if not keywords:
            return None
        try:
            applied = parse_iso(str(keywords))
        except ValueError:
            return None
        return SignedMetadata(fingerprint_token=str(info.subject), applied_timestamp=applied)
