# documents/logic/document_intake.py
"""
Input boundary for uploaded documents.

Only PDFs are accepted. A file must pass every check (media type if given,
``.pdf`` extension, ``%PDF`` header, pypdf can open it) before a
DocumentRecord is created; a rejected file changes nothing.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from io import BytesIO
from pathlib import PurePath
from typing import Callable, Optional, Union

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from ..exceptions.errors import UnsupportedDocumentError
from ..models.document_models import DocumentRecord, DocumentType, WithPayload

PDF_MEDIA_TYPE = "application/pdf"
PDF_MAGIC = b"%PDF"

_REJECTED = "Please select a valid PDF file."


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DocumentIntake:
    def __init__(self, *, clock: Callable[[], datetime] = _utc_now) -> None:
        self._clock = clock

    @staticmethod
    def validate(filename: str, data: bytes, media_type: Optional[str] = None) -> int:
        """Raise UnsupportedDocumentError unless *data* is a readable PDF. Returns the page count."""
        if media_type is not None and media_type.split(";")[0].strip().lower() != PDF_MEDIA_TYPE:
            raise UnsupportedDocumentError(_REJECTED)
        if PurePath(filename or "").suffix.lower() != ".pdf":
            raise UnsupportedDocumentError(_REJECTED)
        if not data or data.lstrip()[:4] != PDF_MAGIC:
            raise UnsupportedDocumentError(_REJECTED)
        try:
            reader = PdfReader(BytesIO(data))
            pages = len(reader.pages)
        except (PyPdfError, ValueError, KeyError, OSError) as exc:
            raise UnsupportedDocumentError(_REJECTED) from exc
        if pages < 1:
            raise UnsupportedDocumentError(_REJECTED)
        return pages

    def accept(
        self,
        filename: str,
        data: bytes,
        *,
        display_name: Optional[str] = None,
        document_type: Union[DocumentType, str] = DocumentType.OTHER,
        media_type: Optional[str] = None,
    ) -> DocumentRecord:
        self.validate(filename, data, media_type)
        name = (display_name or "").strip() or PurePath(filename).stem
        doc_type = document_type if isinstance(document_type, DocumentType) else DocumentType.parse(document_type)
        return DocumentRecord(
            id=uuid.uuid4().hex,
            display_name=name,
            document_type=doc_type,
            payload=WithPayload(bytes(data)),
            upload_timestamp=self._clock(),
        )
