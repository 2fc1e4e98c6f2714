"""PDF-only input boundary."""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from documents.exceptions.errors import UnsupportedDocumentError
from documents.logic.document_intake import DocumentIntake
from documents.models.document_models import DocumentType, WithPayload
from signature.exceptions.errors import ValidationError

NOW = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def intake():
    return DocumentIntake(clock=lambda: NOW)


def test_accepts_pdf(intake, pdf_bytes) -> None:
    doc = intake.accept("Payslip March.pdf", pdf_bytes, document_type=DocumentType.PAYSLIP,
                        media_type="application/pdf")
    assert doc.display_name == "Payslip March"
    assert doc.document_type is DocumentType.PAYSLIP
    assert isinstance(doc.payload, WithPayload)
    assert doc.payload.data == pdf_bytes
    assert doc.upload_timestamp == NOW
    assert not doc.is_signed


def test_explicit_name_and_string_type(intake, pdf_bytes) -> None:
    doc = intake.accept("x.PDF", pdf_bytes, display_name="  Contract ", document_type="rescisao")
    assert doc.display_name == "Contract"
    assert doc.document_type is DocumentType.TERMINATION


def test_unknown_type_falls_back_to_other(intake, pdf_bytes) -> None:
    assert intake.accept("a.pdf", pdf_bytes, document_type="memo").document_type is DocumentType.OTHER


@pytest.mark.parametrize("filename, data, media_type", [
    ("a.docx", None, None),
    ("a.pdf", None, "image/png"),
    ("a.pdf", b"", None),
    ("a.pdf", b"PK\x03\x04 zip archive", None),
    ("a.pdf", b"%PDF-1.4\nnot really a pdf", None),
])
def test_rejects_non_pdf(intake, pdf_bytes, filename, data, media_type) -> None:
    with pytest.raises(UnsupportedDocumentError):
        intake.accept(filename, pdf_bytes if data is None else data, media_type=media_type)


def test_rejection_is_a_validation_error(intake) -> None:
    with pytest.raises(ValidationError):
        intake.accept("image.png", b"\x89PNG")


def test_media_type_parameters_ignored(intake, pdf_bytes) -> None:
    doc = intake.accept("a.pdf", pdf_bytes, media_type="Application/PDF; charset=binary")
    assert doc.display_name == "a"
