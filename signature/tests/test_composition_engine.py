"""Composition of the signed artifact."""
from __future__ import annotations

from dataclasses import replace
from io import BytesIO

import pytest
from pypdf import PdfReader

from documents.models.document_models import MetadataOnly
from signature.exceptions.errors import InputError, RenderError
from signature.logic.composition_engine import DocumentCompositionEngine
from signature.models.signature_placement import Position

from signature.logic.image_codec import png_to_data_url

from .conftest import FIXED_NOW, oversized_png


def test_compose_returns_pdf_named_after_document(composer, document, signature) -> None:
    artifact = composer.compose(document, signature, Position(30, 60))
    assert artifact.data.startswith(b"%PDF")
    assert len(artifact) > 0
    assert artifact.filename == "Contract 2024_signed.pdf"
    assert len(PdfReader(BytesIO(artifact.data)).pages) == 1


def test_compose_is_deterministic(store, event_logger, document, signature) -> None:
    a = DocumentCompositionEngine(store, clock=lambda: FIXED_NOW, logger=event_logger)
    b = DocumentCompositionEngine(store, clock=lambda: FIXED_NOW, logger=event_logger)
    first = a.compose(document, signature, Position(30, 60))
    second = b.compose(document, signature, Position(30, 60))
    assert first.data == second.data
    assert first.metadata == second.metadata


def test_position_changes_output(composer, document, signature) -> None:
    first = composer.compose(document, signature, Position(30, 60))
    second = composer.compose(document, signature, Position(70, 20))
    assert first.data != second.data


def test_metadata_token_and_readback(composer, document, signature) -> None:
    artifact = composer.compose(document, signature, Position(30, 60))
    millis = int(FIXED_NOW.timestamp() * 1000)
    assert artifact.metadata.fingerprint_token == f"signed_{millis}_{signature.fingerprint}"
    assert artifact.metadata.applied_timestamp == FIXED_NOW
    assert DocumentCompositionEngine.read_signed_metadata(artifact.data) == artifact.metadata


def test_read_metadata_of_unsigned_pdf(pdf_bytes) -> None:
    assert DocumentCompositionEngine.read_signed_metadata(pdf_bytes) is None


def test_history_entry_appended(composer, document, signature, store) -> None:
    composer.compose(document, signature, Position(30, 60))
    (entry,) = store.load_history()
    assert entry.signature_display_name == "Jane Doe"
    assert entry.position == Position(30, 60)
    assert entry.timestamp == FIXED_NOW


def test_listener_receives_metadata(composer, document, signature) -> None:
    seen = []
    composer.add_signed_listener(lambda doc, meta: seen.append((doc.id, meta)))
    artifact = composer.compose(document, signature, Position(30, 60))
    assert seen == [(document.id, artifact.metadata)]


def test_removed_listener_not_called(composer, document, signature) -> None:
    seen = []
    listener = lambda doc, meta: seen.append(meta)  # noqa: E731
    composer.add_signed_listener(listener)
    composer.remove_signed_listener(listener)
    composer.compose(document, signature, Position(30, 60))
    assert seen == []


def test_failing_listener_leaves_no_history(composer, document, signature, store) -> None:
    def boom(doc, meta):
        raise RuntimeError("listener failed")

    composer.add_signed_listener(boom)
    with pytest.raises(RuntimeError):
        composer.compose(document, signature, Position(30, 60))
    assert store.load_history() == []


def test_missing_document_is_input_error(composer, signature, store) -> None:
    with pytest.raises(InputError):
        composer.compose(None, signature, Position(30, 60))
    assert store.load_history() == []


def test_metadata_only_document_is_input_error(composer, document, signature, store) -> None:
    with pytest.raises(InputError):
        composer.compose(replace(document, payload=MetadataOnly()), signature, Position(30, 60))
    assert store.load_history() == []


def test_undecodable_signature_is_render_error(composer, document, signature, store) -> None:
    seen = []
    composer.add_signed_listener(lambda doc, meta: seen.append(meta))
    broken = replace(signature, image_data="data:image/png;base64,bm90IGEgcG5n")
    with pytest.raises(RenderError):
        composer.compose(document, broken, Position(30, 60))
    assert store.load_history() == []
    assert seen == []


def test_oversized_signature_image_is_render_error(composer, document, signature, store) -> None:
    huge = replace(signature, image_data=png_to_data_url(oversized_png()))
    with pytest.raises(RenderError):
        composer.compose(document, huge, Position(30, 60))
    assert store.load_history() == []


def test_compose_logs_event(composer, document, signature, event_logger) -> None:
    composer.compose(document, signature, Position(30, 60))
    (entry,) = event_logger.query_logs(feature="Signature", event="Applied")
    assert entry.reference_id == document.id
