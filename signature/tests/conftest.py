from __future__ import annotations

import itertools
import struct
import zlib
from datetime import datetime, timezone

import pytest

from documents.logic.document_intake import DocumentIntake
from signature.logic.capture_engine import SignatureCaptureEngine
from signature.logic.composition_engine import DocumentCompositionEngine

FIXED_NOW = datetime(2024, 5, 17, 12, 30, 0, tzinfo=timezone.utc)


def oversized_png(width: int = 30000, height: int = 30000) -> bytes:
    """PNG header declaring a huge canvas, no pixel data."""
    ihdr = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
    chunk = b"IHDR" + ihdr
    return (b"\x89PNG\r\n\x1a\n" + struct.pack(">I", len(ihdr)) + chunk
            + struct.pack(">I", zlib.crc32(chunk) & 0xFFFFFFFF))


@pytest.fixture
def capture(store, event_logger):
    ticks = itertools.count(1_700_000_000_000)
    return SignatureCaptureEngine(store, clock=lambda: next(ticks), logger=event_logger)


@pytest.fixture
def signature(capture):
    capture.begin_stroke((20, 100))
    for x in range(30, 400, 10):
        capture.continue_stroke((x, 100 + (x % 40)))
    capture.end_stroke()
    return capture.save("Jane Doe")


@pytest.fixture
def composer(store, event_logger):
    return DocumentCompositionEngine(store, clock=lambda: FIXED_NOW, logger=event_logger)


@pytest.fixture
def document(pdf_bytes):
    return DocumentIntake(clock=lambda: FIXED_NOW).accept(
        "contract.pdf", pdf_bytes, display_name="Contract 2024", document_type="admissao"
    )
