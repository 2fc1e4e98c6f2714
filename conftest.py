"""
Test bootstrap: point every database at a throw-away directory before any
project module reads the configuration.
"""
from __future__ import annotations

import os
import tempfile
from io import BytesIO
from pathlib import Path

_TMP = Path(tempfile.mkdtemp(prefix="signpad_tests_"))
os.environ["SIGNPAD_DATABASE__CATALOG"] = str(_TMP / "catalog.db")
os.environ["SIGNPAD_DATABASE__LOGGING"] = str(_TMP / "logs.db")

import pytest  # noqa: E402
from reportlab.pdfgen import canvas  # noqa: E402

from core.logging.logic.logger import Logger  # noqa: E402
from signature.logic.catalog_store import CatalogStore  # noqa: E402


def make_pdf(text: str = "Hello") -> bytes:
    """Small valid one-page PDF."""
    buf = BytesIO()
    c = canvas.Canvas(buf, invariant=1)
    c.drawString(72, 720, text)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture
def event_logger(tmp_path):
    lg = Logger(tmp_path / "logs.db")
    yield lg
    lg.close()


@pytest.fixture
def store(tmp_path, event_logger):
    with CatalogStore(tmp_path / "catalog.db", history_limit=500,
                      encrypt_at_rest=False, logger=event_logger) as st:
        yield st


@pytest.fixture
def pdf_bytes() -> bytes:
    return make_pdf()


@pytest.fixture
def pdf_factory():
    return make_pdf
