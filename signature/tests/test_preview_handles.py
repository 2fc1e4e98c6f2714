"""Preview handles are released exactly once."""
from __future__ import annotations

import pytest

from signature.logic.preview_handles import PreviewHandleRegistry


@pytest.fixture
def previews(tmp_path):
    reg = PreviewHandleRegistry(tmp_path / "previews")
    yield reg
    reg.release_all()


def test_acquire_writes_temp_file(previews) -> None:
    handle = previews.acquire("document", b"%PDF-1.4", suffix=".pdf")
    assert handle.path.exists()
    assert handle.path.suffix == ".pdf"
    assert handle.read_bytes() == b"%PDF-1.4"
    assert previews.get("document") is handle


def test_release_once(previews) -> None:
    handle = previews.acquire("signature", b"png")
    assert handle.release() is True
    assert handle.release() is False
    assert not handle.path.exists()
    with pytest.raises(RuntimeError):
        handle.read_bytes()


def test_superseded_handle_is_released(previews) -> None:
    old = previews.acquire("signature", b"one")
    new = previews.acquire("signature", b"two")
    assert old.released
    assert not old.path.exists()
    assert not new.released
    assert previews.active_count == 1


def test_release_all(previews) -> None:
    a = previews.acquire("document", b"a")
    b = previews.acquire("signature", b"b")
    previews.release_all()
    assert a.released and b.released
    assert previews.active_count == 0
    assert previews.release("document") is False


def test_handle_as_context_manager(previews) -> None:
    with previews.acquire("document", b"x") as handle:
        path = handle.path
    assert not path.exists()
