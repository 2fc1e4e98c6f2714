"""Rolling hash and fingerprint layout."""
from __future__ import annotations

from signature.logic.fingerprint import compute_fingerprint, rolling_hash


def test_rolling_hash_matches_string_hash_code() -> None:
    assert rolling_hash("") == 0
    assert rolling_hash("a") == 97
    assert rolling_hash("ab") == 97 * 31 + 98
    assert rolling_hash("hello") == 99162322


def test_rolling_hash_wraps_to_int32() -> None:
    assert rolling_hash("polygenelubricants") == -2**31


def test_rolling_hash_uses_utf16_code_units() -> None:
    # one astral character is two surrogate code units
    assert rolling_hash("\U0001F600") == 0xD83D * 31 + 0xDE00


def test_fingerprint_is_hash_then_millis_in_hex() -> None:
    millis = 1_700_000_000_000
    fp = compute_fingerprint("data:image/png;base64,AAAA", "Jane", millis)
    digest = abs(rolling_hash(f"data:image/png;base64,AAAAJane{millis}"))
    assert fp == f"{digest:x}{millis:x}"
    assert fp.endswith(f"{millis:x}")


def test_same_input_different_time_differs() -> None:
    assert compute_fingerprint("img", "n", 1) != compute_fingerprint("img", "n", 2)
