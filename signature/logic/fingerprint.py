# signature/logic/fingerprint.py
"""
Bookkeeping fingerprint for saved signatures.

    fingerprint = hex(abs(rolling_hash(image + name + millis))) + hex(millis)

``rolling_hash`` is the classic ``h = h * 31 + c`` string hash over UTF-16 code
units, wrapped to a signed 32-bit integer. Because the creation time is mixed in
twice, the value cannot be recomputed from the image alone. It is NOT a
security digest: it is short, not collision resistant and carries no key.
Proving integrity would need a cryptographic content digest plus an asymmetric
signature, which this application does not attempt.
"""
from __future__ import annotations


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x1_0000_0000 if value & 0x8000_0000 else value


def rolling_hash(text: str) -> int:
    h = 0
    raw = text.encode("utf-16-le")
    for i in range(0, len(raw), 2):
        code = raw[i] | (raw[i + 1] << 8)
        h = _to_int32((h << 5) - h + code)
    return h


def compute_fingerprint(encoded_image: str, display_name: str, now_millis: int) -> str:
    digest = abs(rolling_hash(f"{encoded_image}{display_name}{now_millis}"))
    return f"{digest:x}{now_millis:x}"
