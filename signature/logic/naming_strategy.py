from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Protocol

_UNSAFE = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


def sanitize_filename(name: str, fallback: str) -> str:
    """Replace path separators and other characters file systems reject."""
    return _UNSAFE.sub("_", name).strip() or fallback


@dataclass(frozen=True)
class NamingContext:
    display_name: str
    document_id: str


class NamingStrategy(Protocol):
    def strategy_id(self) -> str: ...
    def propose_output_name(self, ctx: NamingContext) -> str: ...


class DefaultSuffixStrategy:
    """Default: "Contract 2024" -> "Contract 2024_signed.pdf"."""

    def __init__(self, suffix: str = "_signed") -> None:
        self._suffix = suffix

    def strategy_id(self) -> str:
        return "default_suffix"

    def propose_output_name(self, ctx: NamingContext) -> str:
        root = sanitize_filename(ctx.display_name, ctx.document_id)
        if root.lower().endswith(".pdf"):
            root = root[:-4]
        return f"{root}{self._suffix}.pdf"
