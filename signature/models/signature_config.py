# signature/models/signature_config.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Tuple


def hex_to_rgb(hexstr: str) -> Tuple[int, int, int]:
    """Convert ``#RRGGBB`` or ``#RGB`` into an RGB tuple for PIL."""
    s = (hexstr or "#000000").strip()
    if not s.startswith("#"):
        s = "#" + s
    if len(s) == 4:
        return int(s[1] * 2, 16), int(s[2] * 2, 16), int(s[3] * 2, 16)
    return int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16)


@dataclass(frozen=True)
class SignatureConfig:
    """Capture and composition settings resolved from the config service."""
    # Capture surface
    canvas_width: int = 600
    canvas_height: int = 200
    stroke_width: int = 2
    stroke_color: str = "#1e40af"

    # Composition
    signature_width_pt: float = 150.0
    signature_height_pt: float = 50.0
    output_suffix: str = "_signed"

    @classmethod
    def from_service(cls, svc: Any) -> "SignatureConfig":
        return cls(
            canvas_width=max(1, int(svc.capture.canvas_width)),
            canvas_height=max(1, int(svc.capture.canvas_height)),
            stroke_width=max(1, int(svc.capture.stroke_width)),
            stroke_color=str(svc.capture.stroke_color),
            signature_width_pt=float(svc.composition.signature_width_pt),
            signature_height_pt=float(svc.composition.signature_height_pt),
            output_suffix=str(svc.composition.output_suffix),
        )

    @property
    def stroke_rgb(self) -> Tuple[int, int, int]:
        return hex_to_rgb(self.stroke_color)
