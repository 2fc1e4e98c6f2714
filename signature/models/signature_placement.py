from __future__ import annotations
from dataclasses import dataclass


def _clamp_pct(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


@dataclass(frozen=True)
class Position:
    """
    Normalized position in percent of the surface (origin top-left),
    resolution independent. Components always lie in [0, 100].
    """
    x: float = 50.0
    y: float = 80.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", _clamp_pct(self.x))
        object.__setattr__(self, "y", _clamp_pct(self.y))


@dataclass(frozen=True)
class SurfaceRect:
    """Bounding box of the document surface in pointer (screen) coordinates."""
    left: float
    top: float
    width: float
    height: float

    def contains(self, x: float, y: float) -> bool:
        return (self.left <= x <= self.left + self.width
                and self.top <= y <= self.top + self.height)

    def normalize(self, x: float, y: float) -> Position:
        """Pointer coordinates -> percent of width/height."""
        return Position(
            (x - self.left) * 100.0 / self.width,
            (y - self.top) * 100.0 / self.height,
        )


@dataclass(frozen=True)
class PlacementPreview:
    """Dashed preview of the selected signature at the chosen position."""
    signature_id: str
    image_data: str
    position: Position
    dashed: bool = True
