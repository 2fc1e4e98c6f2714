# signature/logic/capture_engine.py
from __future__ import annotations

import io
import time
import uuid
from typing import Callable, List, Optional, Tuple

from PIL import Image, ImageDraw, UnidentifiedImageError

from core.logging.logic.logger import Logger, logger as default_logger

from ..exceptions.errors import ValidationError
from ..models.signature_config import SignatureConfig
from ..models.signature_record import SignatureRecord
from .catalog_store import CatalogStore
from .fingerprint import compute_fingerprint
from .image_codec import data_url_to_bytes, image_to_png, png_to_data_url
from .naming_strategy import sanitize_filename

Point = Tuple[float, float]


def _wall_clock_millis() -> int:
    return time.time_ns() // 1_000_000


class SignatureCaptureEngine:
    """
    Freehand capture surface (no UI).

    The GUI forwards pointer events: ``begin_stroke`` on press,
    ``continue_stroke`` on motion, ``end_stroke`` on release. ``save`` rasterizes
    the strokes to a transparent PNG, fingerprints it and appends a new record
    to the catalog. Existing records are never modified.
    """

    def __init__(
        self,
        store: CatalogStore,
        *,
        config: Optional[SignatureConfig] = None,
        clock: Callable[[], int] = _wall_clock_millis,
        logger: Optional[Logger] = None,
    ) -> None:
        self._store = store
        self._cfg = config or SignatureConfig()
        self._clock = clock
        self._logger = logger or default_logger
        self._strokes: List[List[Point]] = []
        self._current: Optional[List[Point]] = None
        self._imported: Optional[Image.Image] = None
        self._last_millis = 0

    # -------- Surface state --------------------------------------------------
    @property
    def config(self) -> SignatureConfig:
        return self._cfg

    @property
    def size(self) -> Tuple[int, int]:
        return self._cfg.canvas_width, self._cfg.canvas_height

    @property
    def stroke_count(self) -> int:
        return len(self._strokes) + (1 if self._current else 0)

    @property
    def has_strokes(self) -> bool:
        return self.stroke_count > 0 or self._imported is not None

    @property
    def is_drawing(self) -> bool:
        return self._current is not None

    def strokes(self) -> List[List[Point]]:
        done = [list(s) for s in self._strokes]
        if self._current:
            done.append(list(self._current))
        return done

    # -------- Pointer events -------------------------------------------------
    def begin_stroke(self, point: Point) -> None:
        if self._current:
            self._strokes.append(self._current)
        self._current = [self._clip(point)]

    def continue_stroke(self, point: Point) -> bool:
        """Extend the open stroke by a line segment. Ignored without an open stroke."""
        if self._current is None:
            return False
        self._current.append(self._clip(point))
        return True

    def end_stroke(self) -> None:
        if self._current:
            self._strokes.append(self._current)
        self._current = None

    def clear(self) -> None:
        self._strokes.clear()
        self._current = None
        self._imported = None

    def import_image(self, image_bytes: bytes) -> None:
        """Replace the drawing with an existing PNG/GIF signature image."""
        try:
            img = Image.open(io.BytesIO(image_bytes))
            img.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
            raise ValidationError("The selected file is not a readable PNG/GIF image.") from exc
        self.clear()
        self._imported = img.convert("RGBA")

    def _clip(self, point: Point) -> Point:
        w, h = self.size
        x, y = point
        return max(0.0, min(float(x), w - 1.0)), max(0.0, min(float(y), h - 1.0))

    # -------- Rasterization --------------------------------------------------
    def render_png(self) -> bytes:
        """Convert the surface into a transparent PNG."""
        if self._imported is not None:
            return image_to_png(self._imported)
        img = Image.new("RGBA", self.size, (0, 0, 0, 0))
        drw = ImageDraw.Draw(img)
        fill = (*self._cfg.stroke_rgb, 255)
        width = self._cfg.stroke_width
        radius = width / 2.0
        for poly in self.strokes():
            if len(poly) >= 2:
                drw.line(poly, fill=fill, width=width, joint="curve")
            # round caps (a single click still leaves a dot)
            for x, y in (poly[0], poly[-1]):
                drw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=fill)
        return image_to_png(img)

    # -------- Persisting -----------------------------------------------------
    def _next_millis(self) -> int:
        """Creation time salt, strictly increasing per engine."""
        now = int(self._clock())
        if now <= self._last_millis:
            now = self._last_millis + 1
        self._last_millis = now
        return now

    def save(self, display_name: str) -> SignatureRecord:
        name = (display_name or "").strip()
        if not name or not self.has_strokes:
            raise ValidationError("Please draw a signature and provide a name.")

        encoded = png_to_data_url(self.render_png())
        millis = self._next_millis()
        record = SignatureRecord(
            id=uuid.uuid4().hex,
            display_name=name,
            image_data=encoded,
            fingerprint=compute_fingerprint(encoded, name, millis),
        )
        self._store.append_signature(record)
        self.clear()
        self._logger.log("Signature", "Saved", reference_id=record.id,
                         message=f"Signature '{name}' saved")
        return record

    # -------- Catalog helpers ------------------------------------------------
    def list_signatures(self) -> List[SignatureRecord]:
        return self._store.load_signatures()

    def delete(self, signature_id: str) -> bool:
        removed = self._store.remove_signature(signature_id)
        if removed:
            self._logger.log("Signature", "Deleted", reference_id=signature_id)
        return removed

    @staticmethod
    def export_png(record: SignatureRecord) -> Tuple[str, bytes]:
        """Download name and PNG bytes for a saved signature."""
        return f"signature_{sanitize_filename(record.display_name, record.id)}.png", data_url_to_bytes(record.image_data)
