# signature/logic/placement_controller.py
"""
PlacementController – the one live placement of a signing session.

    Idle --start_positioning--> Positioning --click--> Positioned --apply--> (applied)
                                     ^                     |
                                     +-----reposition------+
    any state --reset--> Idle (unapplied, artifact discarded)
"""
from __future__ import annotations

import logging
from typing import Optional

from documents.models.document_models import DocumentRecord

from ..exceptions.errors import ValidationError
from ..models.signature_enums import PlacementMode
from ..models.signature_placement import PlacementPreview, Position, SurfaceRect
from ..models.signature_record import SignatureRecord
from ..models.signed_metadata import ComposedArtifact
from .composition_engine import DocumentCompositionEngine

DEFAULT_POSITION = Position(50.0, 80.0)

log = logging.getLogger(__name__)


class PlacementController:
    def __init__(self, composer: DocumentCompositionEngine) -> None:
        self._composer = composer
        self._mode = PlacementMode.IDLE
        self._position = DEFAULT_POSITION
        self._selected: Optional[SignatureRecord] = None
        self._artifact: Optional[ComposedArtifact] = None

    # -------- State ----------------------------------------------------------
    @property
    def mode(self) -> PlacementMode:
        return self._mode

    @property
    def position(self) -> Position:
        return self._position

    @property
    def selected(self) -> Optional[SignatureRecord]:
        return self._selected

    @property
    def applied(self) -> bool:
        return self._artifact is not None

    @property
    def artifact(self) -> Optional[ComposedArtifact]:
        return self._artifact

    @property
    def prompt_visible(self) -> bool:
        """Overlay prompt ("click on the document") while positioning."""
        return self._mode is PlacementMode.POSITIONING

    def preview(self) -> Optional[PlacementPreview]:
        """Dashed preview of the current selection, only while positioned and unapplied."""
        if self._mode is not PlacementMode.POSITIONED or self.applied or self._selected is None:
            return None
        return PlacementPreview(
            signature_id=self._selected.id,
            image_data=self._selected.image_data,
            position=self._position,
        )

    # -------- Transitions ----------------------------------------------------
    def select_signature(self, record: Optional[SignatureRecord]) -> None:
        """Change the selection; the preview always shows the current one."""
        self._selected = record

    def start_positioning(self) -> None:
        if self._selected is None:
            raise ValidationError("Select a signature to apply to the document.")
        if self.applied:
            raise ValidationError("The document is already signed. Reset to place again.")
        if self._mode is PlacementMode.POSITIONING:
            return
        self._mode = PlacementMode.POSITIONING

    def click(self, x: float, y: float, surface: SurfaceRect) -> bool:
        """Handle a click on the document surface. Only counts while positioning
        and inside the surface bounds."""
        if self._mode is not PlacementMode.POSITIONING:
            return False
        if surface.width <= 0 or surface.height <= 0:
            raise ValidationError("The document surface has no size.")
        if not surface.contains(x, y):
            return False
        self._position = surface.normalize(x, y)
        self._mode = PlacementMode.POSITIONED
        log.debug("positioned at %.1f%%, %.1f%%", self._position.x, self._position.y)
        return True

    def reposition(self) -> None:
        if self._mode is not PlacementMode.POSITIONED:
            return
        if self.applied:
            raise ValidationError("The document is already signed. Reset to place again.")
        self._mode = PlacementMode.POSITIONING

    def reset(self) -> None:
        self._mode = PlacementMode.IDLE
        self._position = DEFAULT_POSITION
        self._artifact = None

    def apply(self, document: Optional[DocumentRecord]) -> ComposedArtifact:
        """
        Compose the signed artifact. Requires a positioned, unapplied placement
        with a selected signature. On any error the state stays as it was so
        the user can retry.
        """
        if self._selected is None:
            raise ValidationError("Select a signature to apply to the document.")
        if self._mode is not PlacementMode.POSITIONED:
            raise ValidationError("Click on the document to position the signature first.")
        if self.applied:
            raise ValidationError("The document is already signed. Reset to place again.")

        artifact = self._composer.compose(document, self._selected, self._position)
        self._artifact = artifact
        return artifact
