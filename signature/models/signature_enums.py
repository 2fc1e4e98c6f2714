# signature/models/signature_enums.py
from __future__ import annotations
from enum import Enum


class PlacementMode(str, Enum):
    """Workflow state of the one live placement in a signing session."""
    IDLE = "idle"
    POSITIONING = "positioning"   # overlay prompt shown, waiting for a click
    POSITIONED = "positioned"     # dashed preview tracks the chosen position
