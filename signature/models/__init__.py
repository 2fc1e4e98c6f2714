from .signature_enums import PlacementMode
from .signature_placement import Position, SurfaceRect, PlacementPreview
from .signature_record import SignatureRecord
from .history_entry import HistoryEntry
from .signed_metadata import SignedMetadata, ComposedArtifact
from .signature_config import SignatureConfig

__all__ = [
    "PlacementMode", "Position", "SurfaceRect", "PlacementPreview",
    "SignatureRecord", "HistoryEntry", "SignedMetadata", "ComposedArtifact",
    "SignatureConfig",
]
