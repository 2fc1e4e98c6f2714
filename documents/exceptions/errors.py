"""Documents feature exceptions."""
from __future__ import annotations

from signature.exceptions.errors import ValidationError


class UnsupportedDocumentError(ValidationError):
    """Raised when an uploaded file is not a readable PDF."""
