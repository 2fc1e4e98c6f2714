"""Signature feature exceptions.

Every error here is recoverable: the triggering user action can simply be
retried. ``str(exc)`` is the user-facing message.
"""
from __future__ import annotations


class SignpadError(Exception):
    """Base exception for the signature pipeline."""


class ValidationError(SignpadError):
    """Required input is missing or invalid (empty name, no selection, wrong file)."""


class InputError(ValidationError):
    """The source document is absent or carries no payload."""


class RenderError(SignpadError):
    """The signature image could not be decoded during composition."""


class StorageError(SignpadError):
    """A catalog value could not be serialized or deserialized."""
