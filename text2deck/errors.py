"""Exception hierarchy for the text-to-deck pipeline."""

from __future__ import annotations

from typing import Any, Dict, Optional


class DeckError(Exception):
    """Base exception for all pipeline errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def __str__(self):
        return self.message


class ValidationError(DeckError):
    """Input shape or length is not acceptable"""
    pass


class EmptyDeckError(ValidationError):
    """A deck cannot be built from zero slides"""
    pass


class TemplateError(DeckError):
    """Template file or descriptor is malformed or insufficient"""
    pass


class InsufficientPaletteError(TemplateError):
    """Template palette has fewer colors than styling requires"""
    pass


class UpstreamCapabilityError(DeckError):
    """Text-understanding or document-writer capability failed"""

    def __init__(
        self,
        message: str,
        capability: str = "",
        original_error: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details=details)
        self.capability = capability
        self.original_error = original_error

    def __str__(self):
        if self.capability:
            return f"[{self.capability}] {self.message}"
        return self.message


class PipelineAbort(DeckError):
    """A pipeline stage failed; carries the stage name and the cause"""

    def __init__(self, stage: str, cause: Exception):
        super().__init__(f"{stage} failed: {cause}")
        self.stage = stage
        self.cause = cause

    @property
    def reason(self) -> str:
        return str(self.cause)
