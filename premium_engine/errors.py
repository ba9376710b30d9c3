# premium_engine/errors.py
"""Exceptions raised by the risk and pricing layers."""

from __future__ import annotations

from typing import Any, Optional


class QuoteEngineError(Exception):
    """Base class for engine failures."""


class InvalidInput(QuoteEngineError, ValueError):
    """Raised when a profile or pricing input is rejected before computation."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class CatalogIntegrityError(QuoteEngineError):
    """Raised when the factor catalog has gaps, overlaps or bad multipliers."""
