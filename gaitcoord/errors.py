"""Exception types raised by gaitcoord.

Per-trial data gaps are never raised; they leave the output cell absent.
"""
from __future__ import annotations

__all__ = ["GaitCoordError", "MissingInputError", "InvalidArgumentError", "InvalidInputError"]


class GaitCoordError(Exception):
    """Base class for gaitcoord errors."""


class MissingInputError(GaitCoordError):
    """A required top-level input is absent before the batch starts."""


class InvalidArgumentError(GaitCoordError, ValueError):
    """Malformed static configuration: bad leg selector, mismatched grid shapes, etc."""


class InvalidInputError(GaitCoordError, ValueError):
    """A signal is empty or not purely numeric."""
