"""Exception hierarchy raised by onlineprop."""

from __future__ import annotations


class OnlinePropError(Exception):
    """Base class for all errors raised by onlineprop."""


class InvalidArgument(OnlinePropError, ValueError):
    """Raised when data, topology or configuration values are unusable."""


class ShapeMismatch(InvalidArgument):
    """Raised when supplied initial weights do not fit the topology."""


class SchemaMismatch(InvalidArgument):
    """Raised when validation data has a different column layout to training data."""


class PrecursorRequired(OnlinePropError, RuntimeError):
    """Raised when validation is requested before a successful training run."""


class BatchModeNotImplemented(OnlinePropError, NotImplementedError):
    """Raised when the declared-but-unimplemented batch mode is selected."""


__all__ = [
    "OnlinePropError",
    "InvalidArgument",
    "ShapeMismatch",
    "SchemaMismatch",
    "PrecursorRequired",
    "BatchModeNotImplemented",
]
