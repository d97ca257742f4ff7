"""
Exceptions
==========

Every error the library raises on malformed arguments derives from
``NetworkError``. The concrete classes also inherit from the matching builtin
(``ValueError`` for bad shapes or data, ``RuntimeError`` for calls made in the
wrong order) so callers can catch either.
"""


class NetworkError(Exception):
    """Base class for all ffnet errors."""


class DimensionMismatch(NetworkError, ValueError):
    """Matrix shapes are incompatible with the requested operation."""


class SizeMismatch(NetworkError, ValueError):
    """Elementwise operands differ in shape, or a target has the wrong width."""


class MissingState(NetworkError, RuntimeError):
    """Backward pass requested without a preceding forward pass."""


class NoInputLayer(NetworkError, RuntimeError):
    """A layer was added, or a prediction made, before the input layer exists."""


class AlreadyInitialized(NetworkError, RuntimeError):
    """The input layer was added to a network that already has layers."""


class InvalidDataset(NetworkError, ValueError):
    """Inputs/targets are empty or have different lengths."""
