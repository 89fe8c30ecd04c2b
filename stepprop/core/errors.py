"""Exception taxonomy for network contract violations."""

from __future__ import annotations


class NetworkError(ValueError):
    """Base class for every error raised by stepprop."""


class ShapeMismatch(NetworkError, IndexError):
    """A vector's length does not match the layer it is paired with."""

    def __init__(self, what: str, expected: int, actual: int) -> None:
        super().__init__(f"{what} has length {actual}, expected {expected}")
        self.what = what
        self.expected = expected
        self.actual = actual


class InvalidTopology(NetworkError):
    """The layer structure cannot form a fully connected network."""


class ForwardPassRequired(NetworkError):
    """Cached outputs were read before any forward pass ran."""


class ConfigError(NetworkError):
    """A network or pipeline configuration is malformed."""


__all__ = [
    "NetworkError",
    "ShapeMismatch",
    "InvalidTopology",
    "ForwardPassRequired",
    "ConfigError",
]
