"""Core numerical primitives for stepprop."""

from . import activations, errors, gradcheck, network, types

__all__ = ["activations", "errors", "gradcheck", "network", "types"]
