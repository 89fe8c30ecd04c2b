"""Per-output error functions used to score network outputs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable

import numpy as np

from ..core.errors import ConfigError
from ..core.types import ErrorFn


@dataclass(frozen=True)
class Loss:
    """Error function wrapper carrying d(error)/d(actual) alongside it.

    Both callables take ``(actual, expected)`` for a single output; the
    network sums ``fn`` over every output to obtain the total error.
    """

    name: str
    fn: ErrorFn
    derivative: ErrorFn

    def __call__(self, actual: float, expected: float) -> float:
        return self.fn(actual, expected)


class LossRegistry:
    """Central registry for loss functions."""

    def __init__(self) -> None:
        self._registry: Dict[str, Loss] = {}

    def register(self, name: str, fn: ErrorFn, derivative: ErrorFn) -> None:
        self._registry[name] = Loss(name, fn, derivative)

    def get(self, name: str) -> Loss:
        if name not in self._registry:
            available = ", ".join(sorted(self._registry))
            raise ConfigError(f"Unknown loss {name!r}. Available losses: {available}")
        return self._registry[name]

    def names(self) -> Iterable[str]:
        return sorted(self._registry)


REGISTRY = LossRegistry()


def half_squared(actual: float, expected: float) -> float:
    return float(0.5 * np.square(expected - actual))


def half_squared_deriv(actual: float, expected: float) -> float:
    # d/d(actual) of 0.5 * (expected - actual)^2
    return float(actual - expected)


def squared(actual: float, expected: float) -> float:
    return float(np.square(expected - actual))


def squared_deriv(actual: float, expected: float) -> float:
    return float(2.0 * (actual - expected))


def absolute(actual: float, expected: float) -> float:
    return float(np.abs(expected - actual))


def absolute_deriv(actual: float, expected: float) -> float:
    return float(np.sign(actual - expected))


def cross_entropy(actual: float, expected: float) -> float:
    """Binary cross entropy of a single output in ``(0, 1)``."""

    return float(-(expected * np.log(actual) + (1.0 - expected) * np.log(1.0 - actual)))


def cross_entropy_deriv(actual: float, expected: float) -> float:
    return float((actual - expected) / (actual * (1.0 - actual)))


REGISTRY.register("half_squared", half_squared, half_squared_deriv)
REGISTRY.register("squared", squared, squared_deriv)
REGISTRY.register("absolute", absolute, absolute_deriv)
REGISTRY.register("cross_entropy", cross_entropy, cross_entropy_deriv)
REGISTRY.register("bce", cross_entropy, cross_entropy_deriv)

__all__ = [
    "Loss",
    "LossRegistry",
    "REGISTRY",
    "half_squared",
    "half_squared_deriv",
    "squared",
    "squared_deriv",
    "absolute",
    "absolute_deriv",
    "cross_entropy",
    "cross_entropy_deriv",
]
