"""Activation functions and their derivatives."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable

import numpy as np

from .errors import ConfigError
from .types import ActivationFn


def logistic(x: float) -> float:
    """Return ``1 / (1 + e^-x)``."""

    return float(1.0 / (1.0 + np.exp(-x)))


def logistic_deriv(x: float) -> float:
    a = logistic(x)
    return a * (1.0 - a)


def tanh(x: float) -> float:
    return float(np.tanh(x))


def tanh_deriv(x: float) -> float:
    return float(1.0 - np.tanh(x) ** 2)


def relu(x: float) -> float:
    """Return the ReLU activation."""

    return float(np.maximum(x, 0.0))


def relu_deriv(x: float) -> float:
    # Not differentiable at zero; take the left derivative there.
    return 1.0 if x > 0.0 else 0.0


def identity(x: float) -> float:
    return float(x)


def identity_deriv(x: float) -> float:
    return 1.0


@dataclass(frozen=True)
class Activation:
    """An activation function paired with its derivative."""

    name: str
    fn: ActivationFn
    derivative: ActivationFn

    def __call__(self, x: float) -> float:
        return self.fn(x)


class ActivationRegistry:
    """Central registry for named activation pairs."""

    def __init__(self) -> None:
        self._registry: Dict[str, Activation] = {}

    def register(self, name: str, fn: ActivationFn, derivative: ActivationFn) -> None:
        self._registry[name] = Activation(name, fn, derivative)

    def get(self, name: str) -> Activation:
        if name not in self._registry:
            available = ", ".join(sorted(self._registry))
            raise ConfigError(f"Unknown activation {name!r}. Available activations: {available}")
        return self._registry[name]

    def names(self) -> Iterable[str]:
        return sorted(self._registry)


REGISTRY = ActivationRegistry()
REGISTRY.register("logistic", logistic, logistic_deriv)
REGISTRY.register("tanh", tanh, tanh_deriv)
REGISTRY.register("relu", relu, relu_deriv)
REGISTRY.register("identity", identity, identity_deriv)
# Alias for parity with common naming
REGISTRY.register("sigmoid", logistic, logistic_deriv)

__all__ = [
    "Activation",
    "ActivationRegistry",
    "REGISTRY",
    "logistic",
    "logistic_deriv",
    "tanh",
    "tanh_deriv",
    "relu",
    "relu_deriv",
    "identity",
    "identity_deriv",
]
