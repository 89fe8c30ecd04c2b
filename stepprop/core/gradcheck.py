"""Finite-difference checks for the analytic backward pass."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .network import Network


@dataclass(frozen=True)
class GradientCheck:
    """Outcome of comparing analytic and numeric weight gradients."""

    max_abs_diff: float
    tolerance: float
    worst: Tuple[int, int, int]

    @property
    def passed(self) -> bool:
        return self.max_abs_diff <= self.tolerance


def _error_at(network: Network, inputs: Sequence[float], expected: Sequence[float]) -> float:
    network.feed_inputs(inputs)
    return network.total_error(expected)


def numerical_weight_gradient(
    network: Network,
    layer: int,
    node: int,
    weight: int,
    inputs: Sequence[float],
    expected: Sequence[float],
    eps: float = 1e-5,
) -> float:
    """Central-difference estimate of d(error)/d(weight).

    Works on a copy, so ``network`` keeps its weights and cached values.
    """

    shifted = network.copy()
    target = shifted.layers[layer][node]
    original = target.weights[weight]
    target.weights[weight] = original + eps
    plus = _error_at(shifted, inputs, expected)
    target.weights[weight] = original - eps
    minus = _error_at(shifted, inputs, expected)
    return (plus - minus) / (2.0 * eps)


def numerical_gradients(
    network: Network,
    inputs: Sequence[float],
    expected: Sequence[float],
    eps: float = 1e-5,
) -> List[List[List[float]]]:
    grads: List[List[List[float]]] = [[]]
    for idx in range(1, len(network.layers)):
        grads.append(
            [
                [
                    numerical_weight_gradient(network, idx, pos, w, inputs, expected, eps)
                    for w in range(len(n.weights))
                ]
                for pos, n in enumerate(network.layers[idx])
            ]
        )
    return grads


def check_gradients(
    network: Network,
    inputs: Sequence[float],
    expected: Sequence[float],
    eps: float = 1e-5,
    tol: float = 1e-6,
) -> GradientCheck:
    """Compare backpropagated gradients against central differences."""

    work = network.copy()
    work.feed_inputs(inputs)
    work.propose_updates(expected)
    analytic = work.weight_gradients()
    numeric = numerical_gradients(network, inputs, expected, eps)

    worst = (0, 0, 0)
    max_diff = 0.0
    for idx in range(1, len(analytic)):
        a = np.asarray(analytic[idx], dtype=np.float64)
        n = np.asarray(numeric[idx], dtype=np.float64)
        diff = np.abs(a - n)
        if diff.size and float(diff.max()) > max_diff:
            max_diff = float(diff.max())
            pos, w = np.unravel_index(int(np.argmax(diff)), diff.shape)
            worst = (idx, int(pos), int(w))
    return GradientCheck(max_abs_diff=max_diff, tolerance=tol, worst=worst)


__all__ = ["GradientCheck", "numerical_weight_gradient", "numerical_gradients", "check_gradients"]
