from __future__ import annotations

import pytest

from stepprop.core.activations import logistic, logistic_deriv
from stepprop.core.network import Network
from stepprop.core.types import node
from stepprop.training.losses import half_squared, half_squared_deriv


def make_mazur(learning_rate: float = 0.5, train_bias: bool = False) -> Network:
    """The 2-2-2 network from the canonical step-by-step backpropagation example."""

    layers = [
        [node([]), node([])],
        [node([0.15, 0.2], 0.35), node([0.25, 0.3], 0.35)],
        [node([0.4, 0.45], 0.6), node([0.5, 0.55], 0.6)],
    ]
    return Network(
        layers,
        activation=logistic,
        activation_derivative=logistic_deriv,
        error=half_squared,
        error_derivative=half_squared_deriv,
        learning_rate=learning_rate,
        train_bias=train_bias,
    )


@pytest.fixture
def mazur_factory():
    return make_mazur


@pytest.fixture
def mazur() -> Network:
    return make_mazur()
