"""Core typing contracts for stepprop."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, List

Scalar = float
ActivationFn = Callable[[float], float]
ErrorFn = Callable[[float, float], float]
Layer = List["Node"]


@dataclass
class Node:
    """A weighted-sum unit plus the scratch values used while training.

    ``weights[i]`` is the connection from node ``i`` of the previous layer.
    Input-layer nodes carry no weights; their ``last_output`` is set
    directly by :meth:`stepprop.core.network.Network.feed_inputs`.
    """

    weights: List[float]
    bias: float = 0.0
    last_input: float = 0.0
    last_output: float = 0.0
    pending_weight_updates: List[float] = field(default_factory=list)
    pending_bias_update: float = 0.0
    error_wrt_input: float = 0.0

    def __post_init__(self) -> None:
        self.weights = [float(w) for w in self.weights]
        self.bias = float(self.bias)
        if len(self.pending_weight_updates) != len(self.weights):
            self.pending_weight_updates = [0.0] * len(self.weights)


def node(weights: Iterable[float], bias: float = 0.0) -> Node:
    """Create a node with zeroed scratch state."""

    return Node(weights=list(weights), bias=bias)


@dataclass(frozen=True)
class TrainResult:
    """Summary returned by :meth:`stepprop.training.trainer.Trainer.run`."""

    steps: int
    initial_error: float
    final_error: float
    history: List[tuple] = field(default_factory=list, compare=False)


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`stepprop.training.pipelines.run_pipeline`."""

    steps: int
    final_error: float
    metrics_path: str
    manifest_path: str
    summary_path: str = ""
