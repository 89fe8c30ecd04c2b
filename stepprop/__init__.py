"""stepprop public API."""

from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.errors import (
    ConfigError,
    ForwardPassRequired,
    InvalidTopology,
    NetworkError,
    ShapeMismatch,
)
from .core.gradcheck import check_gradients
from .core.network import Network
from .core.types import Node, node
from .training import losses
from .training.pipelines import build_network, load_preset, presets, run_pipeline
from .training.trainer import Trainer

__all__ = [
    "Network",
    "Node",
    "node",
    "Trainer",
    "activations",
    "losses",
    "types",
    "check_gradients",
    "build_network",
    "load_preset",
    "presets",
    "run_pipeline",
    "NetworkError",
    "ShapeMismatch",
    "InvalidTopology",
    "ForwardPassRequired",
    "ConfigError",
]
