"""Fully connected feed-forward network trained by backpropagation.

The network is a list of layers, each a list of :class:`Node`. Layer 0 is the
input layer and the last layer is the output layer. Every node outside the
input layer holds one weight per node of the previous layer plus a bias
weight for an implicit unit that always outputs 1.

A training step runs in two phases. The backward pass walks from the output
layer towards the input layer and, for every node, caches
``d(error)/d(input)`` and proposes updates for the weights feeding it. Only
once every layer has proposed its updates are they applied, because the
hidden-layer sums read the next layer's weights as they were during the
forward pass.
"""

from __future__ import annotations

import copy
from typing import List, Sequence

import numpy as np

from .errors import ConfigError, ForwardPassRequired, InvalidTopology, ShapeMismatch
from .types import ActivationFn, ErrorFn, Layer, Node, node


def _validate_topology(layers: Sequence[Layer]) -> None:
    if len(layers) < 2:
        raise InvalidTopology(
            f"A network needs at least an input and an output layer, got {len(layers)} layer(s)"
        )
    for idx, layer in enumerate(layers):
        if not layer:
            raise InvalidTopology(f"Layer {idx} has no nodes")
    for pos, n in enumerate(layers[0]):
        if n.weights:
            raise InvalidTopology(
                f"Input node {pos} has {len(n.weights)} weights; input nodes take none"
            )
    for idx in range(1, len(layers)):
        fan_in = len(layers[idx - 1])
        for pos, n in enumerate(layers[idx]):
            if len(n.weights) != fan_in:
                raise InvalidTopology(
                    f"Node {pos} of layer {idx} has {len(n.weights)} weights "
                    f"but layer {idx - 1} has {fan_in} nodes"
                )


class Network:
    """Layers of nodes plus the injected activation and error functions.

    ``activation_derivative`` must be the derivative of ``activation`` and
    ``error_derivative`` the derivative of ``error`` with respect to its
    first (actual output) argument; neither pairing is checked.
    """

    def __init__(
        self,
        layers: Sequence[Sequence[Node]],
        activation: ActivationFn,
        activation_derivative: ActivationFn,
        error: ErrorFn,
        error_derivative: ErrorFn,
        learning_rate: float,
        *,
        train_bias: bool = False,
    ) -> None:
        # The network owns its nodes; callers may reuse the layers they passed in.
        self.layers: List[Layer] = [[copy.deepcopy(n) for n in layer] for layer in layers]
        _validate_topology(self.layers)
        if not learning_rate > 0:
            raise ConfigError(f"learning_rate must be positive, got {learning_rate!r}")
        self.activation = activation
        self.activation_derivative = activation_derivative
        self.error = error
        self.error_derivative = error_derivative
        self.learning_rate = float(learning_rate)
        self.train_bias = bool(train_bias)
        self._fed = False

    @classmethod
    def from_dims(
        cls,
        dims: Sequence[int],
        *,
        seed: int = 0,
        scale: float = 0.5,
        bias: float = 0.0,
        **kwargs,
    ) -> "Network":
        """Build a network with weights drawn uniformly from ``[-scale, scale]``."""

        if len(dims) < 2:
            raise InvalidTopology(f"dims must name at least two layers, got {list(dims)}")
        rng = np.random.default_rng(seed)
        layers: List[Layer] = [[node([]) for _ in range(int(dims[0]))]]
        for in_dim, out_dim in zip(dims[:-1], dims[1:]):
            layers.append(
                [
                    node(rng.uniform(-scale, scale, size=int(in_dim)).tolist(), bias)
                    for _ in range(int(out_dim))
                ]
            )
        return cls(layers, **kwargs)

    # ------------------------------------------------------------------
    # Shape helpers

    @property
    def layer_sizes(self) -> List[int]:
        return [len(layer) for layer in self.layers]

    @property
    def input_layer(self) -> Layer:
        return self.layers[0]

    @property
    def output_layer(self) -> Layer:
        return self.layers[-1]

    def _check_inputs(self, inputs: Sequence[float]) -> None:
        if len(inputs) != len(self.input_layer):
            raise ShapeMismatch("inputs", len(self.input_layer), len(inputs))

    def _check_expected(self, expected: Sequence[float]) -> None:
        if len(expected) != len(self.output_layer):
            raise ShapeMismatch("expected", len(self.output_layer), len(expected))

    def _require_forward_pass(self) -> None:
        if not self._fed:
            raise ForwardPassRequired("feed_inputs must run before outputs can be read")

    # ------------------------------------------------------------------
    # Forward pass

    def feed_inputs(self, inputs: Sequence[float]) -> None:
        """Set the input layer to ``inputs`` and propagate forwards."""

        self._check_inputs(inputs)
        for n, value in zip(self.input_layer, inputs):
            n.last_output = float(value)

        for idx in range(1, len(self.layers)):
            previous = self.layers[idx - 1]
            for n in self.layers[idx]:
                total = n.bias
                for prev, weight in zip(previous, n.weights):
                    total += prev.last_output * weight
                n.last_input = total
                n.last_output = self.activation(total)
        self._fed = True

    def outputs(self) -> List[float]:
        self._require_forward_pass()
        return [n.last_output for n in self.output_layer]

    def total_error(self, expected: Sequence[float]) -> float:
        """Sum the per-output error of the cached outputs against ``expected``."""

        self._check_expected(expected)
        self._require_forward_pass()
        return sum(
            self.error(n.last_output, float(target))
            for n, target in zip(self.output_layer, expected)
        )

    # ------------------------------------------------------------------
    # Backward pass

    def training_step(self, inputs: Sequence[float], expected: Sequence[float]) -> None:
        """Run one forward pass, one backward pass, then apply the updates."""

        self._check_inputs(inputs)
        self._check_expected(expected)
        self.feed_inputs(inputs)
        self.propose_updates(expected)
        self.apply_updates()

    def propose_updates(self, expected: Sequence[float]) -> None:
        """Fill every node's pending updates from the cached forward pass.

        Weights are not modified; see :meth:`apply_updates`.
        """

        self._check_expected(expected)
        self._require_forward_pass()
        self._propose_output_layer(expected)
        for idx in range(len(self.layers) - 2, 0, -1):
            self._propose_hidden_layer(idx)

    def apply_updates(self) -> None:
        for idx in range(1, len(self.layers)):
            self._apply_layer(idx)

    def _propose_output_layer(self, expected: Sequence[float]) -> None:
        previous = self.layers[-2]
        for n, target in zip(self.output_layer, expected):
            # Total error is a sum over outputs, so only this output's term
            # varies with this node's output.
            error_wrt_out = self.error_derivative(n.last_output, float(target))
            self._propose_node(n, error_wrt_out, previous)

    def _propose_hidden_layer(self, idx: int) -> None:
        previous = self.layers[idx - 1]
        following = self.layers[idx + 1]
        for pos, n in enumerate(self.layers[idx]):
            # This node's output feeds every node of the next layer, so its
            # error contribution is summed across all of them.
            error_wrt_out = 0.0
            for nxt in following:
                error_wrt_out += nxt.error_wrt_input * nxt.weights[pos]
            self._propose_node(n, error_wrt_out, previous)

    def _propose_node(self, n: Node, error_wrt_out: float, previous: Layer) -> None:
        out_wrt_in = self.activation_derivative(n.last_input)
        error_wrt_in = error_wrt_out * out_wrt_in
        n.error_wrt_input = error_wrt_in
        # d(input)/d(weight_i) is the output of previous node i. Step against
        # the gradient.
        n.pending_weight_updates = [
            -(error_wrt_in * prev.last_output * self.learning_rate) for prev in previous
        ]
        # The bias unit always outputs 1.
        n.pending_bias_update = -(error_wrt_in * 1.0 * self.learning_rate)

    def _apply_layer(self, idx: int) -> None:
        for n in self.layers[idx]:
            n.weights = [w + dw for w, dw in zip(n.weights, n.pending_weight_updates)]
            if self.train_bias:
                n.bias += n.pending_bias_update

    # ------------------------------------------------------------------
    # Inspection

    def weight_gradients(self) -> List[List[List[float]]]:
        """Return d(error)/d(weight) from the most recent backward pass.

        Entry ``[layer][node][i]`` matches ``layers[layer][node].weights[i]``;
        the input layer contributes an empty list.
        """

        grads: List[List[List[float]]] = [[]]
        for idx in range(1, len(self.layers)):
            previous = self.layers[idx - 1]
            grads.append(
                [
                    [n.error_wrt_input * prev.last_output for prev in previous]
                    for n in self.layers[idx]
                ]
            )
        return grads

    def bias_gradients(self) -> List[List[float]]:
        grads: List[List[float]] = [[]]
        grads.extend([n.error_wrt_input for n in layer] for layer in self.layers[1:])
        return grads

    def weights(self) -> List[List[List[float]]]:
        return [[list(n.weights) for n in layer] for layer in self.layers]

    def biases(self) -> List[List[float]]:
        return [[n.bias for n in layer] for layer in self.layers]

    def copy(self) -> "Network":
        return copy.deepcopy(self)

    def __repr__(self) -> str:
        return (
            f"Network(layer_sizes={self.layer_sizes}, learning_rate={self.learning_rate}, "
            f"train_bias={self.train_bias})"
        )


__all__ = ["Network"]
