"""Training loop that repeatedly steps a network on a fixed example."""

from __future__ import annotations

from typing import Dict, List, Mapping, Sequence

from ..core.network import Network
from ..core.types import TrainResult


def step_metrics(network: Network, expected: Sequence[float]) -> Dict[str, float]:
    """Return the total error and every output of the cached forward pass."""

    metrics = {"error": float(network.total_error(expected))}
    for idx, value in enumerate(network.outputs()):
        metrics[f"output_{idx}"] = float(value)
    return metrics


def print_stats(step: int, metrics: Mapping[str, float]) -> None:
    outputs = [v for k, v in metrics.items() if k.startswith("output_")]
    print(f"========== T = {step} ==========")
    print(f"Output: {outputs}")
    print(f"The error is: {metrics['error']}")


class Trainer:
    """Run training steps and report progress to callbacks.

    Callbacks are objects with an ``on_step(step, metrics)`` method or plain
    callables taking the same arguments.
    """

    def __init__(
        self,
        network: Network,
        callbacks: Sequence[object] | None = None,
        *,
        verbose: bool = True,
    ) -> None:
        self.network = network
        self.callbacks = list(callbacks or [])
        self.verbose = verbose

    def run(
        self,
        inputs: Sequence[float],
        expected: Sequence[float],
        steps: int,
        *,
        report_every: int = 1000,
        target_error: float | None = None,
    ) -> TrainResult:
        if steps < 0:
            raise ValueError(f"steps must be non-negative, got {steps}")
        if report_every <= 0:
            raise ValueError(f"report_every must be positive, got {report_every}")

        self.network.feed_inputs(inputs)
        initial = step_metrics(self.network, expected)
        history: List[tuple] = []
        self._emit(0, initial, history)

        metrics = initial
        completed = 0
        for step in range(1, steps + 1):
            self.network.training_step(inputs, expected)
            completed = step
            reached = False
            if target_error is not None:
                # training_step leaves the pre-update forward pass cached.
                self.network.feed_inputs(inputs)
                reached = self.network.total_error(expected) < target_error
            if step == 1 or step % report_every == 0 or step == steps or reached:
                self.network.feed_inputs(inputs)
                metrics = step_metrics(self.network, expected)
                self._emit(step, metrics, history)
            if reached:
                break

        return TrainResult(
            steps=completed,
            initial_error=initial["error"],
            final_error=metrics["error"],
            history=history,
        )

    def _emit(self, step: int, metrics: Mapping[str, float], history: List[tuple]) -> None:
        history.append((step, dict(metrics)))
        if self.verbose:
            print_stats(step, metrics)
        for callback in self.callbacks:
            if hasattr(callback, "on_step"):
                callback.on_step(step, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(step, metrics)


__all__ = ["Trainer", "print_stats", "step_metrics"]
