"""Training plots: total error and per-output convergence towards the targets."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Mapping, Sequence

PLOT_NAME = "training.png"


def _output_series(records: Sequence[Mapping[str, float]]) -> Dict[int, List[float]]:
    series: Dict[int, List[float]] = {}
    for record in records:
        for key, value in record.items():
            if key.startswith("output_"):
                series.setdefault(int(key[len("output_"):]), []).append(float(value))
    return series


def plot_training(
    steps: Sequence[int],
    records: Sequence[Mapping[str, float]],
    targets: Sequence[float],
    path: str | Path,
) -> Path:
    """Draw the error curve and every output against its target into ``path``.

    The left panel shows the total error on a log scale. The right panel
    draws one line per output node with its expected value as a dashed
    horizontal line in the same colour.
    """

    import matplotlib

    matplotlib.use("Agg", force=True)
    import matplotlib.pyplot as plt

    path = Path(path)
    fig, (err_ax, out_ax) = plt.subplots(1, 2, figsize=(10, 4))

    errors = [max(float(r["error"]), 1e-300) for r in records]
    err_ax.plot(steps, errors, lw=1.5)
    err_ax.set_yscale("log")
    err_ax.set_xlabel("Step")
    err_ax.set_ylabel("Total error")
    err_ax.grid(True, alpha=0.3)

    for idx, values in sorted(_output_series(records).items()):
        line, = out_ax.plot(steps, values, lw=1.5, label=f"output {idx}")
        if idx < len(targets):
            out_ax.axhline(targets[idx], ls="--", lw=1, color=line.get_color())
    out_ax.set_xlabel("Step")
    out_ax.set_ylabel("Activation")
    out_ax.legend(loc="best")
    out_ax.grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)
    return path


class TrainingPlot:
    """Trainer callback that buffers reported steps and plots them on ``close()``."""

    def __init__(self, run_dir: str | Path, targets: Sequence[float], enabled: bool = False):
        self.run_dir = Path(run_dir)
        self.targets = [float(t) for t in targets]
        self.enabled = enabled
        self.steps: List[int] = []
        self.records: List[Dict[str, float]] = []

    def on_step(self, step: int, metrics: Mapping[str, float]) -> None:
        if self.enabled:
            self.steps.append(int(step))
            self.records.append(dict(metrics))

    __call__ = on_step

    def close(self) -> Path | None:
        if not self.enabled or not self.records:
            return None
        self.run_dir.mkdir(parents=True, exist_ok=True)
        return plot_training(self.steps, self.records, self.targets, self.run_dir / PLOT_NAME)


__all__ = ["PLOT_NAME", "TrainingPlot", "plot_training"]
