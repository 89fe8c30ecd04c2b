"""Deterministic run summarisation helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Mapping, Sequence

import numpy as np


def _area(y: np.ndarray, x: np.ndarray) -> float:
    trapezoid = getattr(np, "trapezoid", None)
    if callable(trapezoid):
        return float(trapezoid(y, x))
    return float(np.trapz(y, x))


def compute_auc(points: Sequence[float], steps: Sequence[float] | None = None) -> float:
    """Return the area under ``points``, along ``steps`` or an implicit index axis."""

    if not points:
        return 0.0
    y = np.asarray(points, dtype=np.float64)
    if steps is None:
        x = np.arange(len(points), dtype=np.float64)
    else:
        x = np.asarray(steps, dtype=np.float64)
    return _area(y, x)


def _extract_numeric(records: Iterable[Mapping[str, object]]) -> Mapping[str, list[float]]:
    metrics: dict[str, list[float]] = {}
    for record in records:
        for key, value in record.items():
            if key == "step":
                continue
            if isinstance(value, (int, float)):
                metrics.setdefault(key, []).append(float(value))
    return metrics


def build_summary(records: list[Mapping[str, object]]) -> Mapping[str, object]:
    metrics = _extract_numeric(records)
    steps = [float(r.get("step", i)) for i, r in enumerate(records)]
    summary_metrics: dict[str, Mapping[str, float]] = {}
    for name, values in metrics.items():
        arr = np.asarray(values, dtype=np.float64)
        summary_metrics[name] = {
            "min": float(np.min(arr)),
            "max": float(np.max(arr)),
            "mean": float(np.mean(arr)),
            "first": float(arr[0]),
            "last": float(arr[-1]),
            "auc": compute_auc(values, steps[: len(values)]),
        }

    return {
        "version": 1,
        "records": len(records),
        "last_step": int(steps[-1]) if steps else 0,
        "metrics": summary_metrics,
    }


def write_summary(metrics_jsonl: str | Path, out_summary_json: str | Path) -> str:
    """Write a deterministic summary of ``metrics_jsonl``."""

    metrics_path = Path(metrics_jsonl)
    out_path = Path(out_summary_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    records: list[Mapping[str, object]] = []
    if metrics_path.exists():
        for line in metrics_path.read_text().splitlines():
            line = line.strip()
            if not line:
                continue
            records.append(json.loads(line))

    summary = build_summary(records)
    out_path.write_text(json.dumps(summary, sort_keys=True, indent=2))
    return str(out_path)


__all__ = ["compute_auc", "build_summary", "write_summary"]
