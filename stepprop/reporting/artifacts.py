"""Run artifact helpers."""

from __future__ import annotations

import json
import platform
import time
from pathlib import Path
from typing import Mapping, Sequence

import numpy as np


def write_manifest(
    path: str | Path,
    *,
    config: Mapping[str, object],
    layer_sizes: Sequence[int],
    final_weights: Sequence[object] | None = None,
) -> str:
    """Write a manifest JSON file capturing what was run."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    manifest = {
        "generated_at": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "config": config,
        "topology": {
            "layer_sizes": list(layer_sizes),
            "parameters": int(sum(a * b for a, b in zip(layer_sizes[:-1], layer_sizes[1:]))),
        },
        "environment": {
            "python": platform.python_version(),
            "numpy": np.__version__,
        },
    }
    if final_weights is not None:
        manifest["final_weights"] = final_weights
    path.write_text(json.dumps(manifest, indent=2))
    return str(path)


__all__ = ["write_manifest"]
