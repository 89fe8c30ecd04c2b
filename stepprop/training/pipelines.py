"""Pipeline assembly: presets and config files into a trained network."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

from ..core import activations
from ..core.errors import ConfigError, ShapeMismatch
from ..core.network import Network
from ..core.types import Layer, RunResult, node
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import TrainingPlot
from ..reporting.summary import write_summary
from .losses import REGISTRY as LOSS_REGISTRY
from .trainer import Trainer

_MAZUR_LAYERS = [
    [{"weights": [], "bias": 0.0}, {"weights": [], "bias": 0.0}],
    [{"weights": [0.15, 0.2], "bias": 0.35}, {"weights": [0.25, 0.3], "bias": 0.35}],
    [{"weights": [0.4, 0.45], "bias": 0.6}, {"weights": [0.5, 0.55], "bias": 0.6}],
]

_PRESETS: Dict[str, Mapping[str, object]] = {
    "mazur-2-2-2": {
        "data": {"inputs": [0.05, 0.10], "expected": [0.01, 0.99]},
        "model": {
            "layers": _MAZUR_LAYERS,
            "activation": "logistic",
            "loss": "half_squared",
            "learning_rate": 0.5,
            "train_bias": False,
        },
        "train": {
            "steps": 10000,
            "report_every": 1000,
            "run_dir": "runs/mazur-2-2-2",
            "enable_plots": False,
        },
    },
    "mazur-2-2-2-bias": {
        "data": {"inputs": [0.05, 0.10], "expected": [0.01, 0.99]},
        "model": {
            "layers": _MAZUR_LAYERS,
            "activation": "logistic",
            "loss": "half_squared",
            "learning_rate": 0.5,
            "train_bias": True,
        },
        "train": {
            "steps": 10000,
            "report_every": 1000,
            "run_dir": "runs/mazur-2-2-2-bias",
            "enable_plots": False,
        },
    },
    "random-2-4-2": {
        "data": {"inputs": [0.05, 0.10], "expected": [0.01, 0.99]},
        "model": {
            "dims": [2, 4, 2],
            "seed": 7,
            "init_scale": 0.5,
            "activation": "logistic",
            "loss": "half_squared",
            "learning_rate": 0.5,
            "train_bias": True,
        },
        "train": {
            "steps": 5000,
            "report_every": 500,
            "target_error": 1e-4,
            "run_dir": "runs/random-2-4-2",
            "enable_plots": False,
        },
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[2] / "configs" / "presets"
_REQUIRED_SECTIONS = {"data", "model", "train"}


def read_config_file(path: str | Path) -> Mapping[str, object]:
    """Decode a JSON or YAML config file into a mapping."""

    path = Path(path)
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML configs (pip install pyyaml)") from exc
        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ConfigError(f"Unsupported config file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise ConfigError(f"Config {path.name} must decode to a mapping")
    return data


def _file_presets(preset_dir: Path | None = None) -> Dict[str, Mapping[str, object]]:
    preset_dir = preset_dir or _PRESET_DIR
    found: Dict[str, Mapping[str, object]] = {}
    if not preset_dir.exists():
        return found
    for file in sorted(preset_dir.iterdir()):
        if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
            continue
        data = read_config_file(file)
        missing = _REQUIRED_SECTIONS - set(data)
        if missing:
            raise ConfigError(
                f"Preset {file.name} is missing required sections: {', '.join(sorted(missing))}"
            )
        found[file.stem] = json.loads(json.dumps(data))
    return found


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    available = presets()
    if name not in available:
        raise ConfigError(f"Unknown preset {name!r}. Available presets: {', '.join(sorted(available))}")
    return available[name]


def merge_config(base: dict, override: Mapping[str, object]) -> dict:
    """Recursively merge ``override`` into ``base``."""

    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            base[key] = merge_config(dict(base[key]), value)
        else:
            base[key] = value
    return base


def _build_layers(layers_cfg: Sequence[object]) -> List[Layer]:
    layers: List[Layer] = []
    for idx, layer in enumerate(layers_cfg):
        if not isinstance(layer, Sequence) or isinstance(layer, (str, bytes)):
            raise ConfigError(f"Layer {idx} must be a list of nodes")
        built: Layer = []
        for entry in layer:
            if isinstance(entry, Mapping):
                built.append(node(entry.get("weights", []), float(entry.get("bias", 0.0))))
            else:
                raise ConfigError(f"Nodes in layer {idx} must be mappings with weights/bias")
        layers.append(built)
    return layers


def build_network(config: Mapping[str, object]) -> Network:
    """Construct a :class:`Network` from the ``model`` section of ``config``."""

    if "model" not in config:
        raise ConfigError("Config is missing the 'model' section")
    model_cfg = dict(config["model"])  # type: ignore[arg-type]
    activation = activations.REGISTRY.get(str(model_cfg.get("activation", "logistic")))
    loss = LOSS_REGISTRY.get(str(model_cfg.get("loss", "half_squared")))
    functions = {
        "activation": activation.fn,
        "activation_derivative": activation.derivative,
        "error": loss.fn,
        "error_derivative": loss.derivative,
        "learning_rate": float(model_cfg.get("learning_rate", 0.5)),
        "train_bias": bool(model_cfg.get("train_bias", False)),
    }
    if "layers" in model_cfg:
        return Network(_build_layers(model_cfg["layers"]), **functions)
    if "dims" in model_cfg:
        return Network.from_dims(
            [int(d) for d in model_cfg["dims"]],
            seed=int(model_cfg.get("seed", 0)),
            scale=float(model_cfg.get("init_scale", 0.5)),
            bias=float(model_cfg.get("init_bias", 0.0)),
            **functions,
        )
    raise ConfigError("The 'model' section needs either 'layers' or 'dims'")


def _resolve_run_dir(train_cfg: Mapping[str, object]) -> Path:
    if train_cfg.get("run_dir"):
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    missing = _REQUIRED_SECTIONS - set(config)
    if missing:
        raise ConfigError(f"Config is missing required sections: {', '.join(sorted(missing))}")
    data_cfg = dict(config["data"])  # type: ignore[arg-type]
    train_cfg = dict(config["train"])  # type: ignore[arg-type]
    if "inputs" not in data_cfg or "expected" not in data_cfg:
        raise ConfigError("The 'data' section needs both 'inputs' and 'expected'")
    inputs = [float(v) for v in data_cfg["inputs"]]
    expected = [float(v) for v in data_cfg["expected"]]

    network = build_network(config)
    sizes = network.layer_sizes
    if len(inputs) != sizes[0]:
        raise ShapeMismatch("data.inputs", sizes[0], len(inputs))
    if len(expected) != sizes[-1]:
        raise ShapeMismatch("data.expected", sizes[-1], len(expected))
    run_dir = _resolve_run_dir(train_cfg)
    run_dir.mkdir(parents=True, exist_ok=True)
    quiet = bool(train_cfg.get("quiet", False))

    if not quiet:
        _print_startup_summary(network, config)

    jsonl = JsonlSink(run_dir / "metrics.jsonl")
    csv_sink = CsvSink(run_dir / "metrics.csv")
    plots = TrainingPlot(run_dir, expected, enabled=bool(train_cfg.get("enable_plots", False)))
    trainer = Trainer(network, callbacks=[jsonl, csv_sink, plots], verbose=not quiet)

    target_error = train_cfg.get("target_error")
    result = trainer.run(
        inputs,
        expected,
        steps=int(train_cfg.get("steps", 1000)),
        report_every=int(train_cfg.get("report_every", 1000)),
        target_error=float(target_error) if target_error is not None else None,
    )
    plots.close()

    safe_config = json.loads(json.dumps(config))
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=safe_config,
        layer_sizes=network.layer_sizes,
        final_weights={"weights": network.weights(), "biases": network.biases()},
    )
    summary_path = write_summary(jsonl.path, run_dir / "summary.json")
    (run_dir / "config.json").write_text(json.dumps(safe_config, indent=2))

    return RunResult(
        steps=result.steps,
        final_error=result.final_error,
        metrics_path=str(jsonl.path),
        manifest_path=manifest,
        summary_path=summary_path,
    )


def _print_startup_summary(network: Network, config: Mapping[str, object]) -> None:
    model_cfg = config.get("model", {})
    print("=== stepprop run ===")
    print(f"Layer sizes   : {network.layer_sizes}")
    print(f"Activation    : {model_cfg.get('activation', 'logistic')}")  # type: ignore[union-attr]
    print(f"Loss          : {model_cfg.get('loss', 'half_squared')}")  # type: ignore[union-attr]
    print(f"Learning rate : {network.learning_rate}")
    print(f"Train bias    : {network.train_bias}")
    print("====================")


__all__ = [
    "build_network",
    "load_preset",
    "merge_config",
    "presets",
    "read_config_file",
    "run_pipeline",
]
