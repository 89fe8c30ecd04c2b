"""Command line entry point for stepprop training runs."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from stepprop.training import pipelines


def _format_result(result) -> str:
    payload = {
        "steps": result.steps,
        "final_error": result.final_error,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
        "summary": result.summary_path,
    }
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        default="mazur-2-2-2",
        help="Preset configuration to execute (see --list-presets)",
    )
    parser.add_argument(
        "--config", type=Path, help="Optional JSON/YAML config override"
    )
    parser.add_argument("--steps", type=int, help="Number of training steps")
    parser.add_argument(
        "--learning-rate", type=float, help="Multiplier applied to every update"
    )
    parser.add_argument(
        "--train-bias",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Apply proposed bias updates as well as weight updates",
    )
    parser.add_argument(
        "--report-every", type=int, help="Report stats every N training steps"
    )
    parser.add_argument(
        "--target-error",
        type=float,
        help="Stop once the total error falls below this value",
    )
    parser.add_argument("--run-dir", type=Path, help="Directory for run artifacts")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Write training.png with the error and output curves"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Suppress per-step console output"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> dict:
    config = json.loads(json.dumps(pipelines.load_preset(args.preset)))

    if args.config:
        override = dict(pipelines.read_config_file(args.config))
        if {"data", "model", "train"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = pipelines.merge_config(config, override)

    model_cfg = config.setdefault("model", {})
    train_cfg = config.setdefault("train", {})
    if args.learning_rate is not None:
        model_cfg["learning_rate"] = float(args.learning_rate)
    if args.train_bias is not None:
        model_cfg["train_bias"] = bool(args.train_bias)
    if args.steps is not None:
        train_cfg["steps"] = int(args.steps)
    if args.report_every is not None:
        train_cfg["report_every"] = int(args.report_every)
    if args.target_error is not None:
        train_cfg["target_error"] = float(args.target_error)
    if args.run_dir is not None:
        train_cfg["run_dir"] = str(args.run_dir)
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    if args.quiet:
        train_cfg["quiet"] = True
    return config


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = resolve_config(args)

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_pipeline(config)
    print(_format_result(result))


if __name__ == "__main__":
    main()
