"""Command line entry point for onlineprop training runs."""

from __future__ import annotations

import argparse
import json
import logging
import math
from pathlib import Path
from typing import Iterable, Mapping

from onlineprop.exceptions import OnlinePropError
from onlineprop.training import pipelines


def _finite(value: float | None) -> float | None:
    if value is None or not math.isfinite(value):
        return None
    return value


def _format_result(result: pipelines.RunResult) -> str:
    payload = {
        "epochs": result.epochs,
        "final_training_error": _finite(result.final_training_error),
        "avg_training_error": _finite(result.avg_training_error),
        "validation_error": _finite(result.validation_error),
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
        "summary": result.summary_path,
        "weights": result.weights_path,
    }
    if result.plot_path:
        payload["plot"] = result.plot_path
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="xor-online",
        help="Preset configuration to execute",
    )
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument("--data", type=Path, help="CSV or .npy training table")
    parser.add_argument(
        "--validation-data",
        type=Path,
        help="CSV or .npy validation table with the same columns as the training data",
    )
    parser.add_argument("--num-inputs", type=int, help="Number of leading input columns")
    parser.add_argument("--num-hidden", type=int, help="Number of hidden neurons")
    parser.add_argument("--initial-weights", type=Path, help="Initial weights (.npz)")
    parser.add_argument("--alpha", type=float, help="Learning rate")
    parser.add_argument("--max-epochs", type=int, help="Epoch limit for the termination policy")
    parser.add_argument("--max-error", type=float, help="Error threshold for the termination policy")
    parser.add_argument(
        "--termination",
        choices=["none", "epochs", "error", "either", "both"],
        help="Termination policy",
    )
    parser.add_argument(
        "--histories",
        help="Histories to record, joined with '|' (e.g. 'training|weights')",
    )
    parser.add_argument("--run-dir", help="Directory for run artifacts")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Save error curve plots"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def _apply_args(
    config: dict, args: argparse.Namespace, model_override: Mapping[str, object] | None = None
) -> dict:
    if args.data:
        data_cfg: dict = {"name": "table", "options": {"path": str(args.data)}}
        if args.validation_data:
            data_cfg["validation"] = {
                "name": "table",
                "options": {"path": str(args.validation_data)},
            }
        config["data"] = data_cfg
        # Preset model settings only apply to the preset dataset.
        config["model"] = dict(model_override or {})
    elif args.validation_data:
        config.setdefault("data", {})["validation"] = {
            "name": "table",
            "options": {"path": str(args.validation_data)},
        }

    model_cfg = config.setdefault("model", {})
    if args.num_inputs is not None:
        model_cfg["num_inputs"] = int(args.num_inputs)
    if args.num_hidden is not None:
        model_cfg["num_hidden"] = int(args.num_hidden)
    if args.initial_weights:
        model_cfg["initial_weights"] = str(args.initial_weights)

    train_cfg = config.setdefault("train", {})
    if args.alpha is not None:
        train_cfg["alpha"] = float(args.alpha)
    if args.max_epochs is not None:
        train_cfg["max_epochs"] = int(args.max_epochs)
    if args.max_error is not None:
        train_cfg["max_error"] = float(args.max_error)
    if args.termination:
        train_cfg["termination_mode"] = args.termination
    if args.histories:
        train_cfg["histories"] = args.histories
    if args.run_dir:
        train_cfg["run_dir"] = args.run_dir
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    return config


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = pipelines.load_preset(args.preset)
    model_override: Mapping[str, object] = {}
    if args.config:
        try:
            override = pipelines.read_config_file(args.config)
        except OnlinePropError as exc:
            raise SystemExit(f"error: {exc}") from exc
        model_override = dict(override.get("model") or {})  # type: ignore[arg-type]
        if {"data", "model", "train"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = pipelines.merge_config(config, override)

    config = _apply_args(config, args, model_override)

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    try:
        result = pipelines.run_pipeline(config)
    except OnlinePropError as exc:
        raise SystemExit(f"error: {exc}") from exc
    print(_format_result(result))


if __name__ == "__main__":
    main()
