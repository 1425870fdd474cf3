"""Pipeline assembly: data loading, training, validation and run artifacts."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Mapping, Tuple

from ..core.types import Array
from ..data.tables import load_table, make_sine_table, make_xor_table
from ..exceptions import InvalidArgument
from ..reporting.artifacts import load_weights, save_weights, write_manifest
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import plot_error_curves
from ..reporting.summary import write_summary
from .config import TrainerConfig
from .history import History
from .trainer import Trainer

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor-online": {
        "data": {"name": "xor", "options": {}, "validation": "train"},
        "model": {"num_inputs": 2, "num_hidden": 2},
        "train": {
            "alpha": 0.5,
            "termination_mode": "either",
            "max_epochs": 2000,
            "max_error": 0.001,
            "histories": ["errors"],
            "run_dir": "runs/xor-online",
            "enable_plots": False,
        },
    },
    "xor-smoke": {
        "data": {"name": "xor", "options": {}, "validation": "train"},
        "model": {"num_inputs": 2},
        "train": {
            "alpha": 0.1,
            "termination_mode": "epochs",
            "max_epochs": 5,
            "histories": ["errors"],
            "run_dir": "runs/xor-smoke",
            "enable_plots": False,
        },
    },
    "sine-online": {
        "data": {
            "name": "sine",
            "options": {"n_points": 32, "freq": 1.0},
            "validation": {"name": "sine", "options": {"n_points": 17, "freq": 1.0}},
        },
        "model": {"num_inputs": 1, "num_hidden": 4},
        "train": {
            "alpha": 0.1,
            "termination_mode": "epochs",
            "max_epochs": 200,
            "histories": ["errors"],
            "run_dir": "runs/sine-online",
            "enable_plots": False,
        },
    },
}

_TRAINER_KEYS = {f.name for f in fields(TrainerConfig)}


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`run_pipeline`."""

    epochs: int
    final_training_error: float
    avg_training_error: float
    validation_error: float | None
    metrics_path: str
    manifest_path: str
    summary_path: str
    weights_path: str
    plot_path: str = ""


def read_config_file(path: str | Path) -> Mapping[str, object]:
    """Load a JSON or YAML run configuration."""

    path = Path(path)
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        import yaml

        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise InvalidArgument(f"Unsupported config file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise InvalidArgument(f"Config {path.name} must decode to a mapping")
    return data


def merge_config(base: Mapping[str, object], override: Mapping[str, object]) -> Dict[str, object]:
    """Recursively merge ``override`` into a copy of ``base``."""

    merged = deepcopy(dict(base))
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_config(merged[key], value)  # type: ignore[arg-type]
        else:
            merged[key] = deepcopy(value)
    return merged


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Dict[str, object]:
    try:
        return deepcopy(dict(_PRESETS[name]))
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def load_dataset(data_cfg: Mapping[str, object]) -> Tuple[Array, int | None]:
    """Return a table and the input column count implied by the dataset, if any."""

    name = str(data_cfg.get("name", ""))
    options = dict(data_cfg.get("options", {}) or {})  # type: ignore[arg-type]
    if name == "xor":
        return make_xor_table(), 2
    if name == "sine":
        try:
            return make_sine_table(**options), 1
        except TypeError as exc:
            raise InvalidArgument(f"Invalid sine dataset options: {options!r}") from exc
    if name == "table":
        if "path" not in options:
            raise InvalidArgument("The table dataset requires a `path` option")
        return load_table(options["path"], columns=options.get("columns")), None
    raise InvalidArgument(f"Unknown dataset: {name!r}")


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    data_cfg = dict(config.get("data", {}))  # type: ignore[arg-type]
    model_cfg = dict(config.get("model", {}))  # type: ignore[arg-type]
    train_cfg = dict(config.get("train", {}))  # type: ignore[arg-type]

    table, implied_inputs = load_dataset(data_cfg)
    if "num_inputs" in model_cfg:
        num_inputs = int(model_cfg["num_inputs"])
    elif implied_inputs is not None:
        num_inputs = implied_inputs
    else:
        raise InvalidArgument("model.num_inputs is required for table datasets")
    num_hidden = model_cfg.get("num_hidden")
    num_hidden = int(num_hidden) if num_hidden is not None else None
    initial_weights = None
    if model_cfg.get("initial_weights"):
        initial_weights, _ = load_weights(str(model_cfg["initial_weights"]))

    validation_cfg = data_cfg.get("validation")
    validation_table: Array | None = None
    if validation_cfg == "train":
        validation_table = table
    elif isinstance(validation_cfg, Mapping):
        validation_table, _ = load_dataset(validation_cfg)

    enable_plots = bool(train_cfg.get("enable_plots", False))
    trainer_config = TrainerConfig.from_mapping(
        {k: v for k, v in train_cfg.items() if k in _TRAINER_KEYS}
    )
    if enable_plots:
        trainer_config.histories |= History.ERRORS

    run_dir = _resolve_run_dir(train_cfg, str(data_cfg.get("name", "data")))
    run_dir.mkdir(parents=True, exist_ok=True)

    jsonl = JsonlSink(run_dir / "metrics.jsonl", split="train")
    csv_sink = CsvSink(run_dir / "metrics.csv", split="train")
    trainer = Trainer(trainer_config, callbacks=[jsonl, csv_sink])

    _print_startup_summary(
        dataset_name=str(data_cfg.get("name", "data")),
        samples=table.shape[0],
        num_inputs=num_inputs,
        num_hidden=num_hidden,
        config=trainer_config,
    )

    run = trainer.train(table, num_inputs, num_hidden, initial_weights)
    validation_error = None
    if validation_table is not None:
        validation_error = trainer.validate(validation_table)

    weights_path = save_weights(run_dir / "weights.npz", run.weights, run.topology)
    summary_path = write_summary(run, run_dir / "summary.json", trainer.validation)
    resolved = merge_config(config, {"train": trainer_config.to_dict()})
    (run_dir / "config.json").write_text(json.dumps(resolved, indent=2, default=str))
    manifest_path = write_manifest(
        run_dir / "manifest.json",
        config=resolved,
        results={
            "epochs": run.epochs_run,
            "final_training_error": run.final_training_error,
            "avg_training_error": run.avg_training_error,
            "validation_error": validation_error,
        },
    )
    plot_path = ""
    if enable_plots:
        plot_path = plot_error_curves(run, trainer.validation, run_dir / "errors.png")

    return RunResult(
        epochs=run.epochs_run,
        final_training_error=run.final_training_error,
        avg_training_error=run.avg_training_error,
        validation_error=validation_error,
        metrics_path=str(jsonl.path),
        manifest_path=manifest_path,
        summary_path=summary_path,
        weights_path=weights_path,
        plot_path=plot_path,
    )


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if train_cfg.get("run_dir"):
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


def _print_startup_summary(
    *,
    dataset_name: str,
    samples: int,
    num_inputs: int,
    num_hidden: int | None,
    config: TrainerConfig,
) -> None:
    print("=== onlineprop run ===")
    print(f"Dataset       : {dataset_name} ({samples} samples)")
    print(f"Inputs        : {num_inputs}")
    print(f"Hidden        : {num_hidden if num_hidden is not None else 'auto'}")
    print(f"Alpha         : {config.alpha}")
    print(f"Termination   : {config.termination_mode.name.lower()}")
    print(f"Max epochs    : {config.max_epochs}")
    print(f"Max error     : {config.max_error}")
    print(f"Histories     : {', '.join(config.histories.names()) or 'none'}")
    print("======================")


__all__ = [
    "RunResult",
    "load_dataset",
    "load_preset",
    "merge_config",
    "presets",
    "read_config_file",
    "run_pipeline",
]
