"""Deterministic run summaries built from recorded error histories."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Mapping

import numpy as np

from ..exceptions import InvalidArgument
from ..training.trainer import TrainingRun
from ..training.validation import ValidationRun


def epoch_error_summary(run: TrainingRun) -> Mapping[str, np.ndarray]:
    """Per-epoch mean and sample standard deviation of the training errors.

    Requires the run to have recorded training errors.
    """

    if run.training_errors is None:
        raise InvalidArgument("Training errors were not recorded for this run")
    errors = np.asarray(run.training_errors, dtype=np.float64)
    if errors.size == 0:
        empty = np.empty((0,), dtype=np.float64)
        return {"mean": empty, "std": empty}
    ddof = 1 if errors.shape[1] > 1 else 0
    return {"mean": errors.mean(axis=1), "std": errors.std(axis=1, ddof=ddof)}


def _finite(value: float) -> float | None:
    return float(value) if math.isfinite(value) else None


def build_summary(
    run: TrainingRun, validation: ValidationRun | None = None
) -> Mapping[str, object]:
    topology = run.topology
    summary: dict[str, object] = {
        "version": 1,
        "topology": {
            "num_inputs": topology.num_inputs,
            "num_hidden": topology.num_hidden,
            "num_outputs": topology.num_outputs,
        },
        "samples": run.num_samples,
        "epochs": run.epochs_run,
        "final_training_error": _finite(run.final_training_error),
        "avg_training_error": _finite(run.avg_training_error),
    }
    if run.training_errors is not None and run.epochs_run:
        per_epoch = epoch_error_summary(run)["mean"]
        summary["training_error_curve"] = {
            "min": float(np.min(per_epoch)),
            "max": float(np.max(per_epoch)),
            "first": float(per_epoch[0]),
            "last": float(per_epoch[-1]),
        }
    if validation is not None:
        summary["validation"] = {
            "samples": validation.num_samples,
            "mean_error": _finite(validation.mean_error),
            "final_validation_error": _finite(validation.final_validation_error),
        }
    return summary


def write_summary(
    run: TrainingRun,
    out_summary_json: str | Path,
    validation: ValidationRun | None = None,
) -> str:
    """Write a deterministic summary for ``run`` and an optional validation."""

    out_path = Path(out_summary_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    summary = build_summary(run, validation)
    out_path.write_text(json.dumps(summary, sort_keys=True, indent=2))
    return str(out_path)


__all__ = ["epoch_error_summary", "build_summary", "write_summary"]
