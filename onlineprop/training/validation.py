"""Validation pass over held-out data with frozen weights."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ..core.forward import compute_outputs
from ..core.types import Array, Topology
from ..data.tables import split_table
from .losses import compute_error, mean_error


@dataclass(frozen=True)
class ValidationRun:
    """Read-only result of validating one trained weight tensor."""

    num_samples: int
    mean_error: float
    final_validation_error: float
    outputs: Array | None = None
    errors: Array | None = None


def run_validation(
    weights: Array,
    topology: Topology,
    table: Array,
    *,
    record_outputs: bool = False,
    record_errors: bool = False,
) -> ValidationRun:
    """Run the forward pass and error metric for every row of ``table``.

    ``table`` must already be checked to have ``topology.num_columns`` columns.
    The returned mean covers every sample whether or not per-sample errors are
    recorded.
    """

    inputs, targets = split_table(table, topology.num_inputs)
    num_samples = table.shape[0]

    outputs = np.zeros((num_samples, topology.num_outputs)) if record_outputs else None
    errors: list[float] = []
    last_error = math.inf
    for idx in range(num_samples):
        y, _ = compute_outputs(inputs[idx], weights, topology.num_outputs)
        last_error = compute_error(y, targets[idx])
        errors.append(last_error)
        if outputs is not None:
            outputs[idx] = y

    recorded_errors = np.asarray(errors, dtype=np.float64) if record_errors else None
    for history in (outputs, recorded_errors):
        if history is not None:
            history.flags.writeable = False
    return ValidationRun(
        num_samples=num_samples,
        mean_error=mean_error(errors),
        final_validation_error=float(last_error),
        outputs=outputs,
        errors=recorded_errors,
    )


__all__ = ["ValidationRun", "run_validation"]
