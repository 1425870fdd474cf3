"""Per-sample error metric and its summaries."""

from __future__ import annotations

from typing import Iterable

import numpy as np

from ..core.types import Array


def compute_error(y: Array, targets: Array) -> float:
    """Half the sum of squared differences over all outputs of one sample."""

    diff = np.asarray(y, dtype=np.float64).reshape(-1) - np.asarray(
        targets, dtype=np.float64
    ).reshape(-1)
    return float(np.sum(0.5 * np.square(diff)))


def mean_error(errors: Iterable[float]) -> float:
    """Mean of per-sample errors, ``nan`` when there are none."""

    values = np.fromiter(errors, dtype=np.float64)
    if values.size == 0:
        return float("nan")
    return float(np.mean(values))


__all__ = ["compute_error", "mean_error"]
