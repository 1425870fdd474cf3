"""Headless-safe error curve plots."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from ..exceptions import InvalidArgument
from ..training.trainer import TrainingRun
from ..training.validation import ValidationRun
from .summary import epoch_error_summary


def plot_error_curves(
    run: TrainingRun,
    validation: ValidationRun | None,
    path: str | Path,
) -> str:
    """Save a two-panel figure of training and validation errors.

    The top panel shows the mean training error per epoch with standard
    deviation error bars. The bottom panel shows each validation sample's
    error with the mean drawn as a flat line. It is left empty when no
    validation errors were recorded.
    """

    import matplotlib

    matplotlib.use("Agg", force=True)
    import matplotlib.pyplot as plt  # imported lazily for headless safety

    if run.training_errors is None:
        raise InvalidArgument("Plotting requires the training errors history")
    stats = epoch_error_summary(run)
    epochs = np.arange(1, stats["mean"].shape[0] + 1)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig, (ax_train, ax_val) = plt.subplots(2, 1, figsize=(8, 6))
    ax_train.errorbar(epochs, stats["mean"], yerr=stats["std"], fmt=":", color="tab:blue")
    ax_train.plot(epochs, stats["mean"], color="r")
    ax_train.set_xlabel("Epoch")
    ax_train.set_ylabel("Training error")

    if validation is not None and validation.errors is not None:
        samples = np.arange(1, validation.errors.shape[0] + 1)
        ax_val.plot(samples, validation.errors, color="tab:blue")
        ax_val.plot(samples, np.full(samples.shape, validation.mean_error), color="r")
    ax_val.set_xlabel("Validation sample")
    ax_val.set_ylabel("Validation error")

    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)
    return str(path)


__all__ = ["plot_error_curves"]
