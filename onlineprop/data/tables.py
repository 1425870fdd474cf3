"""Tabular dataset loading for training and validation runs."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence, Tuple

import numpy as np
import pandas as pd

from ..core.types import Array
from ..exceptions import InvalidArgument


def load_table(path: str | Path, columns: Sequence[str] | None = None) -> Array:
    """Load a CSV or ``.npy`` file as a 2-D float table.

    CSV files are read with a header row; ``columns`` selects and orders the
    columns to keep, input columns first.
    """

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".npy":
        table = np.load(path)
        if columns is not None:
            raise InvalidArgument("Column selection is only supported for CSV files")
    elif suffix in {".csv", ".txt"}:
        df = pd.read_csv(path)
        if columns is not None:
            missing = [col for col in columns if col not in df.columns]
            if missing:
                raise InvalidArgument(f"Column(s) {missing!r} not found in {path.name}")
            df = df[list(columns)]
        table = df.to_numpy(dtype=np.float64)
    else:
        raise InvalidArgument(f"Unsupported table format: {path.suffix}")

    table = np.asarray(table, dtype=np.float64)
    if table.ndim == 1:
        table = table.reshape(-1, 1)
    if table.ndim != 2:
        raise InvalidArgument(f"{path.name} must hold a 2-D table, got {table.ndim} dimensions")
    return table


def split_table(table: Array, num_inputs: int) -> Tuple[Array, Array]:
    """Return ``(inputs, targets)`` views of ``table``."""

    return table[:, :num_inputs], table[:, num_inputs:]


def make_xor_table() -> Array:
    """The four-row exclusive-or truth table, two inputs and one target."""

    return np.array(
        [[0.0, 0.0, 0.0], [0.0, 1.0, 1.0], [1.0, 0.0, 1.0], [1.0, 1.0, 0.0]],
        dtype=np.float64,
    )


def make_sine_table(n_points: int = 32, freq: float = 1.0) -> Array:
    """Evenly spaced ``x`` in ``[-1, 1]`` with target ``sin(freq * pi * x)``."""

    if n_points < 1:
        raise InvalidArgument("n_points must be at least one")
    x = np.linspace(-1.0, 1.0, n_points, dtype=np.float64)
    y = np.sin(freq * np.pi * x)
    return np.column_stack([x, y])


__all__ = ["load_table", "split_table", "make_xor_table", "make_sine_table"]
