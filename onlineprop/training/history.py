"""Optional training and validation histories.

Histories help analyse a network but may cost a lot of memory for large
problems, so each one is opted into through a bit flag.
"""

from __future__ import annotations

import enum
from typing import Iterable, List, Tuple

import numpy as np

from ..core.types import Array
from ..exceptions import InvalidArgument


class History(enum.IntFlag):
    NONE = 0
    TRAINING_OUTPUTS = 1
    TRAINING_ERRORS = 2
    VALIDATION_OUTPUTS = 4
    VALIDATION_ERRORS = 8
    WEIGHTS = 16
    DERIVATIVES = 32

    # Combinations
    TRAINING = TRAINING_OUTPUTS | TRAINING_ERRORS
    VALIDATION = VALIDATION_OUTPUTS | VALIDATION_ERRORS
    OUTPUTS = TRAINING_OUTPUTS | VALIDATION_OUTPUTS
    ERRORS = TRAINING_ERRORS | VALIDATION_ERRORS
    ALL = TRAINING | VALIDATION | WEIGHTS | DERIVATIVES

    @classmethod
    def parse(cls, value: "History | int | str | Iterable[str] | None") -> "History":
        """Build flags from an int, a ``|``-joined string or a list of names."""

        if value is None:
            return cls.NONE
        if isinstance(value, int):
            if value < 0 or value & ~int(cls.ALL):
                raise InvalidArgument(f"Unknown history bits in {value!r}")
            return cls(value)
        names = value.split("|") if isinstance(value, str) else list(value)
        flags = cls.NONE
        for name in names:
            key = str(name).strip().upper()
            if not key:
                continue
            try:
                flags |= cls[key]
            except KeyError as exc:
                available = ", ".join(name.lower() for name in cls.__members__)
                raise InvalidArgument(
                    f"Unknown history {name!r}. Available: {available}"
                ) from exc
        return flags

    def names(self) -> List[str]:
        """Lower-case names of the individual flags that are set."""

        return [flag.name.lower() for flag in _SINGLE_FLAGS if flag & self]


_SINGLE_FLAGS = (
    History.TRAINING_OUTPUTS,
    History.TRAINING_ERRORS,
    History.VALIDATION_OUTPUTS,
    History.VALIDATION_ERRORS,
    History.WEIGHTS,
    History.DERIVATIVES,
)


class EpochRecorder:
    """Accumulate per-sample rows for one epoch and stack them when requested."""

    def __init__(self, enabled: bool, num_samples: int = 0, shape: Tuple[int, ...] = ()) -> None:
        self.enabled = enabled
        self.num_samples = num_samples
        self.shape = tuple(shape)
        self._epochs: List[Array] = []
        self._current: List[Array] = []

    def record(self, value: Array) -> None:
        if self.enabled:
            self._current.append(np.array(value, dtype=np.float64, copy=True))

    def end_epoch(self) -> None:
        if self.enabled:
            self._epochs.append(np.stack(self._current))
            self._current = []

    def to_array(self) -> Array | None:
        """Return read-only ``(epochs, samples, ...)`` data, or ``None`` when disabled."""

        if not self.enabled:
            return None
        if self._epochs:
            stacked = np.stack(self._epochs)
        else:
            stacked = np.empty((0, self.num_samples) + self.shape, dtype=np.float64)
        stacked.flags.writeable = False
        return stacked


__all__ = ["History", "EpochRecorder"]
