"""Trainer configuration: training mode, termination policy and histories."""

from __future__ import annotations

import enum
import math
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Mapping, Type, TypeVar

from ..exceptions import InvalidArgument
from .history import History

_E = TypeVar("_E", bound=enum.Enum)


class TrainingMode(enum.Enum):
    ONLINE = 1
    BATCH = 2


class TerminationMode(enum.Enum):
    NONE = 0
    EPOCHS = 1
    ERROR = 2
    EITHER = 3
    BOTH = 4


@dataclass(frozen=True)
class TerminationPolicy:
    """Decide whether training is complete before starting ``epoch``."""

    mode: TerminationMode = TerminationMode.EITHER
    max_epochs: int = 1000
    max_error: float = 0.001

    def is_complete(self, epoch: int, current_error: float) -> bool:
        epochs_done = epoch > self.max_epochs
        error_met = current_error < self.max_error
        if self.mode is TerminationMode.NONE:
            return False
        if self.mode is TerminationMode.EPOCHS:
            return epochs_done
        if self.mode is TerminationMode.ERROR:
            return error_met
        if self.mode is TerminationMode.EITHER:
            return epochs_done or error_met
        if self.mode is TerminationMode.BOTH:
            return epochs_done and error_met
        raise InvalidArgument(f"Unknown termination mode: {self.mode!r}")


def _coerce_enum(enum_cls: Type[_E], value: object, option: str) -> _E:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls[value.strip().upper()]
        except KeyError:
            pass
    else:
        try:
            return enum_cls(value)
        except ValueError:
            pass
    choices = ", ".join(member.name.lower() for member in enum_cls)
    raise InvalidArgument(f"{option} must be one of {{{choices}}}, got {value!r}")


@dataclass
class TrainerConfig:
    """Settings shared by every training and validation call of a trainer."""

    training_mode: TrainingMode = TrainingMode.ONLINE
    termination_mode: TerminationMode = TerminationMode.EITHER
    max_epochs: int = 1000
    max_error: float = 0.001
    alpha: float = 0.1
    histories: History = field(default=History.ERRORS)

    def __post_init__(self) -> None:
        self.training_mode = _coerce_enum(TrainingMode, self.training_mode, "training_mode")
        self.termination_mode = _coerce_enum(
            TerminationMode, self.termination_mode, "termination_mode"
        )
        self.histories = History.parse(self.histories)
        if self.max_epochs < 0:
            raise InvalidArgument("max_epochs must be non-negative")
        if math.isnan(self.alpha):
            raise InvalidArgument("alpha must be a number")
        if math.isnan(self.max_error):
            raise InvalidArgument("max_error must be a number")

    @property
    def termination(self) -> TerminationPolicy:
        return TerminationPolicy(
            mode=self.termination_mode,
            max_epochs=int(self.max_epochs),
            max_error=float(self.max_error),
        )

    def records(self, flag: History) -> bool:
        return bool(self.histories & flag)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> "TrainerConfig":
        """Build a config from plain JSON/YAML values, rejecting unknown keys."""

        options = dict(options or {})
        known = {f.name for f in fields(cls)}
        unknown = set(options) - known
        if unknown:
            raise InvalidArgument(
                f"Unknown trainer option(s): {', '.join(sorted(unknown))}"
            )
        if "max_epochs" in options:
            options["max_epochs"] = int(options["max_epochs"])
        if "max_error" in options:
            options["max_error"] = float(options["max_error"])
        if "alpha" in options:
            options["alpha"] = float(options["alpha"])
        return cls(**options)

    def to_dict(self) -> Dict[str, object]:
        payload = asdict(self)
        payload["training_mode"] = self.training_mode.name.lower()
        payload["termination_mode"] = self.termination_mode.name.lower()
        payload["histories"] = self.histories.names()
        return payload


__all__ = ["TrainingMode", "TerminationMode", "TerminationPolicy", "TrainerConfig"]
