"""onlineprop public API."""

from .core import activations, types  # noqa: F401
from .core.backprop import compute_gradient
from .core.forward import compute_outputs
from .core.types import Topology
from .core.weights import make_initial_weights
from .exceptions import (
    BatchModeNotImplemented,
    InvalidArgument,
    OnlinePropError,
    PrecursorRequired,
    SchemaMismatch,
    ShapeMismatch,
)
from .training import (
    History,
    TerminationMode,
    TerminationPolicy,
    Trainer,
    TrainerConfig,
    TrainingMode,
    TrainingRun,
    ValidationRun,
    compute_error,
    load_preset,
    presets,
    run_pipeline,
    update_weights,
)
from .data import load_table

__all__ = [
    "BatchModeNotImplemented",
    "History",
    "InvalidArgument",
    "OnlinePropError",
    "PrecursorRequired",
    "SchemaMismatch",
    "ShapeMismatch",
    "TerminationMode",
    "TerminationPolicy",
    "Topology",
    "Trainer",
    "TrainerConfig",
    "TrainingMode",
    "TrainingRun",
    "ValidationRun",
    "activations",
    "compute_error",
    "compute_gradient",
    "compute_outputs",
    "load_preset",
    "load_table",
    "make_initial_weights",
    "presets",
    "run_pipeline",
    "types",
    "update_weights",
]
