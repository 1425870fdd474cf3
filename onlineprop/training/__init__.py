"""Training loop, validation and run pipelines."""

from .config import TerminationMode, TerminationPolicy, TrainerConfig, TrainingMode
from .history import History
from .losses import compute_error
from .optimizer import SGDOptimizer, update_weights
from .trainer import Trainer, TrainerState, TrainingRun
from .validation import ValidationRun, run_validation
from .pipelines import RunResult, load_preset, presets, run_pipeline

__all__ = [
    "History",
    "RunResult",
    "SGDOptimizer",
    "TerminationMode",
    "TerminationPolicy",
    "Trainer",
    "TrainerConfig",
    "TrainerState",
    "TrainingMode",
    "TrainingRun",
    "ValidationRun",
    "compute_error",
    "load_preset",
    "presets",
    "run_pipeline",
    "run_validation",
    "update_weights",
]
