"""Online backpropagation training loop and validation entry point."""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import List, Mapping, Sequence

import numpy as np

from ..core.backprop import compute_gradient
from ..core.forward import compute_outputs
from ..core.types import Array, Topology
from ..core.weights import resolve_initial_weights
from ..data.tables import split_table
from ..exceptions import (
    BatchModeNotImplemented,
    InvalidArgument,
    PrecursorRequired,
    SchemaMismatch,
)
from .config import TrainerConfig, TrainingMode
from .history import EpochRecorder, History
from .losses import compute_error, mean_error
from .optimizer import SGDOptimizer
from .validation import ValidationRun, run_validation

logger = logging.getLogger(__name__)


class TrainerState(enum.Enum):
    IDLE = "idle"
    TRAINING = "training"
    TRAINED = "trained"


@dataclass(frozen=True)
class TrainingRun:
    """Outcome of one call to :meth:`Trainer.train`.

    History arrays are indexed ``[epoch, sample, ...]`` and are ``None`` when
    the corresponding :class:`History` flag was not enabled.
    """

    topology: Topology
    weights: Array
    num_samples: int
    epochs_run: int
    final_training_error: float
    avg_training_error: float
    histories: History = History.NONE
    training_outputs: Array | None = None
    training_errors: Array | None = None
    weight_history: Array | None = None
    derivative_history: Array | None = None


def _as_table(data: object, caller: str) -> Array:
    if data is None:
        raise InvalidArgument(f"{caller}: Cannot run without data.")
    try:
        table = np.array(data, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"{caller}: Data must be a numeric table.") from exc
    if table.ndim != 2:
        raise InvalidArgument(
            f"{caller}: Data must be two dimensional (samples x columns), "
            f"got {table.ndim} dimension(s)."
        )
    if table.size == 0:
        raise InvalidArgument(f"{caller}: There must be at least one sample.")
    return table


class Trainer:
    """Train a single-hidden-layer network one sample at a time.

    A trainer moves from ``IDLE`` to ``TRAINING`` while :meth:`train` runs and
    ends in ``TRAINED``. Every successful :meth:`train` call starts from
    scratch and discards earlier training and validation results.
    """

    def __init__(
        self,
        config: TrainerConfig | None = None,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.config = config or TrainerConfig()
        self.callbacks = list(callbacks or [])
        self._state = TrainerState.IDLE
        self._run: TrainingRun | None = None
        self._validation: ValidationRun | None = None

    @property
    def state(self) -> TrainerState:
        return self._state

    @property
    def run(self) -> TrainingRun | None:
        return self._run

    @property
    def validation(self) -> ValidationRun | None:
        return self._validation

    def train(
        self,
        data: object,
        num_inputs: int,
        num_hidden: int | None = None,
        initial_weights: Array | None = None,
    ) -> TrainingRun:
        """Train on ``data`` whose first ``num_inputs`` columns are inputs.

        The remaining columns are targets. ``num_hidden`` defaults to the mean
        of the input and output counts, rounded up. ``initial_weights`` must
        have the packed shape for the resulting topology.
        """

        if self._state is TrainerState.TRAINING:
            raise InvalidArgument("train(): Training is already in progress.")
        table = _as_table(data, "train()")
        if num_inputs is None:
            raise InvalidArgument("train(): There must be at least one input.")
        topology = Topology.from_columns(table.shape[1], int(num_inputs), num_hidden)
        weights = resolve_initial_weights(topology, initial_weights)

        self._run = None
        self._validation = None
        self._state = TrainerState.IDLE

        if self.config.training_mode is TrainingMode.BATCH:
            raise BatchModeNotImplemented("train(): Batch mode is not implemented yet.")
        if self.config.training_mode is not TrainingMode.ONLINE:
            raise InvalidArgument(
                f"train(): Unknown training mode {self.config.training_mode!r}"
            )

        logger.info(
            "Training %d-%d-%d network on %d sample(s): alpha=%g, termination=%s",
            topology.num_inputs,
            topology.num_hidden,
            topology.num_outputs,
            table.shape[0],
            self.config.alpha,
            self.config.termination_mode.name.lower(),
        )
        self._state = TrainerState.TRAINING
        try:
            run = self._train_online(table, topology, weights)
        except BaseException:
            self._state = TrainerState.IDLE
            raise
        self._run = run
        self._state = TrainerState.TRAINED
        logger.info(
            "Training finished after %d epoch(s): final error=%.6g, last epoch mean=%.6g",
            run.epochs_run,
            run.final_training_error,
            run.avg_training_error,
        )
        return run

    def validate(self, data: object) -> float:
        """Return the mean error of the trained network over ``data``.

        The full result, including the last sample's error and any recorded
        histories, is kept on :attr:`validation`.
        """

        if self._state is not TrainerState.TRAINED or self._run is None:
            raise PrecursorRequired("validate(): Cannot validate without training first.")
        table = _as_table(data, "validate()")
        topology = self._run.topology
        if table.shape[1] != topology.num_columns:
            raise SchemaMismatch(
                "validate(): Validation data must have the same number of "
                f"inputs/outputs as the training data ({topology.num_columns} "
                f"columns), got {table.shape[1]}."
            )
        if self.config.training_mode is TrainingMode.BATCH:
            raise BatchModeNotImplemented("validate(): Batch mode is not implemented yet.")

        result = run_validation(
            self._run.weights,
            topology,
            table,
            record_outputs=self.config.records(History.VALIDATION_OUTPUTS),
            record_errors=self.config.records(History.VALIDATION_ERRORS),
        )
        self._validation = result
        logger.info(
            "Validated on %d sample(s): mean error=%.6g, final error=%.6g",
            result.num_samples,
            result.mean_error,
            result.final_validation_error,
        )
        return result.mean_error

    # ------------------------------------------------------------------
    # Internal helpers

    def _train_online(self, table: Array, topology: Topology, weights: Array) -> TrainingRun:
        config = self.config
        policy = config.termination
        optimizer = SGDOptimizer(alpha=config.alpha, topology=topology)
        inputs, targets = split_table(table, topology.num_inputs)
        num_samples = table.shape[0]

        outputs_rec = EpochRecorder(
            config.records(History.TRAINING_OUTPUTS), num_samples, (topology.num_outputs,)
        )
        errors_rec = EpochRecorder(config.records(History.TRAINING_ERRORS), num_samples)
        weights_rec = EpochRecorder(
            config.records(History.WEIGHTS), num_samples, topology.weight_shape
        )
        derivs_rec = EpochRecorder(
            config.records(History.DERIVATIVES), num_samples, topology.weight_shape
        )

        epoch = 1
        last_error = math.inf
        epoch_errors: List[float] = []
        gradient: Array | None = None
        while not policy.is_complete(epoch, last_error):
            epoch_errors = []
            for idx in range(num_samples):
                # The first sample uses the initial weights as given. Afterwards the
                # previous sample's gradient is applied before the forward pass, so
                # the returned weights are the ones used most recently.
                if not (epoch == 1 and idx == 0):
                    weights = optimizer.step(weights, gradient)
                y, z = compute_outputs(inputs[idx], weights, topology.num_outputs)
                last_error = compute_error(y, targets[idx])
                gradient = compute_gradient(y, inputs[idx], targets[idx], weights, z)
                epoch_errors.append(last_error)

                outputs_rec.record(y)
                errors_rec.record(last_error)
                weights_rec.record(weights)
                derivs_rec.record(gradient)

            for recorder in (outputs_rec, errors_rec, weights_rec, derivs_rec):
                recorder.end_epoch()
            metrics = {"loss": mean_error(epoch_errors), "last": last_error}
            logger.debug(
                "epoch %d: mean error=%.6g last=%.6g", epoch, metrics["loss"], last_error
            )
            self._emit_epoch(epoch, metrics)
            epoch += 1

        weights.flags.writeable = False
        return TrainingRun(
            topology=topology,
            weights=weights,
            num_samples=num_samples,
            epochs_run=epoch - 1,
            final_training_error=float(last_error),
            avg_training_error=mean_error(epoch_errors),
            histories=config.histories,
            training_outputs=outputs_rec.to_array(),
            training_errors=errors_rec.to_array(),
            weight_history=weights_rec.to_array(),
            derivative_history=derivs_rec.to_array(),
        )

    def _emit_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["Trainer", "TrainerState", "TrainingRun"]
