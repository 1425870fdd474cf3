from __future__ import annotations

from typing import Mapping

import numpy as np

from onlineprop.data.tables import make_sine_table, make_xor_table
from onlineprop.training.config import TrainerConfig
from onlineprop.training.history import History
from onlineprop.training.trainer import Trainer
from onlineprop.reporting.summary import epoch_error_summary


class _Capture:
    def __init__(self) -> None:
        self.history: list[tuple[int, Mapping[str, float]]] = []

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self.history.append((epoch, {k: float(v) for k, v in metrics.items()}))


def test_sine_regression_error_decreases() -> None:
    data = make_sine_table(24)
    capture = _Capture()
    config = TrainerConfig(
        termination_mode="epochs", max_epochs=150, alpha=0.1, histories=History.ALL
    )
    trainer = Trainer(config, callbacks=[capture])
    run = trainer.train(data, num_inputs=1, num_hidden=4)

    assert len(capture.history) == 150
    first = capture.history[0][1]["loss"]
    last = capture.history[-1][1]["loss"]
    assert last < first

    stats = epoch_error_summary(run)
    assert stats["mean"][-1] < stats["mean"][0]

    held_out = make_sine_table(11)
    assert trainer.validate(held_out) < first
    assert trainer.validation.errors.shape == (11,)


def test_training_is_deterministic() -> None:
    data = make_xor_table()
    config = TrainerConfig(termination_mode="epochs", max_epochs=50, alpha=0.5)
    first = Trainer(config).train(data, 2)
    second = Trainer(config).train(data, 2)
    assert np.array_equal(first.weights, second.weights)
    assert np.array_equal(first.training_errors, second.training_errors)


def test_independent_trainers_share_no_state() -> None:
    data = make_xor_table()
    a = Trainer(TrainerConfig(termination_mode="epochs", max_epochs=5, alpha=0.5))
    b = Trainer(TrainerConfig(termination_mode="epochs", max_epochs=5, alpha=0.0))
    run_a = a.train(data, 2)
    run_b = b.train(data, 2)
    assert not np.array_equal(run_a.weights, run_b.weights)
    assert a.run is run_a and b.run is run_b
