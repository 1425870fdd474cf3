"""Core typing contracts for onlineprop."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ..exceptions import InvalidArgument

Array = np.ndarray

NUM_LAYERS = 4

# Third-axis indices of the packed weight tensor.
INPUT_HIDDEN = 0
HIDDEN_BIAS = 1
HIDDEN_OUTPUT = 2
OUTPUT_BIAS = 3


@dataclass(frozen=True)
class Topology:
    """Neuron counts of a single-hidden-layer network."""

    num_inputs: int
    num_hidden: int
    num_outputs: int

    def __post_init__(self) -> None:
        if self.num_inputs < 1:
            raise InvalidArgument("There must be at least one input.")
        if self.num_outputs < 1:
            raise InvalidArgument("There must be at least one output.")
        if self.num_hidden < 1:
            raise InvalidArgument("There must be at least one hidden neuron.")

    @classmethod
    def from_columns(
        cls, num_columns: int, num_inputs: int, num_hidden: int | None = None
    ) -> "Topology":
        """Derive the topology of a table with ``num_inputs`` leading input columns.

        When ``num_hidden`` is omitted it defaults to the mean of the input and
        output counts, rounded up.
        """

        if num_inputs < 1:
            raise InvalidArgument("There must be at least one input.")
        num_outputs = num_columns - num_inputs
        if num_outputs < 1:
            raise InvalidArgument("There must be at least one output.")
        if num_hidden is None:
            num_hidden = math.ceil((num_inputs + num_outputs) / 2)
        return cls(int(num_inputs), int(num_hidden), int(num_outputs))

    @property
    def num_columns(self) -> int:
        return self.num_inputs + self.num_outputs

    @property
    def weight_shape(self) -> tuple[int, int, int]:
        return (self.num_hidden, max(self.num_inputs, self.num_outputs), NUM_LAYERS)

    @property
    def parameter_count(self) -> int:
        return (
            self.num_hidden * self.num_inputs
            + self.num_hidden
            + self.num_hidden * self.num_outputs
            + self.num_outputs
        )


__all__ = [
    "Array",
    "Topology",
    "NUM_LAYERS",
    "INPUT_HIDDEN",
    "HIDDEN_BIAS",
    "HIDDEN_OUTPUT",
    "OUTPUT_BIAS",
]
