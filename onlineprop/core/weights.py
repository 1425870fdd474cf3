"""Packed weight tensor for a single-hidden-layer network.

All trainable parameters live in one ``(H, M, 4)`` array where ``H`` is the
number of hidden neurons and ``M = max(num_inputs, num_outputs)``. Hidden
neurons always sit on the first axis, input or output neurons on the second,
and the third axis selects the parameter group:

0. links between input and hidden neurons, ``[h, i, 0]``
1. hidden neuron biases, ``[h, 0, 1]``
2. links between hidden and output neurons, ``[h, k, 2]``
3. output neuron biases, ``[0, k, 3]``

Cells outside these ranges are padding and are never read.
"""

from __future__ import annotations

import numpy as np

from ..exceptions import InvalidArgument, ShapeMismatch
from .types import (
    HIDDEN_BIAS,
    HIDDEN_OUTPUT,
    INPUT_HIDDEN,
    OUTPUT_BIAS,
    Array,
    Topology,
)


def _alternating(rows: int, cols: int) -> Array:
    # (-1)^(r + c) is unchanged by shifting both indices to 1-based.
    r = np.arange(rows).reshape(-1, 1)
    c = np.arange(cols).reshape(1, -1)
    return np.where((r + c) % 2 == 0, 1.0, -1.0)


def make_initial_weights(num_inputs: int, num_hidden: int, num_outputs: int) -> Array:
    """Return the deterministic starting weights for the given topology.

    Link weights alternate in sign, ``(-1)^(i + h)``, and every bias is one.
    """

    topology = Topology(num_inputs, num_hidden, num_outputs)
    weights = np.zeros(topology.weight_shape, dtype=np.float64)
    weights[:, :num_inputs, INPUT_HIDDEN] = _alternating(num_hidden, num_inputs)
    weights[:, 0, HIDDEN_BIAS] = 1.0
    weights[:, :num_outputs, HIDDEN_OUTPUT] = _alternating(num_hidden, num_outputs)
    weights[0, :num_outputs, OUTPUT_BIAS] = 1.0
    return weights


def layer_mask(topology: Topology) -> Array:
    """Boolean mask selecting the meaningful cells of a weight tensor."""

    mask = np.zeros(topology.weight_shape, dtype=bool)
    mask[:, : topology.num_inputs, INPUT_HIDDEN] = True
    mask[:, 0, HIDDEN_BIAS] = True
    mask[:, : topology.num_outputs, HIDDEN_OUTPUT] = True
    mask[0, : topology.num_outputs, OUTPUT_BIAS] = True
    return mask


def resolve_initial_weights(topology: Topology, initial: Array | None = None) -> Array:
    """Return a private copy of ``initial`` or freshly generated weights.

    Raises :class:`InvalidArgument` when ``initial`` is not a numeric 3-D
    array and :class:`ShapeMismatch` when its shape does not fit ``topology``.
    """

    if initial is None:
        return make_initial_weights(
            topology.num_inputs, topology.num_hidden, topology.num_outputs
        )
    try:
        weights = np.array(initial, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument("Initial weights must be a numeric array.") from exc
    if weights.ndim != 3:
        raise InvalidArgument(
            f"Initial weights must be three dimensional, got {weights.ndim} dimension(s)."
        )
    if weights.shape != topology.weight_shape:
        raise ShapeMismatch(
            f"Size of weight matrix should be {topology.weight_shape}, got {weights.shape}."
        )
    return weights


__all__ = [
    "make_initial_weights",
    "layer_mask",
    "resolve_initial_weights",
]
