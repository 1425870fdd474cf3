"""Forward pass of the sigmoid-hidden, linear-output network."""

from __future__ import annotations

import numpy as np

from .activations import sigmoid
from .types import HIDDEN_BIAS, HIDDEN_OUTPUT, INPUT_HIDDEN, OUTPUT_BIAS, Array


def compute_outputs(inputs: Array, weights: Array, num_outputs: int) -> tuple[Array, Array]:
    """Compute the outputs of one sample.

    Returns ``(y, z)`` where ``y`` holds the ``num_outputs`` linear outputs and
    ``z`` the sigmoid activations of every hidden neuron. ``z`` is needed again
    by :func:`onlineprop.core.backprop.compute_gradient`.
    """

    x = np.asarray(inputs, dtype=np.float64).reshape(-1)
    num_inputs = x.shape[0]
    gamma = weights[:, 0, HIDDEN_BIAS] + weights[:, :num_inputs, INPUT_HIDDEN] @ x
    z = sigmoid(gamma)
    y = weights[0, :num_outputs, OUTPUT_BIAS] + z @ weights[:, :num_outputs, HIDDEN_OUTPUT]
    return y, z


__all__ = ["compute_outputs"]
