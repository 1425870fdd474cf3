"""Analytic gradient of the per-sample error with respect to every weight."""

from __future__ import annotations

import numpy as np

from .activations import sigmoid_deriv
from .types import HIDDEN_BIAS, HIDDEN_OUTPUT, INPUT_HIDDEN, OUTPUT_BIAS, Array


def compute_gradient(
    y: Array,
    inputs: Array,
    targets: Array,
    weights: Array,
    z: Array,
) -> Array:
    """Backpropagate one sample's error through the network.

    The result has the same packed layout as ``weights``. With a linear output
    layer ``dE/dy_k`` equals ``y_k - t_k``, which is also the derivative for
    the output bias. Hidden-layer terms sum the contributions of every output
    neuron that the hidden neuron feeds.
    """

    x = np.asarray(inputs, dtype=np.float64).reshape(-1)
    t = np.asarray(targets, dtype=np.float64).reshape(-1)
    num_inputs = x.shape[0]
    num_outputs = t.shape[0]

    grads = np.zeros_like(weights, dtype=np.float64)
    delta_out = np.asarray(y, dtype=np.float64) - t
    grads[0, :num_outputs, OUTPUT_BIAS] = delta_out
    grads[:, :num_outputs, HIDDEN_OUTPUT] = np.outer(z, delta_out)

    delta_hidden = (weights[:, :num_outputs, HIDDEN_OUTPUT] @ delta_out) * sigmoid_deriv(z)
    grads[:, 0, HIDDEN_BIAS] = delta_hidden
    grads[:, :num_inputs, INPUT_HIDDEN] = np.outer(delta_hidden, x)
    return grads


__all__ = ["compute_gradient"]
