"""Activation utilities for onlineprop."""

from __future__ import annotations

import numpy as np

from .types import Array


def sigmoid(x: Array) -> Array:
    """Return the logistic sigmoid ``1 / (1 + exp(-x))``."""

    return 1.0 / (1.0 + np.exp(-x))


def sigmoid_deriv(z: Array) -> Array:
    """Derivative of the sigmoid expressed through its output ``z``."""

    return z * (1.0 - z)
