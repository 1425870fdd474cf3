"""Core numerical primitives for onlineprop."""

from . import activations, backprop, forward, types, weights

__all__ = ["activations", "backprop", "forward", "types", "weights"]
