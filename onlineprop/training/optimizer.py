"""Plain gradient descent over the packed weight tensor."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..core.types import Array, Topology
from ..core.weights import layer_mask


def update_weights(
    weights: Array, gradient: Array, alpha: float, mask: Array | None = None
) -> Array:
    """Return ``weights - alpha * gradient`` on the cells selected by ``mask``.

    Without a mask every cell is stepped, which leaves padding untouched as long
    as the gradient's padding is zero. Neither argument is modified.
    """

    updated = weights.copy()
    if mask is None:
        updated -= alpha * gradient
    else:
        updated[mask] -= alpha * gradient[mask]
    return updated


@dataclass
class SGDOptimizer:
    """Vanilla gradient descent with a fixed learning rate."""

    alpha: float
    topology: Topology
    mask: Array = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.mask = layer_mask(self.topology)

    def step(self, weights: Array, gradient: Array) -> Array:
        return update_weights(weights, gradient, self.alpha, self.mask)


__all__ = ["SGDOptimizer", "update_weights"]
