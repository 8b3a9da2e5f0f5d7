"""Spreadsheet-style storage for a fully connected feed-forward network.

Every node and edge is one cell in a plain float64 array: ``a[alpha]`` holds
the activations of layer ``alpha`` and ``W[n]`` the ``N[n] x N[n+1]`` weights
between layers ``n`` and ``n + 1``. Training networks additionally carry the
``Theta`` (pre-activation sums of hidden layers) and ``psi`` (error signals of
layers two and up) caches used by backpropagation.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from .activations import ActivationFunction
from .types import Array, ModelDescription

BYTES_PER_VALUE = 8


def _readonly(array: Array) -> Array:
    view = array.view()
    view.flags.writeable = False
    return view


class Network:
    """Owner of every weight and activation array of one network instance."""

    def __init__(
        self,
        layer_sizes: Sequence[int],
        activation: ActivationFunction,
        *,
        training: bool = False,
    ) -> None:
        sizes = [int(n) for n in layer_sizes]
        if len(sizes) < 2:
            raise ValueError(
                f"a network needs at least an input and an output layer, got {sizes}"
            )
        if any(n < 1 for n in sizes):
            raise ValueError(f"every layer needs at least one node, got {sizes}")

        self._sizes = tuple(sizes)
        self.activation = activation
        self.training = training

        self._weights: List[Array] = [
            np.zeros((n, m), dtype=np.float64) for n, m in zip(sizes[:-1], sizes[1:])
        ]
        self._a: List[Array] = [np.zeros(n, dtype=np.float64) for n in sizes]

        # Theta for hidden layers 1..L-1, psi for layers 2..L.
        self.theta: List[Optional[Array]] = [None] * len(sizes)
        self.psi: List[Optional[Array]] = [None] * len(sizes)
        if training:
            for alpha in range(1, self.output_layer):
                self.theta[alpha] = np.zeros(sizes[alpha], dtype=np.float64)
            for alpha in range(2, len(sizes)):
                self.psi[alpha] = np.zeros(sizes[alpha], dtype=np.float64)
            # Output error signal, also needed when there is no hidden layer.
            if self.psi[self.output_layer] is None:
                self.psi[self.output_layer] = np.zeros(sizes[-1], dtype=np.float64)

    # ------------------------------------------------------------------
    # Topology

    @property
    def layer_sizes(self) -> tuple[int, ...]:
        return self._sizes

    @property
    def num_layers(self) -> int:
        """Number of connectivity (weight) layers, ``L``."""

        return len(self._sizes) - 1

    @property
    def output_layer(self) -> int:
        return len(self._sizes) - 1

    @property
    def weight_count(self) -> int:
        return int(sum(w.size for w in self._weights))

    @property
    def weight_bytes(self) -> int:
        return self.weight_count * BYTES_PER_VALUE

    def describe(self) -> ModelDescription:
        return ModelDescription(layer_sizes=list(self._sizes), activation=self.activation.name)

    # ------------------------------------------------------------------
    # Activations

    def set_input(self, values: Sequence[float] | Array) -> None:
        values = np.asarray(values, dtype=np.float64)
        if values.shape != (self._sizes[0],):
            raise ValueError(
                f"input must have {self._sizes[0]} values, got shape {values.shape}"
            )
        self._a[0][:] = values

    def activation_values(self, layer: int) -> Array:
        """Return a read-only view of the activations of ``layer``."""

        return _readonly(self._a[layer])

    @property
    def output(self) -> Array:
        return _readonly(self._a[-1])

    def _store(self, alpha: int, values: Array) -> None:
        self._a[alpha][:] = values

    # ------------------------------------------------------------------
    # Weights

    def weights(self, layer: int) -> Array:
        """Return a read-only view of connectivity layer ``layer``."""

        return _readonly(self._weights[layer])

    def all_weights(self) -> List[Array]:
        return [_readonly(w) for w in self._weights]

    def apply_weight_delta(self, layer: int, k: int, j: int, delta: float) -> None:
        self._weights[layer][k, j] += delta

    def apply_layer_delta(self, layer: int, delta: Array) -> None:
        """Add ``delta`` edge-wise to connectivity layer ``layer``."""

        self._weights[layer] += delta

    def load_weights(self, weights: Sequence[Array]) -> None:
        """Overwrite every weight; shapes must match the topology exactly."""

        if len(weights) != self.num_layers:
            raise ValueError(
                f"expected {self.num_layers} weight layers, got {len(weights)}"
            )
        arrays = [np.asarray(w, dtype=np.float64) for w in weights]
        for n, (current, new) in enumerate(zip(self._weights, arrays)):
            if new.shape != current.shape:
                raise ValueError(
                    f"weight layer {n} must have shape {current.shape}, got {new.shape}"
                )
        for current, new in zip(self._weights, arrays):
            current[:] = new

    def state_dict(self) -> dict[str, Array]:
        return {f"W{idx}": w.copy() for idx, w in enumerate(self._weights)}

    def __repr__(self) -> str:
        sizes = "-".join(str(n) for n in self._sizes)
        return f"Network({sizes}, activation={self.activation.name!r}, training={self.training})"


__all__ = ["Network", "BYTES_PER_VALUE"]
