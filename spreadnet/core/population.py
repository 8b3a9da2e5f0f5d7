"""Strategies that fill the weight tensor of a freshly built network."""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import List, Protocol, Sequence

import numpy as np

from ..data.files import read_weights
from ..errors import ConfigWarning, DimensionMismatch
from .network import Network
from .types import Array


class Population(Protocol):
    """Protocol implemented by weight population strategies."""

    def populate(self, network: Network) -> None:
        """Assign every weight of ``network``."""


@dataclass
class RandomUniform:
    """Draw every weight independently from ``[low, high)``."""

    rng: np.random.Generator
    low: float = -1.5
    high: float = 1.5

    def populate(self, network: Network) -> None:
        weights = [
            self.rng.uniform(self.low, self.high, size=(n, m))
            for n, m in zip(network.layer_sizes[:-1], network.layer_sizes[1:])
        ]
        network.load_weights(weights)


@dataclass
class FromFile:
    """Load weights from a binary weight file, falling back when its size is wrong."""

    path: str | Path
    fallback: Population

    def populate(self, network: Network) -> None:
        try:
            weights = read_weights(self.path, network.layer_sizes)
        except DimensionMismatch as exc:
            warnings.warn(
                f"weights file does not match the network configuration ({exc}), "
                "populating randomly",
                ConfigWarning,
                stacklevel=2,
            )
            self.fallback.populate(network)
            return
        network.load_weights(weights)


@dataclass
class Explicit:
    """Inject a fixed weight tensor; used by tests."""

    weights: Sequence[Array]

    def populate(self, network: Network) -> None:
        network.load_weights(list(self.weights))


def copy_weights(network: Network) -> List[Array]:
    return [np.array(w) for w in network.all_weights()]


__all__ = ["Population", "RandomUniform", "FromFile", "Explicit", "copy_weights"]
