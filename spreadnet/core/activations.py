"""Activation functions and the registry that resolves them by name."""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Dict, Iterable, Protocol, Union

import numpy as np

from ..errors import ConfigWarning
from .types import Array

Value = Union[float, Array]


class ActivationFunction(Protocol):
    """Protocol implemented by every activation function."""

    name: str

    def evaluate(self, x: Value) -> Value:
        """Return ``f(x)``."""

    def derivative(self, x: Value) -> Value:
        """Return ``f'(x)``."""


@dataclass(frozen=True)
class Sigmoid:
    """Logistic sigmoid."""

    name: str = "sigmoid"

    def evaluate(self, x: Value) -> Value:
        # e^{-x} overflows to inf below about -709; the result is still 0.
        with np.errstate(over="ignore"):
            return 1.0 / (1.0 + np.exp(-x))

    def derivative(self, x: Value) -> Value:
        y = self.evaluate(x)
        return y * (1.0 - y)


@dataclass(frozen=True)
class Linear:
    """Identity activation.

    The derivative is a constant stub of ``1.0``; this variant is meant for
    inference and testing, not for gradient training.
    """

    name: str = "linear"

    def evaluate(self, x: Value) -> Value:
        return x

    def derivative(self, x: Value) -> Value:
        if np.ndim(x) == 0:
            return 1.0
        return np.ones_like(x, dtype=np.float64)


@dataclass(frozen=True)
class HyperbolicTangent:
    """Hyperbolic tangent evaluated through ``e^{-2|x|}`` so it never overflows."""

    name: str = "tangent"

    def evaluate(self, x: Value) -> Value:
        s = np.where(np.asarray(x) >= 0.0, 1.0, -1.0)
        p = np.exp(-2.0 * s * x)
        y = s * (1.0 - p) / (1.0 + p)
        return float(y) if np.ndim(y) == 0 else y

    def derivative(self, x: Value) -> Value:
        y = self.evaluate(x)
        return 1.0 - y * y


class ActivationRegistry:
    """Central registry for activation functions."""

    def __init__(self, default: str) -> None:
        self._registry: Dict[str, ActivationFunction] = {}
        self.default = default

    def register(self, fn: ActivationFunction) -> None:
        self._registry[fn.name.lower()] = fn

    def get(self, name: str) -> ActivationFunction:
        try:
            return self._registry[name.lower()]
        except KeyError as exc:
            available = ", ".join(self.names())
            raise KeyError(f"Unknown activation {name!r}. Available: {available}") from exc

    def names(self) -> Iterable[str]:
        return sorted(self._registry)

    def resolve(self, name: str | None) -> ActivationFunction:
        """Return the activation called ``name``, or the default one.

        Missing and unrecognised names fall back to the default (sigmoid)
        with a :class:`~spreadnet.errors.ConfigWarning`.
        """

        if name is None:
            warnings.warn(
                f"activation function not defined, using {self.default}",
                ConfigWarning,
                stacklevel=2,
            )
            return self._registry[self.default]
        key = name.strip().lower()
        if key not in self._registry:
            warnings.warn(
                f"unknown activation function {name!r}, using {self.default}",
                ConfigWarning,
                stacklevel=2,
            )
            return self._registry[self.default]
        return self._registry[key]


REGISTRY = ActivationRegistry(default="sigmoid")
REGISTRY.register(Sigmoid())
REGISTRY.register(Linear())
REGISTRY.register(HyperbolicTangent())


def resolve(name: str | None) -> ActivationFunction:
    return REGISTRY.resolve(name)


__all__ = [
    "ActivationFunction",
    "Sigmoid",
    "Linear",
    "HyperbolicTangent",
    "ActivationRegistry",
    "REGISTRY",
    "resolve",
]
