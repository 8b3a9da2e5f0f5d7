"""Core numerical primitives for spreadnet."""

from . import activations, network, population, propagation, types

__all__ = ["activations", "network", "population", "propagation", "types"]
