"""Forward propagation and the online backpropagation update."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .network import Network
from .types import Array


def forward_run(network: Network) -> Array:
    """Propagate the stored input to the output layer and return the output view."""

    f = network.activation
    for alpha in range(1, network.output_layer + 1):
        theta = network.activation_values(alpha - 1) @ network.weights(alpha - 1)
        network._store(alpha, f.evaluate(theta))
    return network.output


def forward_train(network: Network, expected: Sequence[float] | Array) -> Array:
    """Forward pass that also fills the Theta cache and the output error signal."""

    if not network.training:
        raise RuntimeError("forward_train needs a network built with training=True")
    f = network.activation
    out = network.output_layer
    for alpha in range(1, out):
        theta = network.activation_values(alpha - 1) @ network.weights(alpha - 1)
        network.theta[alpha][:] = theta
        network._store(alpha, f.evaluate(theta))

    theta_out = network.activation_values(out - 1) @ network.weights(out - 1)
    network._store(out, f.evaluate(theta_out))
    expected = np.asarray(expected, dtype=np.float64)
    network.psi[out][:] = (expected - network.output) * f.derivative(theta_out)
    return network.output


def backpropagate(network: Network, learning_rate: float) -> None:
    """Apply one online weight update from the error signals of the last training pass.

    Walks the connectivity layers from the output side down to the input.
    For every layer above the input, ``Omega`` is summed from the weights as
    they were before this layer's update; the update is applied right after.
    The input layer (``alpha == 0``) stores no error signal.
    """

    if not network.training:
        raise RuntimeError("backpropagate needs a network built with training=True")
    f = network.activation
    psi_up = network.psi[network.output_layer]
    for alpha in range(network.num_layers - 1, -1, -1):
        a = network.activation_values(alpha)
        omega = network.weights(alpha) @ psi_up if alpha >= 1 else None
        network.apply_layer_delta(alpha, learning_rate * np.outer(a, psi_up))
        if omega is None:
            continue
        psi = omega * f.derivative(network.theta[alpha])
        if network.psi[alpha] is not None:
            network.psi[alpha][:] = psi
            psi_up = network.psi[alpha]
        else:
            psi_up = psi


def train_case(
    network: Network,
    inputs: Sequence[float] | Array,
    expected: Sequence[float] | Array,
    learning_rate: float,
) -> None:
    network.set_input(inputs)
    forward_train(network, expected)
    backpropagate(network, learning_rate)


def infer(network: Network, inputs: Sequence[float] | Array) -> Array:
    """Run ``inputs`` through the network and return a copy of the output."""

    network.set_input(inputs)
    return forward_run(network).copy()


def case_error(expected: Sequence[float] | Array, actual: Sequence[float] | Array) -> float:
    diff = np.asarray(expected, dtype=np.float64) - np.asarray(actual, dtype=np.float64)
    return float(np.sum(0.5 * diff * diff))


__all__ = [
    "forward_run",
    "forward_train",
    "backpropagate",
    "train_case",
    "infer",
    "case_error",
]
