"""Online updates must equal ``-lambda * dE/dw`` for every edge."""

from __future__ import annotations

from typing import List

import numpy as np
import pytest

from spreadnet.core.activations import HyperbolicTangent, Sigmoid
from spreadnet.core.network import Network
from spreadnet.core.population import Explicit, copy_weights
from spreadnet.core.propagation import backpropagate, case_error, forward_train, infer, train_case

STEP = 1e-5
LEARNING_RATE = 0.1


def _numeric_gradient(net: Network, weights: List[np.ndarray], x, t) -> List[np.ndarray]:
    grads = [np.zeros_like(w) for w in weights]
    for n, w in enumerate(weights):
        for k in range(w.shape[0]):
            for j in range(w.shape[1]):
                errors = []
                for sign in (1.0, -1.0):
                    Explicit(weights).populate(net)
                    net.apply_weight_delta(n, k, j, sign * STEP)
                    errors.append(case_error(t, infer(net, x)))
                grads[n][k, j] = (errors[0] - errors[1]) / (2.0 * STEP)
    return grads


@pytest.mark.parametrize("activation", [Sigmoid(), HyperbolicTangent()], ids=lambda f: f.name)
@pytest.mark.parametrize("sizes", [[3, 2], [2, 3, 1], [2, 3, 4, 2]], ids=str)
def test_update_matches_finite_difference(activation, sizes):
    rng = np.random.default_rng(11)
    weights = [
        rng.uniform(-1.5, 1.5, size=(n, m)) for n, m in zip(sizes[:-1], sizes[1:])
    ]
    x = rng.uniform(0.0, 1.0, size=sizes[0])
    t = rng.uniform(-0.5, 0.5, size=sizes[-1])

    net = Network(sizes, activation, training=True)
    grads = _numeric_gradient(net, weights, x, t)

    Explicit(weights).populate(net)
    train_case(net, x, t, LEARNING_RATE)
    for after, before, grad in zip(copy_weights(net), weights, grads):
        observed = (after - before) / LEARNING_RATE
        assert np.allclose(observed, -grad, atol=1e-6, rtol=0.0)


def test_output_error_signal_is_recorded():
    net = Network([2, 2, 1], Sigmoid(), training=True)
    Explicit([np.full((2, 2), 0.5), np.full((2, 1), -0.5)]).populate(net)
    train_case(net, [1.0, 0.0], [1.0], LEARNING_RATE)
    assert net.psi[2][0] > 0.0
    assert net.theta[1].shape == (2,)


def test_training_only_operations_need_training_network():
    net = Network([2, 1], Sigmoid())
    with pytest.raises(RuntimeError):
        forward_train(net, [0.0])
    with pytest.raises(RuntimeError):
        backpropagate(net, LEARNING_RATE)
