import numpy as np
import pytest

from spreadnet.core.activations import Sigmoid
from spreadnet.core.network import Network
from spreadnet.core.population import Explicit, FromFile, RandomUniform, copy_weights
from spreadnet.core.propagation import forward_run, infer
from spreadnet.data.files import write_weights
from spreadnet.errors import ConfigWarning, IOUnavailable


@pytest.mark.parametrize("sizes", [[3], [], [2, 0, 1]])
def test_network_rejects_bad_topology(sizes):
    with pytest.raises(ValueError):
        Network(sizes, Sigmoid())


def test_network_shapes_and_caches():
    net = Network([2, 3, 4, 1], Sigmoid(), training=True)
    assert net.num_layers == 3
    assert [w.shape for w in net.all_weights()] == [(2, 3), (3, 4), (4, 1)]
    assert net.weight_count == 6 + 12 + 4
    assert net.weight_bytes == 8 * 22
    assert net.theta[0] is None and net.theta[3] is None
    assert [net.theta[a].shape for a in (1, 2)] == [(3,), (4,)]
    assert net.psi[1] is None
    assert [net.psi[a].shape for a in (2, 3)] == [(4,), (1,)]


def test_running_network_has_no_training_caches():
    net = Network([2, 3, 1], Sigmoid())
    assert all(t is None for t in net.theta)
    assert all(p is None for p in net.psi)


def test_single_weight_layer_keeps_output_signal():
    net = Network([3, 2], Sigmoid(), training=True)
    assert net.psi[1].shape == (2,)


def test_views_are_read_only():
    net = Network([2, 2, 1], Sigmoid())
    with pytest.raises(ValueError):
        net.weights(0)[0, 0] = 1.0
    with pytest.raises(ValueError):
        net.output[0] = 1.0
    with pytest.raises(ValueError):
        net.activation_values(0)[0] = 1.0


def test_set_input_checks_length():
    net = Network([2, 2, 1], Sigmoid())
    with pytest.raises(ValueError):
        net.set_input([1.0, 0.0, 1.0])


def test_load_weights_checks_shapes():
    net = Network([2, 2, 1], Sigmoid())
    with pytest.raises(ValueError):
        net.load_weights([np.zeros((2, 2))])
    with pytest.raises(ValueError):
        net.load_weights([np.zeros((2, 2)), np.zeros((1, 2))])


def test_forward_is_deterministic_and_sized():
    rng = np.random.default_rng(4)
    net = Network([3, 4, 2], Sigmoid())
    RandomUniform(rng).populate(net)
    x = np.array([0.2, -0.7, 1.0])
    first = infer(net, x)
    second = infer(net, x)
    assert first.shape == (2,)
    assert first.tobytes() == second.tobytes()


def test_forward_matches_manual_product():
    w0 = np.array([[0.5, -1.0], [0.25, 2.0]])
    w1 = np.array([[1.5], [-0.5]])
    net = Network([2, 2, 1], Sigmoid())
    Explicit([w0, w1]).populate(net)
    net.set_input([1.0, 1.0])
    out = forward_run(net)
    sig = Sigmoid().evaluate
    expected = sig(sig(np.array([1.0, 1.0]) @ w0) @ w1)
    assert np.allclose(out, expected)


def test_random_population_respects_range():
    net = Network([4, 6, 3], Sigmoid())
    RandomUniform(np.random.default_rng(0), low=-0.5, high=0.25).populate(net)
    for w in net.all_weights():
        assert w.min() >= -0.5
        assert w.max() < 0.25


def test_file_population_loads_exact_weights(tmp_path):
    rng = np.random.default_rng(1)
    weights = [rng.normal(size=(2, 3)), rng.normal(size=(3, 1))]
    path = write_weights(tmp_path / "w.bin", weights)
    net = Network([2, 3, 1], Sigmoid())
    FromFile(path, fallback=RandomUniform(rng)).populate(net)
    for loaded, original in zip(copy_weights(net), weights):
        assert loaded.tobytes() == original.tobytes()


def test_file_population_falls_back_on_short_file(tmp_path):
    weights = [np.ones((2, 3)), np.ones((3, 1))]
    path = write_weights(tmp_path / "w.bin", weights)
    path.write_bytes(path.read_bytes()[:-1])
    net = Network([2, 3, 1], Sigmoid())
    with pytest.warns(ConfigWarning):
        FromFile(path, fallback=RandomUniform(np.random.default_rng(0))).populate(net)
    assert not np.all(net.weights(0) == 1.0)


def test_file_population_missing_file_is_fatal(tmp_path):
    net = Network([2, 1], Sigmoid())
    with pytest.raises(IOUnavailable):
        FromFile(tmp_path / "absent.bin", fallback=RandomUniform(np.random.default_rng(0))).populate(net)
