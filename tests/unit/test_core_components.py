import math

import numpy as np
import pytest

from onlineprop.core.activations import sigmoid, sigmoid_deriv
from onlineprop.core.backprop import compute_gradient
from onlineprop.core.forward import compute_outputs
from onlineprop.core.types import Topology
from onlineprop.core.weights import layer_mask, make_initial_weights, resolve_initial_weights
from onlineprop.exceptions import InvalidArgument, ShapeMismatch
from onlineprop.training.losses import compute_error


def test_initial_weights_layout():
    weights = make_initial_weights(3, 2, 1)
    assert weights.shape == (2, 3, 4)
    # (-1)^(i + h) with 1-based indices
    assert np.array_equal(weights[:, :, 0], np.array([[1, -1, 1], [-1, 1, -1]]))
    assert np.array_equal(weights[:, 0, 1], np.ones(2))
    assert np.array_equal(weights[:, 1:, 1], np.zeros((2, 2)))
    assert np.array_equal(weights[:, 0, 2], np.array([1.0, -1.0]))
    assert np.array_equal(weights[:, 1:, 2], np.zeros((2, 2)))
    assert np.array_equal(weights[0, :, 3], np.array([1.0, 0.0, 0.0]))
    assert np.array_equal(weights[1, :, 3], np.zeros(3))


def test_initial_weights_wide_output():
    weights = make_initial_weights(1, 3, 2)
    assert weights.shape == (3, 2, 4)
    assert np.array_equal(weights[:, :, 2], np.array([[1, -1], [-1, 1], [1, -1]]))
    assert np.array_equal(weights[:, 1, 0], np.zeros(3))


def test_layer_mask_counts_parameters():
    topology = Topology(3, 4, 2)
    assert int(layer_mask(topology).sum()) == topology.parameter_count == 3 * 4 + 4 + 4 * 2 + 2


def test_resolve_initial_weights_copies_and_checks_shape():
    topology = Topology(2, 2, 1)
    given = make_initial_weights(2, 2, 1)
    resolved = resolve_initial_weights(topology, given)
    resolved[0, 0, 0] = 42.0
    assert given[0, 0, 0] == 1.0

    with pytest.raises(ShapeMismatch):
        resolve_initial_weights(topology, np.zeros((2, 3, 4)))
    with pytest.raises(InvalidArgument):
        resolve_initial_weights(topology, np.zeros((2, 2)))


def test_topology_defaults_hidden_to_rounded_mean():
    assert Topology.from_columns(5, 3).num_hidden == 3
    assert Topology.from_columns(4, 3).num_hidden == 2
    with pytest.raises(InvalidArgument):
        Topology.from_columns(3, 3)
    with pytest.raises(InvalidArgument):
        Topology.from_columns(3, 0)
    with pytest.raises(InvalidArgument):
        Topology.from_columns(3, 2, num_hidden=0)


@pytest.mark.parametrize("dims", [(1, 1, 1), (2, 2, 1), (3, 3, 2), (2, 5, 4)])
def test_zero_inputs_give_closed_form_outputs(dims):
    num_inputs, num_hidden, num_outputs = dims
    weights = make_initial_weights(num_inputs, num_hidden, num_outputs)
    y, z = compute_outputs(np.zeros(num_inputs), weights, num_outputs)
    z1 = 1.0 / (1.0 + math.exp(-1.0))
    assert np.allclose(z, z1)
    for k in range(num_outputs):
        signs = sum((-1) ** (h + k) for h in range(num_hidden))
        assert y[k] == pytest.approx(1.0 + signs * z1)


def test_forward_matches_explicit_loops():
    rng = np.random.default_rng(0)
    topology = Topology(3, 4, 2)
    weights = rng.standard_normal(topology.weight_shape)
    x = rng.standard_normal(3)
    y, z = compute_outputs(x, weights, 2)
    for h in range(4):
        gamma = weights[h, 0, 1] + sum(weights[h, i, 0] * x[i] for i in range(3))
        assert z[h] == pytest.approx(1.0 / (1.0 + math.exp(-gamma)))
    for k in range(2):
        expected = weights[0, k, 3] + sum(weights[h, k, 2] * z[h] for h in range(4))
        assert y[k] == pytest.approx(expected)


def test_error_is_half_sum_of_squares_and_symmetric():
    y = np.array([1.0, -2.0, 0.5])
    t = np.array([0.0, 1.0, 0.5])
    assert compute_error(y, t) == pytest.approx(0.5 * (1.0 + 9.0))
    assert compute_error(y, t) == compute_error(t, y)


def test_gradient_is_zero_at_zero_loss():
    weights = make_initial_weights(2, 3, 1)
    x = np.array([0.3, -0.7])
    y, z = compute_outputs(x, weights, 1)
    grads = compute_gradient(y, x, y.copy(), weights, z)
    assert grads.shape == weights.shape
    assert not np.any(grads)


def test_gradient_matches_finite_differences():
    rng = np.random.default_rng(3)
    topology = Topology(3, 4, 2)
    weights = rng.standard_normal(topology.weight_shape) * layer_mask(topology)
    x = rng.standard_normal(3)
    t = rng.standard_normal(2)
    y, z = compute_outputs(x, weights, 2)
    grads = compute_gradient(y, x, t, weights, z)

    eps = 1e-6
    for idx in zip(*np.nonzero(layer_mask(topology))):
        plus = weights.copy()
        minus = weights.copy()
        plus[idx] += eps
        minus[idx] -= eps
        e_plus = compute_error(compute_outputs(x, plus, 2)[0], t)
        e_minus = compute_error(compute_outputs(x, minus, 2)[0], t)
        assert grads[idx] == pytest.approx((e_plus - e_minus) / (2 * eps), rel=1e-5, abs=1e-8)

    assert not np.any(grads[~layer_mask(topology)])


def test_gradient_output_terms():
    weights = make_initial_weights(1, 2, 1)
    x = np.array([0.5])
    y, z = compute_outputs(x, weights, 1)
    grads = compute_gradient(y, x, np.array([2.0]), weights, z)
    d = y[0] - 2.0
    assert grads[0, 0, 3] == pytest.approx(d)
    assert np.allclose(grads[:, 0, 2], d * z)


def test_sigmoid_derivative_from_output():
    x = np.linspace(-3, 3, 7)
    z = sigmoid(x)
    numeric = (sigmoid(x + 1e-6) - sigmoid(x - 1e-6)) / 2e-6
    assert np.allclose(sigmoid_deriv(z), numeric, atol=1e-8)
