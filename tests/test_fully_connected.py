import numpy as np
import pytest

from kmaxnet import (
    ConfigError,
    FullyConnectedLayer,
    Layer,
    SelectionStateError,
    ShapeMismatchError,
    Tensor,
)


def numerical_grad(f, arr, h=1e-6):
    grad = np.zeros_like(arr)
    for i in range(arr.size):
        old = arr.flat[i]
        arr.flat[i] = old + h
        plus = f()
        arr.flat[i] = old - h
        minus = f()
        arr.flat[i] = old
        grad.flat[i] = (plus - minus) / (2 * h)
    return grad


def test_forward_is_dense_affine():
    layer = FullyConnectedLayer(3, 4, seed=1)
    x = np.array([0.5, -1.0, 2.0, 0.25])
    out = layer.forward(x)

    W = layer.get_params().view()
    b = layer.get_bias_params().d
    assert out.dims == (3,)
    for i in range(3):
        expected = sum(W[i, j] * x[j] for j in range(4)) + b[i]
        assert out.at(i) == pytest.approx(expected)


def test_init_is_seeded_and_within_fan_in_bound():
    a = FullyConnectedLayer(5, 16, seed=7)
    b = FullyConnectedLayer(5, 16, seed=7)
    np.testing.assert_array_equal(a.weights.d, b.weights.d)
    np.testing.assert_array_equal(a.biases.d, b.biases.d)

    stdv = 1.0 / np.sqrt(16)
    assert np.all(np.abs(a.weights.d) <= stdv)
    assert np.all(np.abs(a.biases.d) <= stdv)
    assert np.all(a.weight_accum.d == 0.0)


def test_gradients_match_finite_differences():
    rng = np.random.default_rng(3)
    layer = FullyConnectedLayer(3, 5, rng=rng)
    x = rng.normal(size=5)
    c = rng.normal(size=3)

    def loss():
        return float(np.dot(c, layer.forward(x).d))

    num_x = numerical_grad(loss, x)
    num_w = numerical_grad(loss, layer.weights.d)
    num_b = numerical_grad(loss, layer.biases.d)

    layer.forward(x)
    grad_x = layer.backward(c)

    np.testing.assert_allclose(grad_x.d, num_x, atol=1e-6)
    np.testing.assert_allclose(layer.get_param_grads().d, num_w, atol=1e-6)
    np.testing.assert_allclose(layer.get_bias_grads().d, num_b, atol=1e-6)


def test_bias_grad_equals_chain_grad():
    layer = FullyConnectedLayer(4, 2, seed=0)
    layer.forward([1.0, -1.0])
    chain = np.array([0.1, -0.2, 3.0, 0.0])
    layer.backward(chain, 1.0)
    np.testing.assert_array_equal(layer.get_bias_grads().d, chain)


def test_weight_grad_is_per_example():
    layer = FullyConnectedLayer(2, 2, seed=0)
    layer.forward([1.0, 2.0])
    layer.backward([1.0, 1.0])
    layer.forward([3.0, 0.0])
    layer.backward([1.0, -1.0])
    expected = np.outer([1.0, -1.0], [3.0, 0.0])
    np.testing.assert_allclose(layer.get_param_grads().view(), expected)


def test_forward_does_not_mutate_input():
    layer = FullyConnectedLayer(2, 3, seed=0)
    x = Tensor(3, data=[1.0, 2.0, 3.0])
    layer.forward(x)
    layer.backward([1.0, 1.0])
    assert x.to_numpy().tolist() == [1.0, 2.0, 3.0]


def test_shape_mismatch_is_reported():
    layer = FullyConnectedLayer(2, 3, seed=0)
    with pytest.raises(ShapeMismatchError):
        layer.forward([1.0, 2.0])
    layer.forward([1.0, 2.0, 3.0])
    with pytest.raises(ShapeMismatchError):
        layer.backward([1.0, 2.0, 3.0])


def test_backward_before_forward():
    layer = FullyConnectedLayer(2, 3, seed=0)
    with pytest.raises(SelectionStateError):
        layer.backward([1.0, 1.0])


def test_param_lists_share_memory_with_tensors():
    layer = FullyConnectedLayer(2, 3, seed=0)
    assert layer.has_params
    w, b = layer.params()
    gw, gb = layer.grads()
    assert w is layer.get_params().d
    assert b is layer.get_bias_params().d
    assert gw is layer.get_param_grads().d
    assert gb is layer.get_bias_grads().d
    assert layer.get_weight_accum().dims == (2, 3)


def test_from_config_with_params():
    weights = np.arange(6.0).reshape(2, 3)
    layer = Layer.from_config(
        {"type": "FullyConnectedLayer", "output_length": 2, "input_length": 3},
        {"weights": weights, "biases": [0.5, -0.5]},
    )
    assert isinstance(layer, FullyConnectedLayer)
    out = layer.forward([1.0, 1.0, 1.0])
    assert out.to_numpy().tolist() == [3.5, 11.5]
    assert layer.get_config() == {
        "type": "FullyConnectedLayer",
        "output_length": 2,
        "input_length": 3,
    }


@pytest.mark.parametrize(
    "config, params",
    [
        ({"type": "FullyConnectedLayer", "output_length": 2}, None),
        ({"type": "FullyConnectedLayer", "output_length": 0, "input_length": 3}, None),
        ({"type": "FullyConnectedLayer", "output_length": 2.5, "input_length": 3}, None),
        ({"type": "FullyConnectedLayer", "output_length": 2, "input_length": 3},
         {"weights": np.zeros((3, 2)), "biases": np.zeros(2)}),
        ({"type": "FullyConnectedLayer", "output_length": 2, "input_length": 3},
         {"weights": np.zeros((2, 3))}),
        ({"type": "FullyConnectedLayer", "output_length": 2, "input_length": 3},
         {"weights": np.zeros((2, 3)), "biases": np.zeros(2), "momentum": np.zeros(2)}),
        ({"type": "Convolution", "output_length": 2, "input_length": 3}, None),
    ],
)
def test_from_config_rejects_malformed(config, params):
    with pytest.raises(ConfigError):
        Layer.from_config(config, params)


def test_from_config_type_must_match_class():
    with pytest.raises(ConfigError):
        FullyConnectedLayer.from_config({"type": "KMaxPooling", "k": 1})


@pytest.mark.parametrize(
    "output_length, input_length",
    [(3, 0), (0, 3), (-1, 3), (3, -2), (2.5, 3), (True, 3)],
)
def test_constructor_rejects_bad_sizes(output_length, input_length):
    with pytest.raises(ConfigError):
        FullyConnectedLayer(output_length, input_length, seed=0)


def test_backward_consumes_cached_input():
    layer = FullyConnectedLayer(2, 3, seed=0)
    layer.forward([1.0, 2.0, 3.0])
    layer.backward([1.0, 1.0])
    with pytest.raises(SelectionStateError):
        layer.backward([1.0, 1.0])
