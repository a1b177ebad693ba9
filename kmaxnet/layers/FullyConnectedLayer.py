from math import prod

from .Layer import Layer
from ..helpers.Backend import backend
from ..helpers.Errors import ConfigError, SelectionStateError, ShapeMismatchError
from ..helpers.Tensor import Tensor


class FullyConnectedLayer(Layer):
    """
    Dense affine layer, y = W x + b, for a single example.

    Each backward() consumes the input cached by the forward() before it.

    weights: (output_length, input_length), row-major
    biases:  (output_length,)
    """

    def __init__(self, output_length, input_length, seed=None, rng=None):
        self.output_length = self._positive_int("output_length", output_length)
        self.input_length = self._positive_int("input_length", input_length)

        self.weights = Tensor(self.output_length, self.input_length)
        self.weight_accum = Tensor(self.output_length, self.input_length)
        self.grads_w = Tensor(self.output_length, self.input_length)
        self.biases = Tensor(self.output_length)
        self.bias_grads = Tensor(self.output_length)

        # Uniform fan-in initialization from a layer-local generator
        self.rng = rng if rng is not None else backend.default_rng(seed)
        stdv = 1.0 / backend.sqrt(self.input_length)
        self.weights.d[...] = backend.flatten(
            backend.uniform(self.rng, -stdv, stdv, (self.output_length, self.input_length))
        )
        self.biases.d[...] = backend.uniform(self.rng, -stdv, stdv, (self.output_length,))

        self.z = None

    def forward(self, x):
        x = Tensor.wrap(x)
        if x.size != self.input_length:
            raise ShapeMismatchError("FullyConnectedLayer input length", self.input_length, x.size)
        self.z = x  # cache for backward

        output = self.biases.copy()
        backend.gemv("N", self.weights.view(), x.d, output.d)
        return output

    def backward(self, chain_grad, y=0.0):
        if self.z is None:
            raise SelectionStateError("Must call forward() before backward()")
        chain_grad = Tensor.wrap(chain_grad)
        if chain_grad.size != self.output_length:
            raise ShapeMismatchError(
                "FullyConnectedLayer chain gradient length", self.output_length, chain_grad.size
            )

        grads = Tensor(self.input_length)
        backend.gemv("T", self.weights.view(), chain_grad.d, grads.d)

        # per-example weight gradient: zero, then write the outer product
        self.grads_w.constant(0.0)
        backend.ger(chain_grad.d, self.z.d, self.grads_w.view())

        self.bias_grads.d[...] = chain_grad.d
        self.z = None
        return grads

    def params(self):
        return [self.weights.d, self.biases.d]

    def grads(self):
        return [self.grads_w.d, self.bias_grads.d]

    def get_params(self):
        return self.weights

    def get_param_grads(self):
        return self.grads_w

    def get_bias_params(self):
        return self.biases

    def get_bias_grads(self):
        return self.bias_grads

    def get_weight_accum(self):
        return self.weight_accum

    # -------- configuration --------
    def get_config(self):
        return {
            "type": type(self).__name__,
            "output_length": self.output_length,
            "input_length": self.input_length,
        }

    def get_state(self):
        return {
            "weights": self.weights.to_numpy(),
            "biases": self.biases.to_numpy(),
            "weight_accum": self.weight_accum.to_numpy(),
        }

    @classmethod
    def _build(cls, config, params):
        cls._require(config, "output_length", "input_length")
        layer = cls(config["output_length"], config["input_length"], seed=config.get("seed"))
        output_length, input_length = layer.output_length, layer.input_length
        if params is None:
            return layer

        expected = {
            "weights": (output_length, input_length),
            "biases": (output_length,),
            "weight_accum": (output_length, input_length),
        }
        unknown = set(params) - set(expected)
        if unknown:
            raise ConfigError(f"unexpected FullyConnectedLayer params {sorted(unknown)}")
        for name in ("weights", "biases"):
            if name not in params:
                raise ConfigError(f"FullyConnectedLayer params missing {name!r}")
        for name, shape in expected.items():
            if name not in params:
                continue
            value = backend.astype_default(params[name])
            if tuple(value.shape) not in (shape, (prod(shape),)):
                raise ConfigError(f"{name} has shape {tuple(value.shape)}, expected {shape}")
            getattr(layer, name).d[...] = backend.flatten(value)
        return layer
