import json

import numpy as np

from .layers import Layer
from .helpers.Backend import backend
from .helpers.Errors import ConfigError
from .helpers.Tensor import Tensor


class Network:
    """
    Ordered stack of layers driven one example at a time.

    forward() runs top-to-bottom, backward() bottom-to-top, and every
    backward() must follow the forward() it belongs to.
    """

    def __init__(self, layers, verbose=0):
        self.layers = list(layers)
        self.verbose = verbose

    def forward(self, x):
        x = Tensor.wrap(x)
        for layer in self.layers:
            x = layer.forward(x)
        return x

    def backward(self, grad, y=0.0):
        grad = Tensor.wrap(grad)
        for L in reversed(self.layers):
            grad = L.backward(grad, y)
        return grad

    def parameters(self):
        ps = []
        for L in self.layers:
            for p, g in zip(L.params(), L.grads()):
                ps.append([p, g])
        return ps

    def layers_with_params(self):
        return [L for L in self.layers if L.has_params]

    def get_config(self):
        return [L.get_config() for L in self.layers]

    @classmethod
    def from_config(cls, configs, params=None, verbose=0):
        """Build every layer from its config; params is a parallel list of blobs or None."""
        if params is None:
            params = [None] * len(configs)
        if len(params) != len(configs):
            raise ConfigError(f"{len(configs)} layer configs but {len(params)} param blobs")
        return cls([Layer.from_config(c, p) for c, p in zip(configs, params)], verbose=verbose)

    # model I/O
    def save(self, path):
        arrays = {"config": np.array(json.dumps(self.get_config()))}
        for i, L in enumerate(self.layers):
            for name, value in L.get_state().items():
                arrays[f"l{i}.{name}"] = value
        np.savez(path, **arrays)
        if self.verbose > 0:
            print(f"Saved {len(self.layers)} layers to {path}")

    @classmethod
    def load(cls, path, verbose=0):
        with np.load(path, allow_pickle=False) as data:
            if "config" not in data.files:
                raise ConfigError(f"{path} has no layer config")
            try:
                configs = json.loads(str(data["config"]))
            except json.JSONDecodeError as e:
                raise ConfigError(f"{path} has an unreadable layer config: {e}") from e
            if not isinstance(configs, list):
                raise ConfigError(f"{path} layer config must be a list")

            params = [{} for _ in configs]
            for key in data.files:
                if key == "config":
                    continue
                idx, _, name = key.partition(".")
                i = int(idx[1:]) if idx[1:].isdigit() else -1
                if not idx.startswith("l") or not 0 <= i < len(configs) or not name:
                    raise ConfigError(f"{path} has a stray array {key!r}")
                params[i][name] = backend.ensure_array(data[key], copy=True)

        net = cls.from_config(configs, [p or None for p in params], verbose=verbose)
        if verbose > 0:
            print(f"Loaded {len(net.layers)} layers from {path}")
        return net
