from numbers import Integral

from ..helpers.Errors import ConfigError


class Layer:
    # Subclasses override as needed
    def forward(self, x):
        raise NotImplementedError

    def backward(self, chain_grad, y=0.0):
        # Return grad wrt input; y is the example label, only loss-side layers read it
        raise NotImplementedError

    def params(self):
        # Return list of parameter ndarrays (e.g., [W, b])
        return []

    def grads(self):
        # Return list of gradient ndarrays matching params()
        return []

    @property
    def has_params(self):
        return len(self.params()) > 0

    # None means "no trainable state"
    def get_params(self):
        return None

    def get_param_grads(self):
        return None

    def get_bias_params(self):
        return None

    def get_bias_grads(self):
        return None

    def get_weight_accum(self):
        return None

    # -------- configuration --------
    def get_config(self):
        raise NotImplementedError

    def get_state(self):
        # name -> ndarray of everything save/load must carry
        return {}

    @classmethod
    def from_config(cls, config, params=None):
        """
        Build a layer from a hyperparameter dict and an optional parameter blob.

        Dispatches on config["type"] when called on the base class.
        """
        from . import LAYER_TYPES

        if not isinstance(config, dict):
            raise ConfigError(f"layer config must be a dict, got {type(config).__name__}")
        if cls is Layer:
            name = config.get("type")
            if name not in LAYER_TYPES:
                raise ConfigError(f"unknown layer type {name!r}")
            return LAYER_TYPES[name].from_config(config, params)
        if config.get("type", cls.__name__) != cls.__name__:
            raise ConfigError(f"config type {config['type']!r} does not match {cls.__name__}")
        return cls._build(config, params)

    @classmethod
    def _build(cls, config, params):
        raise NotImplementedError

    @staticmethod
    def _require(config, *keys):
        missing = [key for key in keys if key not in config]
        if missing:
            raise ConfigError(f"missing hyperparameters {missing}")

    @staticmethod
    def _positive_int(key, value):
        if isinstance(value, bool) or not isinstance(value, Integral) or value <= 0:
            raise ConfigError(f"{key} must be a positive integer, got {value!r}")
        return int(value)
