from .helpers.Backend import backend
from .helpers.Errors import ConfigError, SelectionStateError, ShapeMismatchError
from .helpers.Tensor import Tensor
from .layers import FullyConnectedLayer, KMaxPooling, Layer, SelectionRecord
from .optimizer import AdagradOptimizer, SGDOptimizer
from .Network import Network

__all__ = [
    "backend",
    "Tensor",
    "Layer",
    "FullyConnectedLayer",
    "KMaxPooling",
    "SelectionRecord",
    "Network",
    "SGDOptimizer",
    "AdagradOptimizer",
    "ShapeMismatchError",
    "SelectionStateError",
    "ConfigError",
]
