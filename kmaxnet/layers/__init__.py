from .Layer import Layer
from .FullyConnectedLayer import FullyConnectedLayer
from .KMaxPooling import KMaxPooling, SelectionRecord

# type name -> class, used by Layer.from_config
LAYER_TYPES = {
    "FullyConnectedLayer": FullyConnectedLayer,
    "KMaxPooling": KMaxPooling,
}

__all__ = [
    "Layer",
    "FullyConnectedLayer",
    "KMaxPooling",
    "SelectionRecord",
    "LAYER_TYPES",
]
