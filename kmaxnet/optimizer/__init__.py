from .SGDOptimizer import SGDOptimizer
from .AdagradOptimizer import AdagradOptimizer

__all__ = ["SGDOptimizer", "AdagradOptimizer"]
