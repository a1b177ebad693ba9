# kmaxnet/helpers/Tensor.py
from math import prod

from .Backend import backend
from .Errors import ShapeMismatchError


class Tensor:
    """
    Dense flat float buffer with a logical shape of 1 to 3 dims.

    Element order is row-major over `dims`. The buffer `d` is always 1-D and
    contiguous; `view()` gives the shaped array sharing the same memory.
    """

    def __init__(self, *dims, data=None):
        if not 1 <= len(dims) <= 3:
            raise ShapeMismatchError("tensor rank", "1 to 3 dims", len(dims))
        dims = tuple(int(n) for n in dims)
        if any(n < 0 for n in dims):
            raise ShapeMismatchError("tensor dims", "non-negative sizes", dims)
        self.dims = dims
        size = prod(dims)
        if data is None:
            self.d = backend.zeros(size)
        else:
            # always a private copy of the caller's data
            d = backend.flatten(backend.ensure_array(data, dtype=backend.default_float, copy=True))
            if d.size != size:
                raise ShapeMismatchError(f"buffer for dims {dims}", size, d.size)
            self.d = d

    @classmethod
    def wrap(cls, x):
        """Tensor as-is, or a 1-D Tensor copied from an array-like."""
        if isinstance(x, Tensor):
            return x
        arr = backend.ensure_array(x)
        return cls(arr.size, data=arr)

    # -------- element access --------
    @property
    def size(self):
        return self.d.size

    def __len__(self):
        return self.d.size

    def at(self, i):
        return float(self.d[i])

    def set(self, i, v):
        self.d[i] = v

    def constant(self, v):
        self.d.fill(v)
        return self

    # -------- views / copies --------
    def view(self):
        return backend.reshape(self.d, self.dims)

    def to_numpy(self):
        return self.view().copy()

    def copy(self):
        return Tensor(*self.dims, data=self.d)

    def zeros_like(self):
        return Tensor(*self.dims)

    def __repr__(self):
        return f"Tensor(dims={self.dims})"
