# kmaxnet/helpers/Backend.py
import numpy as np

VERBOSE_STARTUP = False  # set True to print the backend in use


class Backend:
    """Array backend shared by every layer (NumPy, double precision)."""
    def __init__(self, default_float=np.float64, default_index=np.int64):
        self.xp = np
        self.default_float = default_float
        self.default_index = default_index
        if VERBOSE_STARTUP:
            print(f"Using CPU backend (NumPy {np.__version__}, {np.dtype(default_float).name})")

    def ensure_array(self, x, dtype=None, copy=False):
        """
        Ensure 'x' is an ndarray of the backend.
        Accepts list/tuple/np arrays; returns xp.ndarray.
        """
        if isinstance(x, self.xp.ndarray):
            if dtype is not None and x.dtype != dtype:
                return x.astype(dtype, copy=True)
            return x.copy() if copy else x
        arr = self.xp.array(x, dtype=dtype) if copy else self.xp.asarray(x, dtype=dtype)
        return arr

    def astype_default(self, x):
        """Cast to default float dtype if needed."""
        if hasattr(x, "dtype") and x.dtype == self.default_float:
            return x
        return self.ensure_array(x, dtype=self.default_float)

    # -------- array creation --------
    def zeros(self, *args, **kwargs):
        kwargs.setdefault("dtype", self.default_float)
        return self.xp.zeros(*args, **kwargs)

    def index_array(self, shape, fill_value):
        """Integer array used for index bookkeeping (e.g. pooling origins)."""
        return self.xp.full(shape, fill_value, dtype=self.default_index)

    # -------- math / linalg (thin wrappers) --------
    def sqrt(self, x):      return self.xp.sqrt(x)
    def sum(self, x, axis=None, keepdims=False):  return self.xp.sum(x, axis=axis, keepdims=keepdims)
    def transpose(self, x, axes=None):            return self.xp.transpose(x, axes)
    def reshape(self, x, shape):                   return self.xp.reshape(x, shape)
    def flatten(self, x):                          return self.xp.ravel(x)
    def matmul(self, a, b):                        return self.xp.matmul(a, b)
    def arange(self, *args, **kwargs):             return self.xp.arange(*args, **kwargs)
    def argsort(self, x, axis=-1, stable=False):
        return self.xp.argsort(x, axis=axis, kind="stable" if stable else None)
    def sort(self, x, axis=-1):                    return self.xp.sort(x, axis=axis)
    def take_along_axis(self, x, idx, axis):       return self.xp.take_along_axis(x, idx, axis=axis)

    # -------- BLAS level-2 primitives --------
    def gemv(self, trans, a, x, y=None, alpha=1.0, beta=1.0):
        """
        y <- alpha * op(A) @ x + beta * y, op(A) = A or A.T (trans 'N' / 'T').
        A is a row-major (rows, cols) matrix. Writes into y in place when given.
        """
        op = a if trans == "N" else self.transpose(a)
        result = alpha * self.matmul(op, x)
        if y is None:
            return result
        if beta != 1.0:
            y *= beta
        y += result
        return y

    def ger(self, x, y, a, alpha=1.0):
        """A <- alpha * outer(x, y) + A, written in place."""
        a += alpha * self.xp.outer(x, y)
        return a

    # -------- randomness --------
    def default_rng(self, seed=None):
        """Layer-local generator; pass a seed for reproducible initialization."""
        return self.xp.random.default_rng(seed)

    def uniform(self, rng, low, high, shape):
        return rng.uniform(low, high, size=shape).astype(self.default_float, copy=False)

    # -------- delegate unknown attrs to xp --------
    def __getattr__(self, name):
        return getattr(self.xp, name)


# Global backend instance - can be overridden
backend = Backend()
