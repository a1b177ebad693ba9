# kmaxnet/helpers/Errors.py


class ShapeMismatchError(ValueError):
    """A tensor does not match the dimensions a layer was configured with."""

    def __init__(self, what, expected, got):
        self.what = what
        self.expected = expected
        self.got = got
        super().__init__(f"{what}: expected {expected}, got {got}")


class SelectionStateError(RuntimeError):
    """backward() was called without a pending forward() to pair with."""


class ConfigError(ValueError):
    """Layer or network configuration cannot be turned into a working layer."""
