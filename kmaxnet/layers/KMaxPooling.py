from .Layer import Layer
from ..helpers.Backend import backend
from ..helpers.Errors import ConfigError, SelectionStateError, ShapeMismatchError
from ..helpers.Tensor import Tensor


class SelectionRecord:
    """
    Origin of every pooled output slot for one forward pass.

    origin[i] is the flat input index copied into output slot i, or UNSET when
    the slice had fewer than k frames and slot i was never filled.
    """

    UNSET = -1

    def __init__(self, feature_map_sz, k, embedding_sz, num_frames):
        self.num_frames = num_frames
        self.origin = backend.index_array((feature_map_sz, k, embedding_sz), self.UNSET)

    @property
    def filled(self):
        return self.origin != self.UNSET

    @property
    def filled_count(self):
        return int(backend.sum(self.filled))

    def origin_at(self, i):
        idx = int(self.origin.flat[i])
        return None if idx == self.UNSET else idx


class KMaxPooling(Layer):
    """
    K-max pooling over time (Kalchbrenner & Blunsom).

    Input is (feature_map_sz, num_frames, embedding_sz), flattened; num_frames
    may change from one example to the next. For each (feature map, embedding
    coordinate) the k largest values are kept in their original temporal
    order, giving a (feature_map_sz, k, embedding_sz) output. With k == 1
    this is plain max-pooling over time.

    Ties on value go to the lowest temporal index.
    """

    def __init__(self, k, feature_map_sz, embedding_sz):
        self.k = self._positive_int("k", k)
        self.feature_map_sz = self._positive_int("feature_map_sz", feature_map_sz)
        self.embedding_sz = self._positive_int("embedding_sz", embedding_sz)
        self.last_selection = None

    def forward(self, x):
        x = Tensor.wrap(x)
        F, E, k = self.feature_map_sz, self.embedding_sz, self.k
        if x.size % (F * E) != 0:
            raise ShapeMismatchError("KMaxPooling input length", f"a multiple of {F * E}", x.size)
        num_frames = x.size // E // F
        n = min(num_frames, k)

        output = Tensor(F, k, E)
        selection = SelectionRecord(F, k, E, num_frames)

        if n > 0:
            # flat input index of every element, same layout as x
            addr = backend.reshape(backend.arange(x.size), (F, num_frames, E))
            values = backend.reshape(x.d, (F, num_frames, E))

            # stable sort on negated values: largest first, earliest frame wins ties
            top = backend.argsort(-values, axis=1, stable=True)[:, :n, :]
            # back to ascending temporal order among the survivors
            top = backend.sort(top, axis=1)

            out = output.view()
            out[:, :n, :] = backend.take_along_axis(values, top, axis=1)
            selection.origin[:, :n, :] = backend.take_along_axis(addr, top, axis=1)

        self.last_selection = selection
        return output

    def backward(self, chain_grad, y=0.0):
        selection = self.last_selection
        if selection is None:
            raise SelectionStateError("Must call forward() before backward()")
        chain_grad = Tensor.wrap(chain_grad)
        F, E = self.feature_map_sz, self.embedding_sz
        expected = F * self.k * E
        if chain_grad.size != expected:
            raise ShapeMismatchError("KMaxPooling chain gradient length", expected, chain_grad.size)

        grads = Tensor(F, selection.num_frames, E)
        filled = backend.flatten(selection.filled)
        origin = backend.flatten(selection.origin)
        # each output came from exactly one input: route it back, unfilled slots stay zero
        grads.d[origin[filled]] = chain_grad.d[filled]

        self.last_selection = None
        return grads

    # -------- configuration --------
    def get_config(self):
        return {
            "type": type(self).__name__,
            "k": self.k,
            "feature_map_sz": self.feature_map_sz,
            "embedding_sz": self.embedding_sz,
        }

    @classmethod
    def _build(cls, config, params):
        if params:
            raise ConfigError(f"KMaxPooling has no trainable params, got {sorted(params)}")
        cls._require(config, "k", "feature_map_sz", "embedding_sz")
        return cls(config["k"], config["feature_map_sz"], config["embedding_sz"])
