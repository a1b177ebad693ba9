from ..helpers.Backend import backend


class AdagradOptimizer:
    """
    Adagrad on weights, plain SGD on biases.

    Squared weight gradients are summed into each layer's weight_accum tensor,
    so the history lives with the layer and is saved along with it.
    """

    def __init__(self, layers, lr=1e-2, eps=1e-8):
        # accepts a Network or a plain list of layers
        if hasattr(layers, "layers"):
            layers = layers.layers
        self.layers = [L for L in layers if L.has_params]
        self.lr = lr
        self.eps = eps

    def step(self):
        lr = self.lr
        for L in self.layers:
            w = L.get_params().d
            g = L.get_param_grads().d
            accum = L.get_weight_accum().d
            accum += g * g
            w -= lr * g / (backend.sqrt(accum) + self.eps)

            b = L.get_bias_params().d
            b -= lr * L.get_bias_grads().d

    def zero_grad(self):
        for L in self.layers:
            L.get_param_grads().constant(0.0)
            L.get_bias_grads().constant(0.0)
