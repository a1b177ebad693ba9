from ..helpers.Backend import backend


class SGDOptimizer:
    """Online SGD: one update per example from that example's gradients."""

    def __init__(self, params, lr=1e-2, weight_decay=0.0, clip=None):
        # accepts a Network (anything with .parameters()) or a list of [p, g]
        if hasattr(params, "parameters"):
            params = params.parameters()
        self.params = [(p, g) for p, g in params]
        self.lr = lr
        self.wd = weight_decay
        self.clip = clip  # elementwise bound on the update direction

    def step(self):
        for p, g in self.params:
            update = g + self.wd * p if self.wd != 0.0 else g  # L2 weight decay
            if self.clip is not None:
                update = backend.clip(update, -self.clip, self.clip)
            p -= self.lr * update

    def zero_grad(self):
        for _, g in self.params:
            g[...] = 0.0
