import numpy as np

from kmaxnet import AdagradOptimizer, FullyConnectedLayer, KMaxPooling, Network


def generate_spike_data(n, feature_map_sz, embedding_sz, rng):
    # Variable-length sequences; label 1 when a strong spike appears in map 0
    X, Y = [], []
    for _ in range(n):
        num_frames = int(rng.integers(2, 9))
        x = rng.normal(0.0, 0.3, size=(feature_map_sz, num_frames, embedding_sz))
        y = float(rng.random() < 0.5)
        if y:
            x[0, rng.integers(num_frames), :] += 2.0
        X.append(x.ravel())
        Y.append(y)
    return X, np.array(Y)


def run(k, feature_map_sz, embedding_sz, lr, epochs, seed=0):
    rng = np.random.default_rng(seed)
    X, Y = generate_spike_data(200, feature_map_sz, embedding_sz, rng)

    model = Network([
        KMaxPooling(k, feature_map_sz, embedding_sz),
        FullyConnectedLayer(1, k * feature_map_sz * embedding_sz, seed=seed),
    ])
    optimizer = AdagradOptimizer(model, lr=lr)

    for ep in range(1, epochs + 1):
        total = 0.0
        for x, y in zip(X, Y):
            out = model.forward(x).at(0)
            # squared loss, d/d(out) = out - y
            model.backward([out - y], y)
            optimizer.step()
            total += 0.5 * (out - y) ** 2
        if ep == 1 or ep % max(1, epochs // 5) == 0:
            print(f"Epoch {ep}/{epochs} - loss: {total / len(X):.4f}")

    preds = np.array([model.forward(x).at(0) > 0.5 for x in X])
    print(f"k-max pooling, k={k}:")
    print(f"Accuracy: {np.mean(preds == Y) * 100:.2f}%")
    return model


if __name__ == "__main__":
    model = run(k=2, feature_map_sz=2, embedding_sz=3, lr=0.1, epochs=20)
    model.verbose = 1
    model.save("kmax_model.npz")
    Network.load("kmax_model.npz", verbose=1)
