import kmax_predictions
from kmaxnet import Network


def test_demo_helpers_are_not_collected_as_tests():
    assert not [name for name in vars(kmax_predictions) if name.startswith("test")]


def test_demo_run_trains_a_network():
    model = kmax_predictions.run(k=1, feature_map_sz=2, embedding_sz=3, lr=0.1, epochs=1)
    assert isinstance(model, Network)
    assert model.get_config()[1]["input_length"] == 6
