import struct

import numpy as np
import pytest

from digitnet.network import EpochStats, NeuralNetwork


def _toy_data():
    x = np.eye(4)
    y = np.array([[1, 0], [0, 1], [1, 0], [0, 1]], dtype=float)
    return x, y


def test_init_shapes_and_zero_biases():
    net = NeuralNetwork(5, 3, 2, seed=1)
    assert net.w1.shape == (3, 5)
    assert net.w2.shape == (2, 3)
    assert np.all(net.b1 == 0)
    assert np.all(net.b2 == 0)


def test_seed_is_deterministic():
    a = NeuralNetwork(6, 4, 3, seed=42)
    b = NeuralNetwork(6, 4, 3, seed=42)
    assert np.array_equal(a.w1, b.w1)
    assert np.array_equal(a.w2, b.w2)


def test_xavier_scale():
    net = NeuralNetwork(784, 128, 10, seed=0)
    assert net.w1.std() == pytest.approx(np.sqrt(1 / 784), rel=0.05)
    assert net.w2.std() == pytest.approx(np.sqrt(1 / 128), rel=0.2)


def test_forward_is_distribution():
    net = NeuralNetwork(8, 5, 4, seed=3)
    out = net.forward(np.linspace(0, 1, 8))
    assert out.shape == (4,)
    assert out.sum() == pytest.approx(1.0)
    assert np.all(out > 0)


def test_predict_matches_forward_argmax():
    net = NeuralNetwork(8, 5, 4, seed=3)
    x = np.linspace(1, 0, 8)
    assert net.predict(x) == int(np.argmax(net.forward(x)))
    assert 0 <= net.predict(x) < 4


def test_train_learns_toy_problem():
    x, y = _toy_data()
    net = NeuralNetwork(4, 8, 2, seed=0)
    history = net.train(x, y, 200, 0.5)
    assert len(history) == 200
    assert [s.epoch for s in history[:3]] == [1, 2, 3]
    assert history[-1].loss < history[0].loss
    assert history[-1].accuracy == 100.0
    assert [net.predict(row) for row in x] == [0, 1, 0, 1]


def test_train_returns_epoch_stats():
    x, y = _toy_data()
    history = NeuralNetwork(4, 3, 2, seed=0).train(x, y, 2, 0.1)
    assert all(isinstance(s, EpochStats) for s in history)
    assert all(0.0 <= s.accuracy <= 100.0 and s.loss > 0 for s in history)


def test_train_length_mismatch():
    x, y = _toy_data()
    with pytest.raises(ValueError):
        NeuralNetwork(4, 3, 2, seed=0).train(x, y[:3], 1, 0.1)


def test_train_empty():
    with pytest.raises(ValueError):
        NeuralNetwork(4, 3, 2, seed=0).train(np.empty((0, 4)), np.empty((0, 2)), 1, 0.1)


def test_save_load_round_trip(tmp_path):
    path = tmp_path / "params.bin"
    src = NeuralNetwork(6, 4, 3, seed=7)
    src.b1 += 0.25
    src.save_parameters(path)
    dst = NeuralNetwork(6, 4, 3, seed=99)
    dst.load_parameters(path)
    assert np.array_equal(dst.w1, src.w1)
    assert np.array_equal(dst.b1, src.b1)
    assert np.array_equal(dst.w2, src.w2)
    assert np.array_equal(dst.b2, src.b2)
    x = np.linspace(0, 1, 6)
    assert np.allclose(dst.forward(x), src.forward(x))


def test_load_adopts_file_shapes(tmp_path):
    path = tmp_path / "params.bin"
    NeuralNetwork(6, 4, 3, seed=7).save_parameters(path)
    net = NeuralNetwork(2, 2, 2, seed=0)
    net.load_parameters(path)
    assert (net.input_size, net.hidden_size, net.output_size) == (6, 4, 3)


def test_saved_layout_is_column_major(tmp_path):
    path = tmp_path / "params.bin"
    net = NeuralNetwork(3, 2, 2, seed=5)
    net.save_parameters(path)
    data = path.read_bytes()
    assert struct.unpack_from("<ii", data, 0) == (2, 3)
    first = struct.unpack_from("<3d", data, 8)
    assert first == (net.w1[0, 0], net.w1[1, 0], net.w1[0, 1])


def test_load_truncated_file(tmp_path):
    path = tmp_path / "params.bin"
    NeuralNetwork(3, 2, 2, seed=5).save_parameters(path)
    path.write_bytes(path.read_bytes()[:-4])
    with pytest.raises(ValueError):
        NeuralNetwork(3, 2, 2).load_parameters(path)


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        NeuralNetwork(3, 2, 2).load_parameters(tmp_path / "absent.bin")