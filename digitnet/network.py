"""A two-layer fully connected network trained with per-sample SGD."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from digitnet.mathutil import argmax, cross_entropy_loss, sigmoid, sigmoid_derivative, softmax

logger = logging.getLogger(__name__)

_INT = struct.Struct("<i")


@dataclass(frozen=True)
class EpochStats:
    """Mean loss and accuracy (in percent) over one training epoch."""

    epoch: int
    loss: float
    accuracy: float


class NeuralNetwork:
    """Input -> sigmoid hidden layer -> softmax output."""

    def __init__(self, input_size, hidden_size, output_size, seed=None):
        self.input_size = input_size
        self.hidden_size = hidden_size
        self.output_size = output_size
        rng = np.random.default_rng(seed)
        self.w1 = rng.standard_normal((hidden_size, input_size)) * np.sqrt(1.0 / input_size)
        self.b1 = np.zeros(hidden_size)
        self.w2 = rng.standard_normal((output_size, hidden_size)) * np.sqrt(1.0 / hidden_size)
        self.b2 = np.zeros(output_size)

    def forward(self, x):
        """Return the output class probabilities for one input vector."""
        a1 = sigmoid(self.w1 @ np.asarray(x, dtype=np.float64) + self.b1)
        return softmax(self.w2 @ a1 + self.b2)

    def predict(self, x):
        """Return the index of the most probable class."""
        return argmax(self.forward(x))

    def train(self, x_train, y_train, epochs, learning_rate):
        """Train with one gradient step per sample; return per-epoch stats."""
        x_train = np.asarray(x_train, dtype=np.float64)
        y_train = np.asarray(y_train, dtype=np.float64)
        if len(x_train) != len(y_train):
            raise ValueError("x_train and y_train differ in length")
        n_samples = len(x_train)
        if n_samples == 0:
            raise ValueError("training set is empty")

        history = []
        for epoch in range(1, epochs + 1):
            total_loss = 0.0
            correct = 0
            for x, y in zip(x_train, y_train):
                z1 = self.w1 @ x + self.b1
                a1 = sigmoid(z1)
                a2 = softmax(self.w2 @ a1 + self.b2)

                total_loss += cross_entropy_loss(a2, y)
                if argmax(a2) == argmax(y):
                    correct += 1

                dz2 = a2 - y
                dz1 = (self.w2.T @ dz2) * sigmoid_derivative(z1)

                self.w2 -= learning_rate * np.outer(dz2, a1)
                self.b2 -= learning_rate * dz2
                self.w1 -= learning_rate * np.outer(dz1, x)
                self.b1 -= learning_rate * dz1

            stats = EpochStats(epoch, total_loss / n_samples, 100.0 * correct / n_samples)
            logger.info(
                "Epoch %d | loss: %.4f | accuracy: %.4f%%", stats.epoch, stats.loss, stats.accuracy
            )
            history.append(stats)
        return history

    def save_parameters(self, path):
        """Write W1, b1, W2, b2 as int32 dimensions followed by column-major doubles."""
        with Path(path).open("wb") as out:
            for matrix, vector in ((self.w1, self.b1), (self.w2, self.b2)):
                rows, cols = matrix.shape
                out.write(_INT.pack(rows) + _INT.pack(cols))
                out.write(matrix.astype("<f8").tobytes(order="F"))
                out.write(_INT.pack(vector.size))
                out.write(vector.astype("<f8").tobytes())

    def load_parameters(self, path):
        """Read parameters written by :meth:`save_parameters`."""
        data = Path(path).read_bytes()
        reader = _Reader(data)
        w1 = reader.matrix()
        b1 = reader.vector()
        w2 = reader.matrix()
        b2 = reader.vector()
        self.w1, self.b1, self.w2, self.b2 = w1, b1, w2, b2
        self.hidden_size, self.input_size = w1.shape
        self.output_size = w2.shape[0]


class _Reader:
    def __init__(self, data):
        self._data = data
        self._offset = 0

    def _int(self):
        try:
            (value,) = _INT.unpack_from(self._data, self._offset)
        except struct.error as exc:
            raise ValueError("parameter file is truncated") from exc
        self._offset += _INT.size
        if value < 0:
            raise ValueError(f"invalid dimension {value} in parameter file")
        return value

    def _doubles(self, count):
        size = 8 * count
        if len(self._data) - self._offset < size:
            raise ValueError("parameter file is truncated")
        values = np.frombuffer(self._data, dtype="<f8", count=count, offset=self._offset)
        self._offset += size
        return values.astype(np.float64)

    def matrix(self):
        rows = self._int()
        cols = self._int()
        return self._doubles(rows * cols).reshape((rows, cols), order="F").copy()

    def vector(self):
        return self._doubles(self._int())