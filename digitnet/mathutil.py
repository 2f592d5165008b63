"""Activation, loss and encoding helpers used by the network."""

from __future__ import annotations

import numpy as np

_EPSILON = 1e-12


def sigmoid(z):
    """Element-wise logistic function 1 / (1 + exp(-z))."""
    z = np.asarray(z, dtype=np.float64)
    return 1.0 / (1.0 + np.exp(-z))


def sigmoid_derivative(z):
    """Derivative of the logistic function evaluated at ``z``."""
    s = sigmoid(z)
    return s * (1.0 - s)


def softmax(z):
    """Numerically stable softmax of a vector."""
    z = np.asarray(z, dtype=np.float64)
    exp_z = np.exp(z - z.max())
    return exp_z / exp_z.sum()


def cross_entropy_loss(predicted, actual):
    """Cross-entropy ``-sum(actual * log(predicted))`` with a small epsilon."""
    predicted = np.asarray(predicted, dtype=np.float64)
    actual = np.asarray(actual, dtype=np.float64)
    return float(-(actual * np.log(predicted + _EPSILON)).sum())


def one_hot(label, num_classes=10):
    """Return a vector of ``num_classes`` zeros with a one at ``label``."""
    if not 0 <= label < num_classes:
        raise ValueError(f"label {label} out of range for {num_classes} classes")
    vec = np.zeros(num_classes, dtype=np.float64)
    vec[label] = 1.0
    return vec


def argmax(vec):
    """Index of the largest element (the first one on ties)."""
    return int(np.argmax(np.asarray(vec)))