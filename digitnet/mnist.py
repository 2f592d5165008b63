"""Readers for the MNIST IDX image and label files."""

from __future__ import annotations

import struct
from pathlib import Path

import numpy as np

IMAGE_MAGIC = 2051
LABEL_MAGIC = 2049


class MnistFormatError(ValueError):
    """Raised when a file is not a valid MNIST IDX file."""


def _read_header(data, count, path):
    size = 4 * count
    if len(data) < size:
        raise MnistFormatError(f"{path}: file too short for header")
    return struct.unpack(f">{count}I", data[:size]), size


def load_mnist_images(path):
    """Load an IDX3 image file as an (n, rows*cols) array scaled to [0, 1]."""
    data = Path(path).read_bytes()
    (magic, num_images, rows, cols), offset = _read_header(data, 4, path)
    if magic != IMAGE_MAGIC:
        raise MnistFormatError(f"{path}: invalid MNIST image magic number {magic}")
    size = rows * cols
    needed = num_images * size
    if len(data) - offset < needed:
        raise MnistFormatError(f"{path}: expected {needed} pixel bytes")
    pixels = np.frombuffer(data, dtype=np.uint8, count=needed, offset=offset)
    return pixels.reshape(num_images, size).astype(np.float64) / 255.0


def load_mnist_labels(path, num_classes=10):
    """Load an IDX1 label file as an (n, num_classes) one-hot array."""
    data = Path(path).read_bytes()
    (magic, num_labels), offset = _read_header(data, 2, path)
    if magic != LABEL_MAGIC:
        raise MnistFormatError(f"{path}: invalid MNIST label magic number {magic}")
    if len(data) - offset < num_labels:
        raise MnistFormatError(f"{path}: expected {num_labels} label bytes")
    labels = np.frombuffer(data, dtype=np.uint8, count=num_labels, offset=offset)
    if labels.size and int(labels.max()) >= num_classes:
        raise MnistFormatError(
            f"{path}: label {int(labels.max())} out of range for {num_classes} classes"
        )
    return np.eye(num_classes, dtype=np.float64)[labels]