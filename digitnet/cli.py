"""Command line entry point: train, evaluate, or serve the digit network."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from digitnet.mathutil import argmax
from digitnet.mnist import MnistFormatError, load_mnist_images, load_mnist_labels
from digitnet.network import NeuralNetwork
from digitnet.server import run_server

DEFAULT_DATA_DIR = Path("../data")
DEFAULT_MODEL_PATH = Path("../output/model_params.bin")
INPUT_SIZE = 784
HIDDEN_SIZE = 128
OUTPUT_SIZE = 10
EPOCHS = 10
LEARNING_RATE = 0.1


def _load(image_path, label_path):
    print(f"Opening images: {image_path}")
    print(f"Opening labels: {label_path}")
    images = load_mnist_images(image_path)
    labels = load_mnist_labels(label_path, OUTPUT_SIZE)
    print(f"Loaded {len(images)} images and {len(labels)} labels")
    return images, labels


def train_model(data_dir=DEFAULT_DATA_DIR, output_path=DEFAULT_MODEL_PATH):
    """Train on the MNIST training set and save the parameters; return the history."""
    data_dir = Path(data_dir)
    images, labels = _load(
        data_dir / "train-images-idx3-ubyte", data_dir / "train-labels-idx1-ubyte"
    )
    net = NeuralNetwork(INPUT_SIZE, HIDDEN_SIZE, OUTPUT_SIZE)
    history = net.train(images, labels, EPOCHS, LEARNING_RATE)
    net.save_parameters(output_path)
    print("Model parameters saved")
    return history


def test_model(data_dir=DEFAULT_DATA_DIR, model_path=DEFAULT_MODEL_PATH):
    """Evaluate saved parameters on the MNIST test set; return accuracy in percent."""
    data_dir = Path(data_dir)
    images, labels = _load(
        data_dir / "t10k-images-idx3-ubyte", data_dir / "t10k-labels-idx1-ubyte"
    )
    if len(images) == 0:
        raise ValueError("test set is empty")
    net = NeuralNetwork(INPUT_SIZE, HIDDEN_SIZE, OUTPUT_SIZE)
    net.load_parameters(model_path)
    correct = sum(net.predict(image) == argmax(label) for image, label in zip(images, labels))
    total = len(images)
    accuracy = 100.0 * correct / total
    print(f"Test accuracy: {accuracy}% ({correct}/{total})")
    return accuracy


def main(argv=None):
    """Run ``train``, ``try`` (web server) or, by default, evaluation."""
    args = sys.argv[1:] if argv is None else list(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    command = args[0] if args else None
    try:
        if command == "train":
            train_model()
        elif command == "try":
            run_server()
        else:
            test_model()
    except (OSError, MnistFormatError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())