"""A two-layer neural network for recognising handwritten MNIST digits, with a drawing web server."""

__version__ = "0.1.0"

__all__ = ["cli", "imaging", "mathutil", "mnist", "network", "server"]