# digitnet

digitnet is a small fully connected neural network (784 inputs, 128 sigmoid
hidden units, 10 softmax outputs) trained with per-sample stochastic gradient
descent on the MNIST handwritten digit set. A built-in web page lets you draw
a digit in a browser and have the trained network read it.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Data

The command reads the four MNIST files in their uncompressed IDX format from
`../data`, relative to the directory you run it in:

```
../data/train-images-idx3-ubyte
../data/train-labels-idx1-ubyte
../data/t10k-images-idx3-ubyte
../data/t10k-labels-idx1-ubyte
```

Trained parameters are written to and read from
`../output/model_params.bin`. The `../output` directory must already exist.

## Command line

The `digitnet` command takes one mode:

```
digitnet train   # train for 10 epochs at learning rate 0.1 and save the parameters
digitnet         # load the saved parameters and report accuracy on the test set
digitnet try     # serve the drawing page at http://127.0.0.1:18080/
```

Training logs the mean cross-entropy loss and the accuracy of every epoch,
then saves the weights and biases. Testing prints the share of test images
the network classifies correctly. A missing or malformed file is reported on
standard error and the command exits with status 1.

The `try` mode looks for the model file at `../output/model_params.bin`,
`output/model_params.bin` and `./model_params.bin`, in that order. `GET /`
returns the drawing page. `POST /predict` takes a JSON body
`{"image": "<base64 PNG, optionally as a data: URL>"}` and answers
`{"result": <digit>}`. The image is cropped to the largest dark shape with a
10-pixel margin, padded to a white square, scaled to 28×28, inverted to
match MNIST and scaled to [0, 1]. Errors are answered with status 400:
`{"error": "Please draw a clear digit before recognising"}` for a blank or
near-uniform drawing, `{"error": "Image processing failed"}` when the data
cannot be decoded, and an empty body when the request is not JSON with a
string `image` field. Other paths get 404.

## Library use

```python
from digitnet.mnist import load_mnist_images, load_mnist_labels
from digitnet.network import NeuralNetwork

images = load_mnist_images("data/train-images-idx3-ubyte")   # (n, 784) floats in [0, 1]
labels = load_mnist_labels("data/train-labels-idx1-ubyte", 10)  # (n, 10) one-hot

net = NeuralNetwork(784, 128, 10, seed=0)
for stats in net.train(images, labels, 1, 0.1):
    print(stats.epoch, stats.loss, stats.accuracy)

net.save_parameters("model_params.bin")
print(net.predict(images[0]))
```

- `digitnet.mnist` raises `MnistFormatError` for a wrong magic number, a
  truncated file or a label outside the class range.
- `NeuralNetwork.train` returns a list of `EpochStats` (epoch, mean loss,
  accuracy in percent). `save_parameters` writes W1, b1, W2 and b2 as
  little-endian int32 dimensions followed by column-major doubles;
  `load_parameters` reads that format back and adopts its layer sizes.
- `digitnet.mathutil` provides `sigmoid`, `sigmoid_derivative`, `softmax`,
  `cross_entropy_loss`, `one_hot` and `argmax`.
- `digitnet.imaging.png_base64_to_vector` turns base64 image data into a
  784-element input vector. It raises `ImageProcessingError` when the data
  cannot be decoded and `BlankImageError` (a subclass) when nothing usable is
  drawn. `strip_data_url` and `decode_base64` are the helpers it builds on.
- `digitnet.server` offers `find_model_path`, `handle_predict`,
  `make_handler` and `run_server(host, port)`.