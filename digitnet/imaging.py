"""Turn a base64-encoded drawing into a 28x28 MNIST-style input vector."""

from __future__ import annotations

import base64
import binascii
import io
import logging

import numpy as np
from PIL import Image
from scipy import ndimage

logger = logging.getLogger(__name__)

IMAGE_SIDE = 28
MARGIN = 10
_BLANK_LOW = 5
_BLANK_HIGH = 250
_THRESHOLD = 128
_MIN_VARIANCE = 0.01


class ImageProcessingError(ValueError):
    """Raised when the submitted image cannot be decoded or processed."""


class BlankImageError(ImageProcessingError):
    """Raised when the image holds no usable drawing."""


def strip_data_url(data):
    """Drop a ``data:...;base64,`` prefix if there is one."""
    _, sep, rest = data.partition(",")
    return rest if sep else data


def decode_base64(data):
    """Decode base64 text to bytes; raise ImageProcessingError on failure."""
    try:
        raw = base64.b64decode(data)
    except (binascii.Error, ValueError) as exc:
        raise ImageProcessingError(f"base64 decoding failed: {exc}") from exc
    if not raw:
        raise ImageProcessingError("base64 decoding produced no data")
    return raw


def _decode_grayscale(raw):
    try:
        with Image.open(io.BytesIO(raw)) as image:
            return np.asarray(image.convert("L"), dtype=np.uint8)
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise ImageProcessingError(f"image decoding failed: {exc}") from exc


def _largest_component_box(image):
    """Bounding box (x, y, w, h) of the largest outer shape of dark pixels."""
    foreground = ndimage.binary_fill_holes(image <= _THRESHOLD)
    labels, count = ndimage.label(foreground, structure=np.ones((3, 3), dtype=bool))
    if count == 0:
        raise BlankImageError("no content found in image")

    def area(box):
        return (box[0].stop - box[0].start) * (box[1].stop - box[1].start)

    rows, cols = max(ndimage.find_objects(labels), key=area)
    return cols.start, rows.start, cols.stop - cols.start, rows.stop - rows.start


def png_base64_to_vector(data):
    """Return a 784-element vector in [0, 1], white digit on black like MNIST."""
    image = _decode_grayscale(decode_base64(data))
    height, width = image.shape
    logger.debug("original image size: %dx%d", height, width)

    mean = float(image.mean())
    logger.debug("original image mean: %f", mean)
    if mean > _BLANK_HIGH or mean < _BLANK_LOW:
        raise BlankImageError("image is blank")

    x, y, w, h = _largest_component_box(image)
    logger.debug("content box: %d,%d %dx%d", x, y, w, h)

    x = max(0, x - MARGIN)
    y = max(0, y - MARGIN)
    w = min(width - x, w + 2 * MARGIN)
    h = min(height - y, h + 2 * MARGIN)
    cropped = image[y : y + h, x : x + w]

    side = max(h, w)
    square = np.full((side, side), 255, dtype=np.uint8)
    off_x = (side - w) // 2
    off_y = (side - h) // 2
    square[off_y : off_y + h, off_x : off_x + w] = cropped

    resized = Image.fromarray(square).resize((IMAGE_SIDE, IMAGE_SIDE), Image.Resampling.BOX)
    pixels = (255 - np.asarray(resized, dtype=np.uint8)).astype(np.float64) / 255.0
    vector = pixels.reshape(IMAGE_SIDE * IMAGE_SIDE)

    final_mean = float(vector.mean())
    variance = float(((vector - final_mean) ** 2).mean())
    logger.debug(
        "final image mean %f min %f max %f variance %f",
        final_mean,
        float(vector.min()),
        float(vector.max()),
        variance,
    )
    if variance < _MIN_VARIANCE:
        raise BlankImageError("image varies too little to be a digit")
    return vector