"""A small HTTP server for drawing a digit and having the network recognise it."""

from __future__ import annotations

import json
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

from digitnet.imaging import BlankImageError, ImageProcessingError, png_base64_to_vector, strip_data_url
from digitnet.network import NeuralNetwork

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 18080
MODEL_CANDIDATES = (
    "../output/model_params.bin",
    "output/model_params.bin",
    "./model_params.bin",
)
PROCESSING_FAILED = "Image processing failed"
BLANK_IMAGE = "Please draw a clear digit before recognising"

INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>Digit recognition</title>
<style>
body { font-family: sans-serif; text-align: center; padding: 20px; }
#pad { border: 2px solid #333; background: #fff; cursor: crosshair; }
button { margin: 10px; padding: 10px 20px; font-size: 16px; }
#answer { font-size: 24px; font-weight: bold; color: #0a6; margin: 20px; }
</style>
</head>
<body>
<h1>Digit recognition</h1>
<p>Draw a digit (0-9) below, then press Recognise.</p>
<canvas id="pad" width="280" height="280"></canvas><br>
<button id="clear">Clear</button>
<button id="go">Recognise</button>
<div id="answer">Draw a digit on the canvas</div>
<script>
const pad = document.getElementById('pad');
const g = pad.getContext('2d');
const answer = document.getElementById('answer');
let down = false;
function blank() { g.fillStyle = '#fff'; g.fillRect(0, 0, pad.width, pad.height); }
blank();
pad.addEventListener('mousedown', e => {
  down = true;
  g.beginPath();
  g.moveTo(e.offsetX, e.offsetY);
  g.fillStyle = '#000';
  g.fillRect(e.offsetX - 1, e.offsetY - 1, 2, 2);
});
pad.addEventListener('mouseup', () => { down = false; });
pad.addEventListener('mousemove', e => {
  if (!down) return;
  g.lineWidth = 15;
  g.lineCap = 'round';
  g.strokeStyle = '#000';
  g.lineTo(e.offsetX, e.offsetY);
  g.stroke();
  g.beginPath();
  g.moveTo(e.offsetX, e.offsetY);
});
document.getElementById('clear').addEventListener('click', () => {
  blank();
  answer.innerText = 'Draw a digit on the canvas';
});
document.getElementById('go').addEventListener('click', async () => {
  answer.innerText = 'Recognising...';
  try {
    const reply = await fetch('/predict', {
      method: 'POST',
      headers: { 'Content-Type': 'application/json' },
      body: JSON.stringify({ image: pad.toDataURL('image/png') })
    });
    const data = await reply.json().catch(() => ({}));
    if (!reply.ok) throw data;
    answer.innerText = 'Result: ' + data.result;
  } catch (err) {
    answer.innerText = (err && err.error) ? err.error : 'Recognition failed, please try again';
  }
});
</script>
</body>
</html>
"""


def find_model_path(candidates=MODEL_CANDIDATES):
    """Return the first existing model file among ``candidates``."""
    for candidate in candidates:
        path = Path(candidate)
        if path.is_file():
            return path
    raise FileNotFoundError("model parameter file not found; train the model first")


def handle_predict(net, body):
    """Answer a prediction request body; return ``(status, payload or None)``."""
    try:
        payload = json.loads(body)
    except (ValueError, TypeError):
        return 400, None
    image = payload.get("image") if isinstance(payload, dict) else None
    if not isinstance(image, str):
        return 400, None
    try:
        vector = png_base64_to_vector(strip_data_url(image))
    except BlankImageError:
        return 400, {"error": BLANK_IMAGE}
    except ImageProcessingError:
        return 400, {"error": PROCESSING_FAILED}
    prediction = net.predict(vector)
    logger.info("network prediction: %d", prediction)
    return 200, {"result": prediction}


def make_handler(net):
    """Build a request handler class that serves the page and predictions."""

    class DigitHandler(BaseHTTPRequestHandler):
        def _send(self, status, body, content_type):
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def do_GET(self):
            if self.path == "/":
                self._send(200, INDEX_HTML.encode("utf-8"), "text/html; charset=utf-8")
            else:
                self._send(404, b"", "text/plain")

        def do_POST(self):
            if self.path != "/predict":
                self._send(404, b"", "text/plain")
                return
            length = int(self.headers.get("Content-Length") or 0)
            status, payload = handle_predict(net, self.rfile.read(length))
            if payload is None:
                self._send(status, b"", "text/plain")
            else:
                self._send(status, json.dumps(payload).encode("utf-8"), "application/json")

        def log_message(self, format, *args):
            logger.debug("%s - %s", self.address_string(), format % args)

    return DigitHandler


def run_server(host=DEFAULT_HOST, port=DEFAULT_PORT):
    """Load the trained model and serve the drawing page until interrupted."""
    model_path = find_model_path()
    print(f"Loading model parameters: {model_path}")
    net = NeuralNetwork(784, 128, 10)
    net.load_parameters(model_path)
    with ThreadingHTTPServer((host, port), make_handler(net)) as server:
        print(f"Open http://{host}:{port}/ in a browser to try digit recognition")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass