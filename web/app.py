"""
Web Interface for Remote Captures
Thin HTTP wrapper around the capture pipeline.
"""

import io
import os
import sys
import threading
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from flask import Flask, jsonify, request, send_file
from core.capture_pipeline import CapturePipeline, CaptureRequest
from core.errors import CaptureError
from utils import config
from utils.viewport import parse_viewport

app = Flask(__name__)

# Replaced in tests with a pipeline built around a fake session
pipeline_factory = CapturePipeline

# One capture at a time: every pipeline supervises the same driver port
capture_lock = threading.Lock()


def build_capture_request(payload: dict) -> CaptureRequest:
    """Turn a JSON body into a CaptureRequest, applying the CLI defaults."""
    record = payload.get('record')
    if record is True:
        record = config.DEFAULT_RECORD_SECONDS
    elif record is False:
        record = None
    wait = payload.get('wait', config.DEFAULT_WAIT)
    if isinstance(wait, bool) or not isinstance(wait, (int, float)) or wait < 0:
        raise ValueError('wait must be a non-negative number of seconds')
    if record is not None and (not isinstance(record, int) or record < 0):
        raise ValueError('record must be a non-negative number of seconds')
    url = payload.get('url', config.DEFAULT_URL)
    if not isinstance(url, str):
        raise ValueError('url must be a string')
    script = payload.get('js')
    if script is not None and not isinstance(script, str):
        raise ValueError('js must be a string')
    return CaptureRequest(
        url=url,
        viewport=parse_viewport(payload.get('size', config.DEFAULT_SIZE)),
        wait=wait,
        script=script,
        record_seconds=record,
    )


@app.route('/health')
def health():
    return jsonify({'status': 'ok'})


@app.route('/capture', methods=['POST'])
def capture():
    """Capture a screenshot or recording and return the image bytes."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({'error': 'Expected a JSON object body.'}), 400
    try:
        capture_request = build_capture_request(payload)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    try:
        with capture_lock:
            result = pipeline_factory().capture(capture_request)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except CaptureError as e:
        return jsonify({'error': str(e), 'kind': type(e).__name__}), 500

    extension = 'gif' if result.media_type == 'image/gif' else 'png'
    return send_file(
        io.BytesIO(result.data),
        mimetype=result.media_type,
        download_name=f'weblook.{extension}',
    )


if __name__ == '__main__':
    port = int(os.environ.get("PORT", 5000))
    app.run(host='0.0.0.0', port=port)
