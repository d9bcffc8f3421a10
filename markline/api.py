#!/usr/bin/env python3
"""
Flask REST API for markline.

Exposes the plugin manager to an editor front end: one endpoint transforms a
markdown text with the loaded plugins and returns the output together with
every line function error and log effect message.
"""

from flask import Flask, request, jsonify
from flask_cors import CORS
import sys
import logging
import traceback
from datetime import datetime, timezone

from markline import __version__
from markline.plugins.errors import ManagerBusyError
from markline.plugins.loader import create_manager
from markline.utils.config import config
from markline.utils.render_output import RenderOutput

# Create Flask app
app = Flask(__name__)

# Configure logging
handlers = [logging.StreamHandler(sys.stderr)]
if config.get_log_file():
    handlers.append(logging.FileHandler(config.get_log_file()))

logging.basicConfig(
    level=logging.DEBUG if config.is_debug() else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=handlers
)
logger = logging.getLogger(__name__)

logger.info("=" * 80)
logger.info("markline API starting...")
logger.info(f"Plugins file: {config.get_plugins_file() or 'not set'}")
logger.info(f"CORS Origins: {', '.join(config.get_cors_origins())}")
logger.info("=" * 80)

CORS(app,
     origins=config.get_cors_origins(),
     methods=['GET', 'POST', 'OPTIONS'],
     allow_headers=['Content-Type'])

# Plugin manager (lazy initialization on first request)
manager = None


def timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def get_manager():
    """Get or initialize the plugin manager."""
    global manager
    if manager is None:
        try:
            logger.info("Initializing plugin manager...")
            manager = create_manager()
            logger.info(f"Plugin manager initialized with {len(manager.plugins)} plugin(s)")
        except Exception as e:
            logger.error(f"Failed to initialize plugin manager: {e}")
            logger.error(traceback.format_exc())
            raise
    return manager


@app.route('/health', methods=['GET'])
def health():
    """Health check endpoint."""
    logger.debug("Health check requested")

    try:
        plugin_count = len(get_manager().plugins)
        manager_status = 'ok'
    except Exception as e:
        logger.error(f"Plugin manager not healthy: {e}")
        plugin_count = 0
        manager_status = 'error'

    return jsonify({
        'status': 'ok' if manager_status == 'ok' else 'degraded',
        'service': 'markline',
        'version': __version__,
        'timestamp': timestamp(),
        'components': {
            'plugin_manager': manager_status,
            'plugin_count': plugin_count
        }
    }), 200


@app.route('/api/plugins', methods=['GET'])
def list_plugins():
    """Describe the loaded plugins."""
    try:
        summary = get_manager().summary()
    except Exception as e:
        return jsonify({
            'error': 'Plugin manager unavailable',
            'details': str(e),
            'timestamp': timestamp()
        }), 500
    summary['timestamp'] = timestamp()
    return jsonify(summary), 200


@app.route('/api/transform', methods=['POST'])
def transform():
    """
    Transform a text with the loaded plugins.

    Requires:
        - JSON body: {"input": str, "debug": bool (optional)}

    Returns:
        JSON: {output, diagnostics, errors, meta}
        HTTP 200: Transformation ran (line function errors are in `errors`)
        HTTP 400: Bad request (missing or invalid input)
        HTTP 503: Plugin manager busy
        HTTP 500: Internal error
    """
    request_start = datetime.now(timezone.utc)

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        logger.warning(f"Missing or invalid JSON body from {request.remote_addr}")
        return jsonify({
            'error': 'Missing JSON body',
            'timestamp': timestamp()
        }), 400

    text = data.get('input')
    if not isinstance(text, str):
        logger.warning(f"Missing input field from {request.remote_addr}")
        return jsonify({
            'error': 'Missing required field: input (string)',
            'timestamp': timestamp()
        }), 400

    debug = bool(data.get('debug', False))
    output = RenderOutput(include_debug=debug)

    try:
        result = get_manager().transform(text, sink=output.log)
    except ManagerBusyError as e:
        logger.warning(f"Transformation rejected: {e}")
        return jsonify({
            'error': 'busy',
            'message': 'Another transformation is running. Please try again.',
            'timestamp': timestamp()
        }), 503
    except Exception as e:
        logger.error(f"Transformation failed: {e}")
        logger.error(traceback.format_exc())
        return jsonify({
            'error': 'Transformation failed',
            'error_type': type(e).__name__,
            'details': str(e),
            'timestamp': timestamp()
        }), 500

    output.set_result(result)
    if result.errors:
        logger.info(f"Transformation finished with {len(result.errors)} error(s)")

    response = output.to_dict()
    response['meta'] = {
        'line_count': result.line_count,
        'error_count': len(result.errors),
        'failed_lines': result.failed_lines,
        'performance': {
            'transform_duration_seconds': round(result.execution_time_seconds, 6),
            'total_duration_seconds': round(
                (datetime.now(timezone.utc) - request_start).total_seconds(), 6
            )
        },
        'timestamp': timestamp()
    }
    return jsonify(response), 200


@app.errorhandler(404)
def not_found(error):
    """Handle 404 errors."""
    logger.warning(f"404 Not Found: {request.path} from {request.remote_addr}")
    return jsonify({
        'error': 'Endpoint not found',
        'path': request.path,
        'timestamp': timestamp()
    }), 404


@app.errorhandler(500)
def internal_error(error):
    """Handle 500 errors."""
    logger.error(f"500 Internal Server Error: {error}")
    return jsonify({
        'error': 'Internal server error',
        'message': 'An unexpected error occurred',
        'timestamp': timestamp()
    }), 500


@app.before_request
def log_request():
    """Log incoming requests."""
    logger.debug(f"{request.method} {request.path} from {request.remote_addr}")


@app.after_request
def log_response(response):
    """Log response status."""
    logger.debug(f"Response: {response.status_code}")
    return response


if __name__ == '__main__':
    # For local development only
    app.run(debug=True, host='127.0.0.1', port=5000)
