"""
featurekit Backend API
REST API for PHOG descriptors and keypoint files
"""

from flask import Flask, request, jsonify, send_file
from flask_cors import CORS
from werkzeug.utils import secure_filename
import io
import sys
import logging
from pathlib import Path
from datetime import datetime

# Add project root to path so we can import featurekit
current_dir = Path(__file__).parent
project_root = current_dir.parent.parent
sys.path.insert(0, str(project_root))

from backend.server import config
from featurekit import config as phog_config
from featurekit.detection import detect_keypoints
from featurekit.geometry import Rectangle
from featurekit.image import decode_image
from featurekit.keypoint_io import dumps_keypoints, loads_keypoints
from featurekit.phog import PyramidHistogramOfGradients

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)

app.config['MAX_CONTENT_LENGTH'] = config.MAX_FILE_SIZE

KEYPOINT_FORMATS = {'ascii', 'binary', 'json'}


def allowed_file(filename):
    """Check if file extension is allowed."""
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in config.ALLOWED_EXTENSIONS


def bad_request(error, message):
    return jsonify({'error': error, 'message': message}), 400


def read_uploaded_image():
    """Decode the 'image' upload of the current request as grayscale."""
    file = request.files.get('image')
    if file is None or file.filename == '':
        raise ValueError('Please provide an image in the "image" field')
    if not allowed_file(file.filename):
        raise ValueError(
            f'File "{secure_filename(file.filename)}" has invalid extension. '
            f'Allowed: {", ".join(sorted(config.ALLOWED_EXTENSIONS))}'
        )

    resize = int(request.form.get('resize', config.DEFAULT_RESIZE))
    return decode_image(file.read(), size=resize if resize > 0 else None)


def parse_rect(value, shape):
    """Parse an "x,y,w,h" form field; a missing field means the whole image."""
    if not value:
        return Rectangle.from_shape(shape)

    parts = [p for p in value.replace(',', ' ').split() if p]
    if len(parts) != 4:
        raise ValueError(f'rect must have 4 integers "x,y,w,h", got "{value}"')
    return Rectangle(*(int(p) for p in parts))


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'service': config.API_TITLE,
        'timestamp': datetime.now().isoformat()
    }), 200


@app.route('/api/phog', methods=['POST'])
def extract_phog():
    """
    Extract a PHOG descriptor.

    Expects:
    - image: Image file
    - rect: "x,y,w,h" (optional, default whole image)
    - levels: Integer (optional)
    - bins: Integer (optional)
    - normalise: Boolean (optional, default False)
    - resize: Integer (optional, 0 keeps the original size)

    Returns:
    - JSON with the descriptor values
    """
    try:
        image = read_uploaded_image()
        levels = int(request.form.get('levels', phog_config.PHOG_LEVELS))
        bins = int(request.form.get('bins', phog_config.PHOG_BINS))
        normalise = request.form.get('normalise', 'false').lower() == 'true'

        if levels > config.MAX_LEVELS:
            raise ValueError(f'levels must be at most {config.MAX_LEVELS}')

        rect = parse_rect(request.form.get('rect'), image.shape)

        extractor = PyramidHistogramOfGradients(nlevels=levels, nbins=bins)
        extractor.analyse_image(image)
        descriptor = extractor.extract_feature_vector(rect, normalise=normalise)

        logger.info(f"PHOG {rect} levels={levels} bins={bins} -> {descriptor.shape[0]} values")

        return jsonify({
            'status': 'success',
            'rect': list(rect.as_tuple()),
            'levels': levels,
            'bins': bins,
            'length': int(descriptor.shape[0]),
            'descriptor': descriptor.tolist()
        }), 200

    except ValueError as e:
        return bad_request('Invalid request', str(e))
    except Exception as e:
        logger.exception("Error in /api/phog")
        return jsonify({
            'error': 'Internal server error',
            'message': str(e)
        }), 500


def keypoint_response(keypoints, fmt, filename):
    if fmt == 'json':
        return jsonify({
            'status': 'success',
            'count': len(keypoints),
            'keypoints': [
                {
                    'x': k.x,
                    'y': k.y,
                    'ori': k.ori,
                    'scale': k.scale,
                    'descriptor': k.ivec.tolist()
                }
                for k in keypoints
            ]
        }), 200

    binary = fmt == 'binary'
    return send_file(
        io.BytesIO(dumps_keypoints(keypoints, binary=binary)),
        mimetype='application/octet-stream' if binary else 'text/plain',
        as_attachment=True,
        download_name=filename
    ), 200


@app.route('/api/keypoints', methods=['POST'])
def extract_keypoints():
    """
    Detect SIFT keypoints.

    Expects:
    - image: Image file
    - format: ascii, binary or json (optional, default json)
    - max_keypoints: Integer (optional, 0 keeps all)
    - resize: Integer (optional)

    Returns:
    - Keypoint file or JSON list
    """
    try:
        fmt = request.form.get('format', 'json').lower()
        if fmt not in KEYPOINT_FORMATS:
            raise ValueError(f'format must be one of {", ".join(sorted(KEYPOINT_FORMATS))}')

        image = read_uploaded_image()
        keypoints = detect_keypoints(image, max_keypoints=int(request.form.get('max_keypoints', 0)))

        return keypoint_response(keypoints, fmt, 'keypoints.key')

    except ValueError as e:
        return bad_request('Invalid request', str(e))
    except Exception as e:
        logger.exception("Error in /api/keypoints")
        return jsonify({
            'error': 'Internal server error',
            'message': str(e)
        }), 500


@app.route('/api/keypoints/convert', methods=['POST'])
def convert_keypoints():
    """
    Convert a keypoint file between formats.

    Expects:
    - keypoints: Keypoint file (binary or ASCII)
    - format: ascii, binary or json (optional, default json)
    """
    try:
        fmt = request.form.get('format', 'json').lower()
        if fmt not in KEYPOINT_FORMATS:
            raise ValueError(f'format must be one of {", ".join(sorted(KEYPOINT_FORMATS))}')

        file = request.files.get('keypoints')
        if file is None:
            raise ValueError('Please provide a keypoint file in the "keypoints" field')

        keypoints = loads_keypoints(file.read())
        return keypoint_response(keypoints, fmt, secure_filename(file.filename or '') or 'keypoints.key')

    except (ValueError, EOFError) as e:
        return bad_request('Invalid keypoint file', str(e))
    except Exception as e:
        logger.exception("Error in /api/keypoints/convert")
        return jsonify({
            'error': 'Internal server error',
            'message': str(e)
        }), 500


@app.route('/api/info', methods=['GET'])
def get_info():
    """Get API information and supported parameters."""
    return jsonify({
        'name': config.API_TITLE,
        'version': config.API_VERSION,
        'endpoints': {
            'health': 'GET /api/health',
            'phog': 'POST /api/phog',
            'keypoints': 'POST /api/keypoints',
            'convert': 'POST /api/keypoints/convert',
            'info': 'GET /api/info'
        },
        'phog_parameters': {
            'image': 'Image file (required)',
            'rect': 'Region "x,y,w,h" (default: whole image)',
            'levels': f'Pyramid levels (integer, 1..{config.MAX_LEVELS})',
            'bins': 'Orientation bins (integer)',
            'normalise': 'L2-normalise the descriptor (boolean, default: false)',
            'resize': f'Max image dimension (integer, default: {config.DEFAULT_RESIZE}, 0 keeps size)'
        },
        'keypoint_formats': sorted(KEYPOINT_FORMATS),
        'allowed_formats': sorted(config.ALLOWED_EXTENSIONS),
        'max_file_size': f'{config.MAX_FILE_SIZE / (1024 * 1024):.0f} MB'
    }), 200


@app.errorhandler(413)
def request_entity_too_large(error):
    """Handle file too large error."""
    return jsonify({
        'error': 'File too large',
        'message': f'Maximum file size is {config.MAX_FILE_SIZE / (1024 * 1024):.0f} MB'
    }), 413


@app.errorhandler(404)
def not_found(error):
    """Handle 404 errors."""
    return jsonify({
        'error': 'Not found',
        'message': 'The requested endpoint does not exist',
        'available_endpoints': [
            'GET /api/health',
            'POST /api/phog',
            'POST /api/keypoints',
            'POST /api/keypoints/convert',
            'GET /api/info'
        ]
    }), 404


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    print("\n" + "="*60)
    print(config.API_TITLE)
    print("="*60)
    print(f"Starting server on http://{config.HOST}:{config.PORT}")
    print(f"Documentation available at http://localhost:{config.PORT}/api/info")
    print("="*60 + "\n")

    app.run(
        host=config.HOST,
        port=config.PORT,
        debug=config.DEBUG,
        use_reloader=False,
        threaded=True
    )
