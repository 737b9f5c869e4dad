"""
Subscription Statement Importer - Flask Web API
Features: Statement upload parsing, Bulk subscription import,
          Duplicate detection, MongoDB persistence
"""

from datetime import datetime

from flask import Flask, request, jsonify
from werkzeug.utils import secure_filename

from config import (MAX_UPLOAD_BYTES, MONGODB_URI, MONGODB_DATABASE,
                    DEFAULT_DISPLAY_CURRENCY, SUPPORTED_CURRENCIES)
from parsers import StatementImporter, StatementParseError
from parsers.statement_importer import MANUAL_ATTACH_HINT
from processors import DuplicateDetector, SubscriptionBuilder
from storage import SubscriptionStore, StorageUnavailableError

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = MAX_UPLOAD_BYTES
app.config['SUBSCRIPTION_STORE'] = None


@app.after_request
def add_no_cache_headers(response):
    """Parse results depend on the upload; never cache them"""
    if response.content_type == 'application/json':
        response.headers['Cache-Control'] = 'no-cache, no-store, must-revalidate'
        response.headers['Pragma'] = 'no-cache'
        response.headers['Expires'] = '0'
    return response


# ============ STORAGE ============

def get_store() -> SubscriptionStore:
    """Shared store, created lazily (tests install their own in app.config)"""
    store = app.config.get('SUBSCRIPTION_STORE')
    if store is None:
        store = SubscriptionStore()
        app.config['SUBSCRIPTION_STORE'] = store
    return store


def create_importer() -> StatementImporter:
    """One importer per request; nothing is shared between uploads"""
    return StatementImporter()


# ============ API ROUTES ============

@app.route('/api/status')
def api_status():
    """API health check and MongoDB status"""
    try:
        get_store().collection
        is_connected = True
    except StorageUnavailableError:
        is_connected = False

    return jsonify({
        'status': 'ok',
        'mongodb': 'connected' if is_connected else 'disconnected',
        'database': MONGODB_DATABASE if is_connected else None,
        'timestamp': datetime.now().isoformat()
    })


# ---------- STATEMENTS API ----------

@app.route('/api/statements/parse', methods=['POST'])
def api_parse_statement():
    """Parse an uploaded statement into detected subscriptions"""
    importer = create_importer()

    try:
        upload = request.files.get('file')
        if upload is not None and upload.filename:
            filename = secure_filename(upload.filename)
            result = importer.import_file(filename, upload.read())
        else:
            data = request.get_json(silent=True) or {}
            if not data.get('file'):
                return jsonify({'error': 'No file provided'}), 400
            result = importer.import_data_url(data['file'])

        return jsonify(result)
    except StatementParseError as e:
        print(f"[ERROR] {e}", flush=True)
        return jsonify({
            'status': 'error',
            'error': str(e),
            'message': MANUAL_ATTACH_HINT
        }), 400
    except Exception as e:
        return jsonify({'error': str(e)}), 500


# ---------- SUBSCRIPTIONS API ----------

@app.route('/api/subscriptions/import', methods=['POST'])
def api_import_subscriptions():
    """Create subscription records from selected detected subscriptions"""
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'No data provided'}), 400

    user_id = data.get('user_id')
    selected = data.get('subscriptions')
    if not user_id:
        return jsonify({'error': 'Missing required field: user_id'}), 400
    if not isinstance(selected, list) or not selected:
        return jsonify({'error': 'Missing required field: subscriptions'}), 400

    try:
        records = SubscriptionBuilder(user_id, tags=data.get('tags')).build_batch(selected)
    except (ValueError, KeyError) as e:
        return jsonify({'error': str(e)}), 400

    try:
        inserted = get_store().insert_many(records)
    except StorageUnavailableError:
        return jsonify({'error': 'MongoDB not available'}), 503
    except Exception as e:
        return jsonify({'error': str(e)}), 500

    print(f"[INFO] Imported {inserted} subscriptions for user {user_id}", flush=True)
    return jsonify({
        'status': 'success',
        'inserted': inserted,
        'ids': [record['id'] for record in records],
        'message': f'{inserted} subscriptions imported'
    }), 201


@app.route('/api/subscriptions/duplicates', methods=['GET'])
def api_find_duplicates():
    """Ids of a user's subscriptions that look like duplicates"""
    user_id = request.args.get('user_id')
    currency = request.args.get('currency', DEFAULT_DISPLAY_CURRENCY).upper()
    if not user_id:
        return jsonify({'error': 'Missing required parameter: user_id'}), 400
    if currency not in SUPPORTED_CURRENCIES:
        return jsonify({'error': f'Unsupported currency: {currency}'}), 400

    try:
        subscriptions = get_store().list_for_user(user_id)
        duplicate_ids = DuplicateDetector().detect(subscriptions, currency)
        return jsonify({
            'duplicate_ids': sorted(duplicate_ids),
            'total': len(subscriptions)
        })
    except StorageUnavailableError:
        return jsonify({'error': 'MongoDB not available'}), 503
    except Exception as e:
        return jsonify({'error': str(e)}), 500


@app.route('/api/subscriptions/<subscription_id>/not-duplicate', methods=['POST'])
def api_mark_not_duplicate(subscription_id):
    """Exclude a subscription from duplicate detection"""
    try:
        if not get_store().mark_not_duplicate(subscription_id):
            return jsonify({'error': 'Subscription not found'}), 404
        return jsonify({'status': 'success', 'id': subscription_id})
    except StorageUnavailableError:
        return jsonify({'error': 'MongoDB not available'}), 503
    except Exception as e:
        return jsonify({'error': str(e)}), 500


if __name__ == '__main__':
    from config import FLASK_HOST, FLASK_PORT, FLASK_DEBUG

    print("="*70)
    print("  Subscription Statement Importer")
    print("="*70)
    print(f"  API Endpoint:  http://{FLASK_HOST}:{FLASK_PORT}/api/")
    print("-"*70)
    print(f"  MongoDB URI: {MONGODB_URI}")
    print(f"  Database: {MONGODB_DATABASE}")
    print(f"  Connection: Will initialize on first use (non-blocking)")
    print("-"*70)
    print("  API Endpoints:")
    print("    GET  /api/status                       - Health check")
    print("    POST /api/statements/parse             - Parse uploaded statement")
    print("    POST /api/subscriptions/import         - Import selected subscriptions")
    print("    GET  /api/subscriptions/duplicates     - Find duplicate subscriptions")
    print("    POST /api/subscriptions/<id>/not-duplicate - Dismiss duplicate warning")
    print("="*70)
    print("\n[*] Starting server...")
    app.run(debug=FLASK_DEBUG, host=FLASK_HOST, port=FLASK_PORT)
