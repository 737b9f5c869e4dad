"""
Subscription Statement Importer - Configuration
"""

import os

# Base paths
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.environ.get('STATEMENT_DATA_DIR', os.path.join(BASE_DIR, 'data'))

# Debug output (tagged [DEBUG] lines)
DEBUG = os.environ.get('STATEMENT_DEBUG', 'False').lower() == 'true'

# Text extraction
ROW_Y_TOLERANCE = 3          # PDF units; tokens this close vertically share a row
MIN_TEXT_ROWS = 3            # fewer rows than this = probably an image-based PDF

# Statement year detection (US card format)
YEAR_SCAN_ROWS = 20
STATEMENT_YEAR_MIN = 2020
STATEMENT_YEAR_MAX = 2029

# Recurrence detection thresholds
RECURRENCE_SIMILARITY_THRESHOLD = 0.5
RECURRENCE_AMOUNT_TOLERANCE = 0.15
RECURRENCE_MIN_WORD_LENGTH = 3
YEARLY_GAP_DAYS = 200

# Detection confidence levels
CONFIDENCE_HIGH = 0.9        # 3+ matching charges
CONFIDENCE_MEDIUM = 0.7      # 2 matching charges
CONFIDENCE_KEYWORD = 0.6     # single charge with a subscription keyword
CONFIDENCE_LOW = 0.4

# Duplicate detection thresholds
DUPLICATE_NAME_SIMILARITY = 0.9
DUPLICATE_AMOUNT_TOLERANCE = 0.01

# Currencies and defaults
SUPPORTED_CURRENCIES = ['USD', 'HKD', 'SGD', 'MYR', 'GBP', 'CNY', 'EUR']
DEFAULT_DISPLAY_CURRENCY = 'HKD'
FREQUENCIES = ['daily', 'weekly', 'monthly', 'yearly', 'one-off']
DEFAULT_TAGS = ['Personal', 'Business']
IMPORT_NOTE = 'Imported from bank statement'

# Supported upload types
SUPPORTED_UPLOAD_EXTENSIONS = ['.pdf', '.png', '.jpg', '.jpeg']

# Flask settings
FLASK_HOST = '0.0.0.0'
FLASK_PORT = int(os.environ.get('PORT', 8590))
FLASK_DEBUG = os.environ.get('FLASK_DEBUG', 'False').lower() == 'true'
MAX_UPLOAD_BYTES = 20 * 1024 * 1024

# MongoDB settings
MONGODB_URI = os.environ.get('MONGODB_URI', 'mongodb://localhost:27017/')
MONGODB_DATABASE = os.environ.get('MONGODB_DATABASE', 'subscription_tracker')
SUBSCRIPTIONS_COLLECTION = 'subscriptions'
