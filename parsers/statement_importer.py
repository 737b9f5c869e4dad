"""
Statement Importer - Bank statement upload to detected subscriptions

Flow:
1. Decode the uploaded data URL (images cannot be read: manual attach)
2. Extract positioned rows from the PDF text layer
3. Detect the statement format; unknown -> run both parsers, keep the larger
4. Normalize names and categories
5. Flag recurring charges

Every run ends in one of three states: transactions found (status 'ok'),
nothing found (status 'empty', with a hint), or a StatementParseError for
files that cannot be read at all.
"""

import os
from datetime import date
from typing import Dict, List, Optional

from config import MIN_TEXT_ROWS, CONFIDENCE_KEYWORD, SUPPORTED_UPLOAD_EXTENSIONS

from .pdf_extractor import PositionedTextExtractor, StatementParseError, decode_data_url
from .format_detector import BankFormatDetector, FORMAT_A, FORMAT_B, FORMAT_UNKNOWN
from .us_card_parser import USCardParser
from .hk_bank_parser import HKBankParser

from classifiers import TransactionNormalizer, RecurrenceDetector

IMAGE_BASED_MESSAGE = ("No transactions found. The file may be image-based (scanned); "
                       "attach it to a subscription manually instead.")
NO_TRANSACTIONS_MESSAGE = ("No transactions found. The statement layout was not recognised; "
                           "attach the file to a subscription manually instead.")
NO_SUBSCRIPTIONS_MESSAGE = ("Found {count} transactions but none looked like subscriptions. "
                            "Select any you want to import.")
FOUND_MESSAGE = "Found {count} transactions ({recurring} recurring)."
MANUAL_ATTACH_HINT = "You can still attach the file to a subscription manually."

PDF_MIME_TYPES = ('application/pdf', 'application/x-pdf', 'application/octet-stream')


class StatementImporter:
    """
    Run the statement ingestion pipeline for one upload

    Usage:
        importer = StatementImporter()
        result = importer.import_data_url(data_url)
        result['subscriptions']
    """

    def __init__(self, extractor: Optional[PositionedTextExtractor] = None,
                 detector: Optional[BankFormatDetector] = None,
                 normalizer: Optional[TransactionNormalizer] = None,
                 recurrence_detector: Optional[RecurrenceDetector] = None,
                 today: Optional[date] = None, verbose: bool = True):
        self.extractor = extractor or PositionedTextExtractor()
        self.detector = detector or BankFormatDetector()
        self.normalizer = normalizer or TransactionNormalizer()
        self.recurrence_detector = recurrence_detector or RecurrenceDetector()
        self.today = today
        self.verbose = verbose
        self.parser_classes = {
            FORMAT_A: USCardParser,
            FORMAT_B: HKBankParser,
        }

    def _log(self, message: str):
        if self.verbose:
            print(message, flush=True)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def import_data_url(self, data_url: str) -> Dict:
        """
        Import an uploaded statement delivered as a base64 data URL

        Raises:
            StatementParseError: the upload is not a readable PDF
        """
        mime_type, content = decode_data_url(data_url)

        if mime_type.startswith('image/'):
            self._log(f"[INFO] Upload is an image ({mime_type}), nothing to extract")
            return self._result([], FORMAT_UNKNOWN, row_count=0, image_based=True)

        if mime_type and mime_type not in PDF_MIME_TYPES:
            raise StatementParseError(f"unsupported file type '{mime_type}'")

        return self.import_pdf_bytes(content)

    def import_file(self, filename: str, content: bytes) -> Dict:
        """
        Import an uploaded file by name (CLI paths, multipart uploads)

        Raises:
            StatementParseError: unsupported extension or unreadable PDF
        """
        extension = os.path.splitext(filename or '')[1].lower()
        if extension not in SUPPORTED_UPLOAD_EXTENSIONS:
            raise StatementParseError(f"unsupported file type '{extension or filename}'")

        if extension != '.pdf':
            self._log(f"[INFO] Upload is an image ({filename}), nothing to extract")
            return self._result([], FORMAT_UNKNOWN, row_count=0, image_based=True)

        return self.import_pdf_bytes(content)

    def import_pdf_bytes(self, pdf_bytes: bytes) -> Dict:
        """Import a statement from raw PDF bytes"""
        rows = self.extractor.extract_rows(pdf_bytes)
        self._log(f"[INFO] Extracted {len(rows)} rows from {self.extractor.page_count} page(s)")
        return self.import_rows(rows)

    def import_rows(self, rows: List[Dict]) -> Dict:
        """Run format detection, parsing, normalization and recurrence on rows"""
        statement_format = self.detector.detect(rows)
        self._log(f"[INFO] Detected format: {statement_format}")

        statement_format, transactions = self._parse(rows, statement_format)
        normalized = self.normalizer.normalize_batch(transactions)
        return self._result(normalized, statement_format, row_count=len(rows))

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _parse(self, rows: List[Dict], statement_format: str):
        if statement_format in self.parser_classes:
            parser = self.parser_classes[statement_format](today=self.today)
            return statement_format, parser.parse_rows(rows)

        # Unknown layout: whichever parser finds more wins, ties go to format A.
        # A format B statement can still lose to spurious format A matches.
        best_format, best = FORMAT_UNKNOWN, []
        for candidate, parser_class in self.parser_classes.items():
            transactions = parser_class(today=self.today).parse_rows(rows)
            self._log(f"[INFO] {parser_class.__name__}: {len(transactions)} transactions")
            if len(transactions) > len(best):
                best_format, best = candidate, transactions

        if best:
            self._log(f"[WARNING] Format guessed as {best_format} from parse results")
        return best_format, best

    def _result(self, transactions: List[Dict], statement_format: str,
                row_count: int, image_based: bool = False) -> Dict:
        result = {
            'status': 'ok',
            'format': statement_format,
            'row_count': row_count,
            'transaction_count': len(transactions),
            'subscriptions': [],
            'message': ''
        }

        if not transactions:
            result['status'] = 'empty'
            if image_based or row_count < MIN_TEXT_ROWS:
                result['message'] = IMAGE_BASED_MESSAGE
            else:
                result['message'] = NO_TRANSACTIONS_MESSAGE
            self._log(f"[WARNING] {result['message']}")
            return result

        subscriptions = self.recurrence_detector.detect(transactions)
        recurring = sum(1 for sub in subscriptions if sub['is_recurring'])
        likely = any(sub['is_recurring'] or sub['confidence'] >= CONFIDENCE_KEYWORD
                     for sub in subscriptions)

        result['subscriptions'] = subscriptions
        if likely:
            result['message'] = FOUND_MESSAGE.format(count=len(transactions), recurring=recurring)
        else:
            result['message'] = NO_SUBSCRIPTIONS_MESSAGE.format(count=len(transactions))

        self._log(f"[INFO] {result['message']}")
        return result


def import_statement(data_url: str, today: Optional[date] = None, verbose: bool = True) -> Dict:
    """
    Convenience function to import one uploaded statement

    Returns:
        Result dict with 'status', 'message', 'format' and 'subscriptions'
    """
    return StatementImporter(today=today, verbose=verbose).import_data_url(data_url)
