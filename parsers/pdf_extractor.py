"""
PDF Extractor Module - Turn a statement PDF's text layer into positioned rows

Each page's text runs are placed in PDF user space (origin bottom-left),
grouped into rows by vertical position and read top-to-bottom, left-to-right.
Scanned (image-only) PDFs have no text layer and produce no rows; that is a
result for the caller to interpret, not an error.
"""

import base64
import binascii
import io
from typing import Callable, Dict, List, Tuple

import pdfplumber

from config import ROW_Y_TOLERANCE, DEBUG


class StatementParseError(ValueError):
    """Raised when an uploaded statement cannot be read at all"""

    def __init__(self, reason: str):
        super().__init__(f"failed to parse PDF: {reason}")
        self.reason = reason


def decode_data_url(data_url: str) -> Tuple[str, bytes]:
    """
    Split a base64 data URL into its MIME type and raw bytes

    Args:
        data_url: String like 'data:application/pdf;base64,JVBERi0...'

    Returns:
        (mime_type, payload bytes)
    """
    if not data_url or ',' not in data_url:
        raise StatementParseError("not a data URL")

    header, payload = data_url.split(',', 1)
    if not header.startswith('data:') or ';base64' not in header:
        raise StatementParseError("data URL is not base64 encoded")

    mime_type = header[len('data:'):].split(';', 1)[0].strip().lower()

    try:
        content = base64.b64decode(payload.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise StatementParseError(f"corrupted data URL ({e})") from e

    if not content:
        raise StatementParseError("empty file")

    return mime_type, content


def row_text(row: Dict) -> str:
    """Join a row's token texts with single spaces"""
    return ' '.join(item['text'] for item in row.get('items', []))


class PositionedTextExtractor:
    """
    Extract rows of positioned tokens from a PDF

    The PDF engine is injected so callers (and tests) decide what opens the
    document. It must behave like pdfplumber.open: return a context manager
    exposing .pages, each page exposing .height and .extract_words().
    """

    def __init__(self, opener: Callable = pdfplumber.open, y_tolerance: int = ROW_Y_TOLERANCE):
        self.opener = opener
        self.y_tolerance = y_tolerance
        self.page_count = 0
        self.debug = DEBUG

    def extract_rows(self, pdf_bytes: bytes) -> List[Dict]:
        """
        Extract ordered rows from every page of the document

        Args:
            pdf_bytes: Raw PDF file content

        Returns:
            List of row dicts {'y': int, 'items': [{'text', 'x', 'y'}, ...]}
        """
        if not pdf_bytes:
            raise StatementParseError("empty file")

        rows = []
        try:
            with self.opener(io.BytesIO(pdf_bytes)) as pdf:
                self.page_count = len(pdf.pages)
                for page_number, page in enumerate(pdf.pages, start=1):
                    page_rows = self._group_rows(self._page_tokens(page))
                    if self.debug:
                        print(f"[DEBUG] Page {page_number}: {len(page_rows)} rows", flush=True)
                    rows.extend(page_rows)
        except StatementParseError:
            raise
        except Exception as e:
            raise StatementParseError(str(e) or e.__class__.__name__) from e

        return rows

    def _page_tokens(self, page) -> List[Dict]:
        """Text runs of one page in PDF user space"""
        height = float(page.height)
        tokens = []
        for word in page.extract_words() or []:
            text = (word.get('text') or '').strip()
            if not text:
                continue
            tokens.append({
                'text': text,
                'x': round(word['x0']),
                'y': round(height - word['bottom'])
            })
        return tokens

    def _group_rows(self, tokens: List[Dict]) -> List[Dict]:
        """Merge tokens with nearly equal y into rows, in reading order"""
        rows_by_key = {}

        for token in tokens:
            key = None
            for existing in rows_by_key:
                if abs(existing - token['y']) <= self.y_tolerance:
                    key = existing
                    break
            if key is None:
                key = token['y']
                rows_by_key[key] = []
            rows_by_key[key].append(token)

        rows = []
        for key in sorted(rows_by_key, reverse=True):
            items = sorted(rows_by_key[key], key=lambda t: t['x'])
            rows.append({'y': key, 'items': items})
        return rows
