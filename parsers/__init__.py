"""
Parsers Package - Bank statement parsing modules

Architecture:
1. PositionedTextExtractor (pdf_extractor.py) - PDF text layer -> positioned rows
2. BankFormatDetector (format_detector.py) - Identifies the statement layout
3. USCardParser (us_card_parser.py) - US credit card statements (format A)
4. HKBankParser (hk_bank_parser.py) - Hong Kong bank statements (format B)
5. StatementImporter (statement_importer.py) - RECOMMENDED: full upload pipeline

To add a new bank:
1. Subclass RowParser with the bank's date and amount patterns
2. Add its identifiers to FORMAT_IDENTIFIERS
3. Register the parser in StatementImporter.parser_classes
"""

from .pdf_extractor import PositionedTextExtractor, StatementParseError, decode_data_url
from .format_detector import BankFormatDetector, FORMAT_A, FORMAT_B, FORMAT_UNKNOWN
from .row_parser import RowParser
from .us_card_parser import USCardParser
from .hk_bank_parser import HKBankParser
from .statement_importer import StatementImporter, import_statement

__all__ = ['PositionedTextExtractor', 'StatementParseError', 'decode_data_url',
           'BankFormatDetector', 'FORMAT_A', 'FORMAT_B', 'FORMAT_UNKNOWN',
           'RowParser', 'USCardParser', 'HKBankParser',
           'StatementImporter', 'import_statement']
