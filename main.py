"""
Subscription Statement Importer - Main Entry Point

Command Line Interface for finding subscriptions in bank statements
"""

import os
import sys
import argparse
from typing import Dict, List

# Add current directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import SUPPORTED_UPLOAD_EXTENSIONS, SUPPORTED_CURRENCIES, DEFAULT_DISPLAY_CURRENCY
from parsers import StatementImporter, StatementParseError
from processors import get_monthly_value


def print_banner():
    """Print application banner"""
    print("""
╔══════════════════════════════════════════════════════════════════════════════╗
║                     SUBSCRIPTION STATEMENT IMPORTER                          ║
║                                                                              ║
║  Finds recurring charges in credit card and bank statements                  ║
╚══════════════════════════════════════════════════════════════════════════════╝
    """)


def process_statement(file_path: str, verbose: bool = True) -> Dict:
    """
    Run the import pipeline on a statement file

    Args:
        file_path: Path to the statement (PDF; images are reported as unreadable)
        verbose: Print progress messages

    Returns:
        Import result dict ('status', 'message', 'format', 'subscriptions', ...)
    """
    with open(file_path, 'rb') as f:
        content = f.read()

    importer = StatementImporter(verbose=verbose)
    return importer.import_file(os.path.basename(file_path), content)


def format_table(subscriptions: List[Dict], currency: str) -> str:
    """Render detected subscriptions as a fixed-width text table"""
    header = (f"{'Date':<12}{'Name':<28}{'Amount':>12}  {'Frequency':<10}"
              f"{'Conf':>5}  {'Monthly ' + currency:>14}  Category")
    lines = [header, '-' * len(header)]

    for sub in subscriptions:
        monthly = get_monthly_value(sub, currency)
        amount = f"{sub['amount']:,.2f} {sub['currency']}"
        lines.append(
            f"{sub['date']:<12}{sub['name'][:27]:<28}{amount:>12}  {sub['frequency']:<10}"
            f"{sub['confidence']:>5.1f}  {monthly:>14,.2f}  {sub.get('category') or ''}"
        )
    return '\n'.join(lines)


def main():
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description='Subscription Statement Importer - Find subscriptions in bank statements',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py statement.pdf
  python main.py statement.pdf --currency USD
  python main.py statement.pdf --recurring-only
        """
    )

    parser.add_argument('file', nargs='?', help='Bank statement file (PDF)')
    parser.add_argument('--currency', '-c', choices=SUPPORTED_CURRENCIES,
                        default=DEFAULT_DISPLAY_CURRENCY,
                        help=f'Display currency for monthly values (default: {DEFAULT_DISPLAY_CURRENCY})')
    parser.add_argument('--recurring-only', '-r', action='store_true',
                        help='Only list charges seen more than once')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress progress output')
    parser.add_argument('--web', '-w', action='store_true', help='Launch web API')

    args = parser.parse_args()

    print_banner()

    if args.web:
        print("Starting web API...")
        from config import FLASK_HOST, FLASK_PORT, FLASK_DEBUG
        print(f"Listening on http://{FLASK_HOST}:{FLASK_PORT}/api/")
        from app import app
        app.run(debug=FLASK_DEBUG, host=FLASK_HOST, port=FLASK_PORT)
        return

    if not args.file:
        parser.print_help()
        print("\n✗ Error: Please provide a statement file or use --web for the web API")
        sys.exit(1)

    if not os.path.exists(args.file):
        print(f"\n✗ Error: File not found: {args.file}")
        sys.exit(1)

    ext = os.path.splitext(args.file)[1].lower()
    if ext not in SUPPORTED_UPLOAD_EXTENSIONS:
        print(f"\n✗ Error: Unsupported file format: {ext}")
        print(f"   Supported formats: {', '.join(SUPPORTED_UPLOAD_EXTENSIONS)}")
        sys.exit(1)

    try:
        result = process_statement(args.file, verbose=not args.quiet)
    except StatementParseError as e:
        print(f"\n✗ Error: {e}")
        sys.exit(1)

    print(f"\n{result['message']}")
    if result['status'] != 'ok':
        sys.exit(1)

    subscriptions = result['subscriptions']
    if args.recurring_only:
        subscriptions = [sub for sub in subscriptions if sub['is_recurring']]

    print(f"\nFormat: {result['format']}  |  Transactions: {result['transaction_count']}\n")
    print(format_table(subscriptions, args.currency))
    sys.exit(0)


if __name__ == "__main__":
    main()
