#!/usr/bin/env python3
"""
Main CLI entrypoint for receipt ledger.
"""

import argparse
import json
import mimetypes
import sys
from pathlib import Path

from receipt_ledger.core.config import get_settings
from receipt_ledger.core.exceptions import ReceiptLedgerError
from receipt_ledger.core.processor import ReceiptProcessor

UPLOAD_MESSAGE = "Receipt processed and transaction created successfully"


def _print_json(payload, stream=None):
    print(json.dumps(payload, indent=2, ensure_ascii=False), file=stream or sys.stdout)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="receipt-ledger",
        description="OCR receipt scans and record them as expense transactions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Store a receipt, parse it and create a transaction
  receipt-ledger upload ./scans/coffee.jpg

  # Parse a stored receipt again without touching the database
  receipt-ledger reprocess receipt-1700000000000-123456789.jpg

  # Copy a stored receipt out of storage
  receipt-ledger retrieve receipt-1700000000000-123456789.jpg --output ./coffee.jpg
        """
    )
    parser.add_argument("--storage",
                       help="Receipt storage directory (default: RECEIPT_LEDGER_STORAGE_PATH or ./uploads/receipts)")
    parser.add_argument("--database",
                       help="SQLite transactions file (default: RECEIPT_LEDGER_DATABASE_PATH or ./receipts.sqlite)")
    parser.add_argument("--verbose", "-v", action="store_true",
                       help="Show detailed parsing information for debugging")

    sub = parser.add_subparsers(dest="command", required=True)

    upload = sub.add_parser("upload", help="Upload and process a receipt")
    upload.add_argument("file", help="Receipt image (jpeg/jpg/png/gif) or PDF")
    upload.add_argument("--mime-type",
                        help="Declared content type (guessed from the filename if omitted)")

    reprocess = sub.add_parser("reprocess", help="Re-analyze a stored receipt")
    reprocess.add_argument("filename", help="Stored receipt filename")

    retrieve = sub.add_parser("retrieve", help="Write a stored receipt to a file")
    retrieve.add_argument("filename", help="Stored receipt filename")
    retrieve.add_argument("--output", "-o", required=True, help="Destination path")

    return parser


def main(argv=None):
    """Main CLI entrypoint."""
    args = build_parser().parse_args(argv)

    settings = get_settings()
    overrides = {}
    if args.storage:
        overrides["storage_path"] = args.storage
    if args.database:
        overrides["database_path"] = args.database
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    if overrides:
        settings = settings.model_copy(update=overrides)

    try:
        processor = ReceiptProcessor.from_settings(settings)

        if args.command == "upload":
            src = Path(args.file)
            mime_type = args.mime_type or mimetypes.guess_type(src.name)[0]
            with src.open("rb") as f:
                result = processor.upload(f, src.name, mime_type)
            _print_json({"success": True, "data": result.to_dict(), "message": UPLOAD_MESSAGE})

        elif args.command == "reprocess":
            result = processor.reprocess(args.filename)
            _print_json({"success": True, "data": result.to_dict()})

        elif args.command == "retrieve":
            out = Path(args.output)
            out.write_bytes(processor.retrieve(args.filename))
            _print_json({"success": True, "data": {"filename": args.filename, "output": out.as_posix()}})

    except ReceiptLedgerError as e:
        _print_json(e.to_dict(), stream=sys.stderr)
        return 1
    except OSError as e:
        _print_json({"success": False, "message": str(e), "details": {}}, stream=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
