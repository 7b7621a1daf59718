"""
Receipt Ledger

Turns uploaded receipt scans (images or PDFs) into expense transactions:
OCR or PDF text-layer extraction followed by a heuristic field parser.
"""

__version__ = "1.0.0"
__author__ = "Receipt Ledger Contributors"

from receipt_ledger.core.models import ParsedFields, Transaction, UploadedFile
from receipt_ledger.core.processor import ReceiptProcessor

__all__ = ["ParsedFields", "ReceiptProcessor", "Transaction", "UploadedFile"]
