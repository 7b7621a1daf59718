"""
Error taxonomy for the receipt pipeline.

Every error carries a human-readable message, a details dict and the status
code a request layer should answer with.
"""

from typing import Any, Dict, Optional


class ReceiptLedgerError(Exception):
    """Base exception for all receipt pipeline errors."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Structured failure payload."""
        return {
            "success": False,
            "message": self.message,
            "details": self.details,
        }


class NoFileUploaded(ReceiptLedgerError):
    """Raised when an upload carries no file."""
    status_code = 400


class InvalidFileType(ReceiptLedgerError):
    """Raised when the extension or declared mime type is not accepted."""
    status_code = 400


class FileTooLarge(ReceiptLedgerError):
    """Raised when an upload exceeds the size limit."""
    status_code = 413


class ExtractionFailed(ReceiptLedgerError):
    """Raised when the OCR or PDF engine fails."""
    status_code = 422

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        details.setdefault("reason", reason)
        super().__init__(reason, details)
        self.reason = reason


class TransactionValidationError(ReceiptLedgerError):
    """Raised by a transaction store that rejects a candidate."""
    status_code = 400


class PersistenceFailed(ReceiptLedgerError):
    """Raised when the transaction store refuses to create the record."""
    status_code = 500


class NotFound(ReceiptLedgerError):
    """Raised when a stored receipt file does not exist."""
    status_code = 404
