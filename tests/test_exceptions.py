"""
Unit tests for custom exceptions.
"""
from receipt_ledger.core.exceptions import (
    ReceiptLedgerError,
    NoFileUploaded,
    InvalidFileType,
    FileTooLarge,
    ExtractionFailed,
    TransactionValidationError,
    PersistenceFailed,
    NotFound,
)


def test_base_exception():
    """Test base exception class."""
    exc = ReceiptLedgerError("Test error", details={"key": "value"})
    assert str(exc) == "Test error"
    assert exc.message == "Test error"
    assert exc.details == {"key": "value"}
    assert exc.status_code == 500


def test_exception_hierarchy():
    """Test exception inheritance."""
    for cls in (NoFileUploaded, InvalidFileType, FileTooLarge, ExtractionFailed,
                TransactionValidationError, PersistenceFailed, NotFound):
        assert issubclass(cls, ReceiptLedgerError)


def test_status_codes():
    assert NoFileUploaded.status_code == 400
    assert InvalidFileType.status_code == 400
    assert FileTooLarge.status_code == 413
    assert ExtractionFailed.status_code == 422
    assert PersistenceFailed.status_code == 500
    assert NotFound.status_code == 404


def test_extraction_failed_carries_reason():
    exc = ExtractionFailed("Failed to extract text from PDF", details={"file": "r.pdf"})
    assert exc.reason == "Failed to extract text from PDF"
    assert exc.details == {"file": "r.pdf", "reason": "Failed to extract text from PDF"}


def test_structured_failure_payload():
    exc = NotFound("Receipt file not found", details={"filename": "r.png"})
    assert exc.to_dict() == {
        "success": False,
        "message": "Receipt file not found",
        "details": {"filename": "r.png"},
    }


def test_exception_without_details():
    """Test exception without details."""
    exc = PersistenceFailed("Validation Error")
    assert exc.details == {}
