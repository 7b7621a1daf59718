"""
Shared fixtures for the receipt ledger tests.
"""
import datetime as dt
from pathlib import Path

import pytest

from receipt_ledger.core.config import reset_settings
from receipt_ledger.core.database import SqliteTransactionStore
from receipt_ledger.core.exceptions import TransactionValidationError
from receipt_ledger.core.intake import ReceiptStorage
from receipt_ledger.core.models import ExtractedText
from receipt_ledger.core.processor import ReceiptProcessor

PROCESSING_DATE = dt.date(2024, 3, 1)

SAMPLE_RECEIPT = """123
Coffee Shop
Thank you
Visit again
0001
15/01/2024
Total: ₹123.45
"""


class FakeExtractor:
    """Stands in for TextExtractor; returns canned text or raises."""

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = []

    def extract(self, path, progress=None):
        self.calls.append(Path(path))
        if progress is not None:
            progress({"status": "done", "progress": 1.0})
        if self.error is not None:
            raise self.error
        return ExtractedText(raw_text=self.text, source=Path(path))


class RejectingStore:
    """Store whose create() always fails validation."""

    def __init__(self):
        self.calls = 0

    def create(self, candidate):
        self.calls += 1
        raise TransactionValidationError("Validation Error", {"errors": ['"amount" must be positive']})


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Keep settings isolated from the environment and any .env file."""
    for var in ("RECEIPT_LEDGER_STORAGE_PATH", "RECEIPT_LEDGER_DATABASE_PATH",
                "RECEIPT_LEDGER_MAX_UPLOAD_BYTES", "RECEIPT_LEDGER_LOG_LEVEL",
                "RECEIPT_LEDGER_OCR_LANGUAGE", "RECEIPT_LEDGER_RECEIPT_URL_PREFIX"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def storage(tmp_path):
    return ReceiptStorage(tmp_path / "receipts")


@pytest.fixture
def store(tmp_path):
    return SqliteTransactionStore(tmp_path / "transactions.sqlite")


@pytest.fixture
def extractor():
    return FakeExtractor(text=SAMPLE_RECEIPT)


@pytest.fixture
def processor(storage, store, extractor):
    return ReceiptProcessor(storage, store, extractor=extractor, clock=lambda: PROCESSING_DATE)


def stored_files(storage):
    """Files currently in the storage directory."""
    return sorted(p.name for p in storage.root.iterdir())
