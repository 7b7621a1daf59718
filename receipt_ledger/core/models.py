"""
Data models for receipt processing.
"""

import datetime as dt
from dataclasses import dataclass, asdict
from decimal import Decimal
from pathlib import Path
from typing import Optional

EXPENSE = "expense"
INCOME = "income"
TRANSACTION_TYPES = (INCOME, EXPENSE)

DEFAULT_CATEGORY = "General"
DEFAULT_DESCRIPTION = "Receipt transaction"


def _jsonable(value):
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class UploadedFile:
    """A receipt file that has been validated and written to storage."""
    stored_path: Path
    original_name: str
    mime_type: str
    size_bytes: int
    extension: str

    @property
    def file_name(self) -> str:
        return self.stored_path.name


@dataclass(frozen=True)
class ExtractedText:
    """Raw text pulled out of a stored receipt."""
    raw_text: str
    source: Path


@dataclass(frozen=True)
class ParsedFields:
    """Transaction fields inferred from receipt text."""
    amount: Decimal
    description: str
    date: dt.date
    category: str
    type: str

    def to_dict(self):
        """Convert to dictionary."""
        return {k: _jsonable(v) for k, v in asdict(self).items()}


@dataclass(frozen=True)
class TransactionCandidate:
    """Parsed fields plus the receipt reference, not yet persisted."""
    amount: Decimal
    description: str
    date: dt.date
    category: str
    type: str
    receipt_url: str
    extracted_from_receipt: bool = True

    @classmethod
    def from_parsed(cls, fields: ParsedFields, receipt_url: str) -> "TransactionCandidate":
        return cls(
            amount=fields.amount,
            description=fields.description,
            date=fields.date,
            category=fields.category,
            type=fields.type,
            receipt_url=receipt_url,
            extracted_from_receipt=True,
        )


@dataclass(frozen=True)
class Transaction:
    """A transaction as returned by the store."""
    id: int
    amount: Decimal
    description: str
    date: dt.date
    category: str
    type: str
    receipt_url: Optional[str]
    extracted_from_receipt: bool
    created_at: dt.datetime

    def to_dict(self):
        """Convert to dictionary."""
        return {k: _jsonable(v) for k, v in asdict(self).items()}


@dataclass(frozen=True)
class UploadResult:
    transaction: Transaction
    extracted_text: str
    file_name: str

    def to_dict(self):
        return {
            "transaction": self.transaction.to_dict(),
            "extractedText": self.extracted_text,
            "fileName": self.file_name,
        }


@dataclass(frozen=True)
class ReprocessResult:
    extracted_text: str
    parsed_fields: ParsedFields
    filename: str

    def to_dict(self):
        return {
            "extractedText": self.extracted_text,
            "parsedData": self.parsed_fields.to_dict(),
            "filename": self.filename,
        }
