"""
Transaction persistence.

The pipeline only needs ``create``; any object with that method can stand in
for the bundled SQLite store.
"""

import sqlite3
import datetime as dt
from contextlib import closing
from decimal import Decimal
from pathlib import Path
from typing import List, Protocol

from .exceptions import TransactionValidationError
from .logger import setup_logger
from .models import Transaction, TransactionCandidate, TRANSACTION_TYPES
from .utils import DESCRIPTION_MAX_LENGTH

logger = setup_logger(__name__)

CATEGORY_MAX_LENGTH = 100


class TransactionStore(Protocol):
    def create(self, candidate: TransactionCandidate) -> Transaction:
        """Persist a candidate; raise TransactionValidationError on rejection."""
        ...


def validate_candidate(candidate: TransactionCandidate) -> List[str]:
    """Return a list of validation messages (empty when the candidate is valid)."""
    errors = []
    if candidate.type not in TRANSACTION_TYPES:
        errors.append(f'"type" must be one of {list(TRANSACTION_TYPES)}')

    amount = candidate.amount
    if not isinstance(amount, Decimal) or not amount.is_finite():
        errors.append('"amount" must be a number')
    elif amount < 0:
        errors.append('"amount" must not be negative')

    description = (candidate.description or "").strip()
    if not description:
        errors.append('"description" is not allowed to be empty')
    elif len(description) > DESCRIPTION_MAX_LENGTH:
        errors.append(f'"description" length must be at most {DESCRIPTION_MAX_LENGTH} characters')

    category = (candidate.category or "").strip()
    if not category:
        errors.append('"category" is not allowed to be empty')
    elif len(category) > CATEGORY_MAX_LENGTH:
        errors.append(f'"category" length must be at most {CATEGORY_MAX_LENGTH} characters')

    if not isinstance(candidate.date, dt.date):
        errors.append('"date" must be a valid date')
    return errors


class SqliteTransactionStore:
    """Transactions table in a local SQLite file."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.init_db()

    def init_db(self):
        """Initialize the transactions table."""
        if self.db_path.parent != Path("."):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with closing(sqlite3.connect(self.db_path.as_posix())) as conn:
            cur = conn.cursor()
            cur.execute("""
            CREATE TABLE IF NOT EXISTS transactions (
                id INTEGER PRIMARY KEY,
                type TEXT NOT NULL,
                amount TEXT NOT NULL,
                description TEXT NOT NULL,
                category TEXT NOT NULL,
                date TEXT NOT NULL,
                receipt_url TEXT,
                extracted_from_receipt INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL
            )
            """)
            conn.commit()

    def create(self, candidate: TransactionCandidate) -> Transaction:
        """
        Validate and insert a transaction.

        Args:
            candidate: Fields to persist

        Returns:
            The stored Transaction with its row id
        """
        errors = validate_candidate(candidate)
        if errors:
            raise TransactionValidationError("Validation Error", {"errors": errors})

        created_at = dt.datetime.now()
        description = candidate.description.strip()
        category = candidate.category.strip()
        with closing(sqlite3.connect(self.db_path.as_posix())) as conn:
            cur = conn.cursor()
            cur.execute("""
            INSERT INTO transactions
            (type, amount, description, category, date, receipt_url, extracted_from_receipt, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """, (candidate.type, str(candidate.amount), description, category,
                  candidate.date.isoformat(), candidate.receipt_url,
                  int(candidate.extracted_from_receipt), created_at.isoformat()))
            conn.commit()
            row_id = cur.lastrowid

        logger.info(f"Created transaction {row_id} ({candidate.type} {candidate.amount})")
        return Transaction(
            id=row_id,
            amount=candidate.amount,
            description=description,
            date=candidate.date,
            category=category,
            type=candidate.type,
            receipt_url=candidate.receipt_url,
            extracted_from_receipt=candidate.extracted_from_receipt,
            created_at=created_at,
        )
