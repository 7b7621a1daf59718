"""
Main receipt processing orchestration.
"""

import datetime as dt
from pathlib import Path
from typing import BinaryIO, Callable, Optional

from .cleanup import StoredFileGuard
from .config import Settings, get_settings
from .database import SqliteTransactionStore, TransactionStore
from .exceptions import PersistenceFailed, TransactionValidationError
from .intake import ReceiptStorage
from .logger import set_level, setup_logger
from .models import ReprocessResult, TransactionCandidate, UploadResult
from .ocr import ProgressSink, TextExtractor
from .parsers import parse_receipt_text

logger = setup_logger(__name__)


class ReceiptProcessor:
    """Upload, reprocess and retrieve receipts."""

    def __init__(self, storage: ReceiptStorage, store: TransactionStore,
                 extractor: Optional[TextExtractor] = None,
                 receipt_url_prefix: str = "/uploads/receipts",
                 clock: Optional[Callable[[], dt.date]] = None):
        """
        Initialize receipt processor.

        Args:
            storage: Where uploaded receipt files live
            store: Transaction store; only its create() is used
            extractor: Text extraction dispatcher (Tesseract / PyMuPDF by default)
            receipt_url_prefix: Prefix of the receipt URL saved on each transaction
            clock: Returns the processing date used when a receipt has no date
        """
        self.storage = storage
        self.store = store
        self.extractor = extractor or TextExtractor()
        self.receipt_url_prefix = receipt_url_prefix.rstrip("/")
        self.clock = clock or dt.date.today

        self.storage.ensure_root()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ReceiptProcessor":
        """Build a processor wired to the configured storage directory and SQLite file."""
        settings = settings or get_settings()
        set_level(settings.log_level)
        return cls(
            storage=ReceiptStorage(settings.storage_root, settings.max_upload_bytes),
            store=SqliteTransactionStore(Path(settings.database_path)),
            extractor=TextExtractor(language=settings.ocr_language),
            receipt_url_prefix=settings.receipt_url_prefix,
        )

    def receipt_url(self, file_name: str) -> str:
        return f"{self.receipt_url_prefix}/{file_name}"

    def upload(self, stream: Optional[BinaryIO], original_name: str,
               mime_type: Optional[str],
               progress: Optional[ProgressSink] = None) -> UploadResult:
        """
        Store a receipt, parse it and create an expense transaction.

        Either the transaction is created and the file kept, or the error
        propagates and the stored file is removed.

        Args:
            stream: Binary file-like object with the upload
            original_name: Filename supplied by the client
            mime_type: Declared content type
            progress: Optional extraction progress sink

        Returns:
            UploadResult with the transaction, raw text and stored filename
        """
        uploaded = self.storage.store(stream, original_name, mime_type)

        with StoredFileGuard(self.storage, uploaded) as guard:
            extracted = self.extractor.extract(uploaded.stored_path, progress=progress)
            fields = parse_receipt_text(extracted.raw_text, today=self.clock())
            logger.debug(f"Parsed {uploaded.file_name}: {fields.to_dict()}")

            candidate = TransactionCandidate.from_parsed(fields, self.receipt_url(uploaded.file_name))
            try:
                transaction = self.store.create(candidate)
            except TransactionValidationError as e:
                logger.error(f"Store rejected transaction for {uploaded.file_name}: {e.details}")
                raise PersistenceFailed(e.message, e.details) from e
            guard.absorb()

        logger.info(f"Receipt {uploaded.file_name} processed into transaction {transaction.id}")
        return UploadResult(
            transaction=transaction,
            extracted_text=extracted.raw_text,
            file_name=uploaded.file_name,
        )

    def reprocess(self, filename: str,
                  progress: Optional[ProgressSink] = None) -> ReprocessResult:
        """
        Re-run extraction and parsing on a stored receipt. Writes nothing.

        Args:
            filename: Stored receipt filename
            progress: Optional extraction progress sink

        Returns:
            ReprocessResult with raw text and parsed fields
        """
        path = self.storage.resolve(filename)
        extracted = self.extractor.extract(path, progress=progress)
        fields = parse_receipt_text(extracted.raw_text, today=self.clock())
        logger.debug(f"Reprocessed {filename}: {fields.to_dict()}")
        return ReprocessResult(
            extracted_text=extracted.raw_text,
            parsed_fields=fields,
            filename=filename,
        )

    def retrieve(self, filename: str) -> bytes:
        """Raw bytes of a stored receipt."""
        return self.storage.read(filename)
