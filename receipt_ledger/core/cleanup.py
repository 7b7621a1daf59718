"""
Removal of stored receipt files when an upload does not make it into the store.
"""

from .logger import setup_logger
from .models import UploadedFile

logger = setup_logger(__name__)


class StoredFileGuard:
    """
    Context manager around the steps that follow storing an upload.

    If the block exits with an exception before absorb() is called, the
    stored file is deleted and the exception propagates unchanged.
    """

    def __init__(self, storage, uploaded: UploadedFile):
        self.storage = storage
        self.uploaded = uploaded
        self.absorbed = False

    def absorb(self):
        """Mark the file as referenced by a persisted transaction."""
        self.absorbed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None and not self.absorbed:
            logger.info(f"Removing {self.uploaded.file_name} after failed processing")
            if not self.storage.discard(self.uploaded.stored_path):
                logger.warning(f"Left orphaned receipt file {self.uploaded.stored_path}")
        return False
