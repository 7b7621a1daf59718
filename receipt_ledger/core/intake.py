"""
Receipt file intake: validation and durable storage of uploads.
"""

from pathlib import Path
from typing import BinaryIO, Optional

from .config import MAX_UPLOAD_BYTES
from .exceptions import FileTooLarge, InvalidFileType, NoFileUploaded, NotFound
from .logger import setup_logger
from .models import UploadedFile
from .utils import (ALLOWED_EXTS, ALLOWED_MIME_TYPES, MIME_TYPES_BY_EXT,
                    generate_stored_name, normalize_extension)

logger = setup_logger(__name__)

CHUNK_SIZE = 64 * 1024
ALLOWED_TYPES_MESSAGE = "Only images (JPEG, JPG, PNG, GIF) and PDF files are allowed"


class ReceiptStorage:
    """Directory of stored receipt files."""

    def __init__(self, root: Path, max_upload_bytes: int = MAX_UPLOAD_BYTES):
        """
        Args:
            root: Storage directory (created on first ensure_root())
            max_upload_bytes: Size limit for a single upload
        """
        self.root = Path(root)
        self.max_upload_bytes = max_upload_bytes

    def ensure_root(self) -> Path:
        """Create the storage directory if needed. Safe to call repeatedly."""
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def validate(self, original_name: str, mime_type: Optional[str]) -> str:
        """
        Check extension and declared mime type.

        Both must be allowed and the mime type must belong to the extension.

        Returns:
            The normalized (lowercase) extension
        """
        ext = normalize_extension(original_name or "")
        mime = (mime_type or "").strip().lower()
        details = {"file_name": original_name, "mime_type": mime_type}
        if ext not in ALLOWED_EXTS or mime not in ALLOWED_MIME_TYPES:
            raise InvalidFileType(ALLOWED_TYPES_MESSAGE, details)
        if mime not in MIME_TYPES_BY_EXT[ext]:
            raise InvalidFileType(
                f"Declared type {mime} does not match extension {ext}", details
            )
        return ext

    def store(self, stream: Optional[BinaryIO], original_name: str,
              mime_type: Optional[str]) -> UploadedFile:
        """
        Validate and write an uploaded file under a fresh unique name.

        Args:
            stream: Binary file-like object positioned at the start of the upload
            original_name: Filename as supplied by the client
            mime_type: Declared content type

        Returns:
            UploadedFile handle for the stored copy
        """
        if stream is None:
            raise NoFileUploaded("No file uploaded")
        ext = self.validate(original_name, mime_type)
        self.ensure_root()

        dest = self.root / generate_stored_name(ext)
        size = 0
        # "xb" refuses to overwrite in the unlikely event of a name clash
        out = dest.open("xb")
        try:
            with out:
                for chunk in iter(lambda: stream.read(CHUNK_SIZE), b""):
                    size += len(chunk)
                    if size > self.max_upload_bytes:
                        raise FileTooLarge(
                            f"File exceeds the {self.max_upload_bytes} byte limit",
                            {"file_name": original_name, "limit": self.max_upload_bytes},
                        )
                    out.write(chunk)
        except Exception:
            self.discard(dest)
            raise

        logger.info(f"Stored {original_name} as {dest.name} ({size} bytes)")
        return UploadedFile(
            stored_path=dest,
            original_name=original_name,
            mime_type=mime_type.strip().lower(),
            size_bytes=size,
            extension=ext,
        )

    def resolve(self, filename: str) -> Path:
        """Path of a stored file; NotFound for missing or out-of-root names."""
        if not filename or Path(filename).name != filename or filename in (".", ".."):
            raise NotFound("Receipt file not found", {"filename": filename})
        path = self.root / filename
        if not path.is_file():
            raise NotFound("Receipt file not found", {"filename": filename})
        return path

    def read(self, filename: str) -> bytes:
        """Raw bytes of a stored receipt."""
        return self.resolve(filename).read_bytes()

    def discard(self, path: Path) -> bool:
        """
        Delete a stored file, best-effort.

        Returns:
            True if the file was removed (or already gone)
        """
        try:
            Path(path).unlink()
        except FileNotFoundError:
            return True
        except OSError as e:
            logger.warning(f"Could not remove {path}: {e}")
            return False
        return True
