"""
Unit tests for receipt file intake and storage.
"""
import io
import re

import pytest

from receipt_ledger.core.exceptions import FileTooLarge, InvalidFileType, NoFileUploaded, NotFound
from receipt_ledger.core.intake import ReceiptStorage

from conftest import stored_files


@pytest.mark.parametrize("name,mime", [
    ("receipt.jpg", "image/jpeg"),
    ("receipt.JPEG", "image/jpeg"),
    ("receipt.jpg", "image/jpg"),
    ("receipt.png", "image/png"),
    ("receipt.GIF", "IMAGE/GIF"),
    ("receipt.pdf", "application/pdf"),
])
def test_validate_accepts_allowed_types(storage, name, mime):
    assert storage.validate(name, mime) == name[name.rfind("."):].lower()


@pytest.mark.parametrize("name,mime", [
    ("receipt.bmp", "image/bmp"),
    ("receipt.tiff", "image/tiff"),
    ("receipt.txt", "text/plain"),
    ("receipt", "image/png"),
    ("receipt.png", None),
    ("receipt.png", "application/pdf"),
    ("receipt.pdf", "image/png"),
    ("receipt.gif", "image/jpeg"),
    ("receipt.exe", "application/pdf"),
])
def test_validate_rejects_disallowed_or_mismatched(storage, name, mime):
    with pytest.raises(InvalidFileType):
        storage.validate(name, mime)


def test_ensure_root_is_idempotent(tmp_path):
    storage = ReceiptStorage(tmp_path / "a" / "b")
    assert not storage.root.exists()
    storage.ensure_root()
    storage.ensure_root()
    assert storage.root.is_dir()


def test_store_writes_file_with_unique_name(storage):
    uploaded = storage.store(io.BytesIO(b"image-bytes"), "Lunch.PNG", "image/png")

    assert uploaded.stored_path.read_bytes() == b"image-bytes"
    assert uploaded.stored_path.parent == storage.root
    assert uploaded.original_name == "Lunch.PNG"
    assert uploaded.mime_type == "image/png"
    assert uploaded.size_bytes == len(b"image-bytes")
    assert uploaded.extension == ".png"
    assert re.fullmatch(r"receipt-\d+-\d+\.png", uploaded.file_name)


def test_store_never_reuses_a_name(storage):
    names = {storage.store(io.BytesIO(b"x"), "r.jpg", "image/jpeg").file_name for _ in range(20)}
    assert len(names) == 20


def test_store_rejects_invalid_type_before_writing(storage):
    with pytest.raises(InvalidFileType):
        storage.store(io.BytesIO(b"data"), "notes.txt", "text/plain")
    assert not storage.root.exists() or stored_files(storage) == []


def test_store_requires_a_stream(storage):
    with pytest.raises(NoFileUploaded):
        storage.store(None, "r.jpg", "image/jpeg")


def test_store_enforces_size_limit(tmp_path):
    storage = ReceiptStorage(tmp_path / "receipts", max_upload_bytes=10)
    with pytest.raises(FileTooLarge) as exc_info:
        storage.store(io.BytesIO(b"x" * 11), "big.pdf", "application/pdf")
    assert exc_info.value.details["limit"] == 10
    assert stored_files(storage) == []


def test_store_accepts_file_at_exact_limit(tmp_path):
    storage = ReceiptStorage(tmp_path / "receipts", max_upload_bytes=10)
    uploaded = storage.store(io.BytesIO(b"x" * 10), "ok.pdf", "application/pdf")
    assert uploaded.size_bytes == 10


def test_resolve_and_read(storage):
    uploaded = storage.store(io.BytesIO(b"%PDF-1.4"), "r.pdf", "application/pdf")
    assert storage.resolve(uploaded.file_name) == uploaded.stored_path
    assert storage.read(uploaded.file_name) == b"%PDF-1.4"


@pytest.mark.parametrize("name", ["missing.pdf", "", "..", "../secret.pdf", "sub/r.pdf"])
def test_resolve_missing_or_outside_root(storage, name):
    storage.ensure_root()
    with pytest.raises(NotFound):
        storage.resolve(name)


def test_discard_is_best_effort(storage, tmp_path):
    uploaded = storage.store(io.BytesIO(b"x"), "r.gif", "image/gif")
    assert storage.discard(uploaded.stored_path) is True
    assert not uploaded.stored_path.exists()
    # Already gone
    assert storage.discard(uploaded.stored_path) is True
    # A directory cannot be unlinked; logged, not raised
    assert storage.discard(tmp_path) is False
