"""
Utility functions and constants for receipt processing.
"""

import re
import secrets
import string
import time
from decimal import Decimal, InvalidOperation
from pathlib import PurePath
from typing import Optional

# File type constants
IMAGE_EXTS = {".jpeg", ".jpg", ".png", ".gif"}
PDF_EXTS = {".pdf"}
ALLOWED_EXTS = IMAGE_EXTS | PDF_EXTS

# Declared mime types accepted for each extension
MIME_TYPES_BY_EXT = {
    ".jpeg": {"image/jpeg", "image/jpg"},
    ".jpg": {"image/jpeg", "image/jpg"},
    ".png": {"image/png"},
    ".gif": {"image/gif"},
    ".pdf": {"application/pdf"},
}
ALLOWED_MIME_TYPES = set().union(*MIME_TYPES_BY_EXT.values())

STORED_NAME_PREFIX = "receipt-"
DESCRIPTION_MAX_LENGTH = 255
DESCRIPTION_LINE_COUNT = 3

# Pattern constants for parsing, highest priority first.
# Each amount pattern's first match is scanned for its first number.
AMOUNT_PATTERNS = [
    ("keyword", re.compile(r"(?:total|amount|sum)[\s:]*(?:₹|rs\.?|inr)?\s*(\d+\.\d{2})", re.IGNORECASE | re.ASCII)),
    ("rupee_symbol", re.compile(r"₹\s*(\d+\.\d{2})", re.ASCII)),
    ("rs_prefix", re.compile(r"rs\.?\s*(\d+\.\d{2})", re.IGNORECASE | re.ASCII)),
    ("inr_prefix", re.compile(r"inr\s*(\d+\.\d{2})", re.IGNORECASE | re.ASCII)),
    ("bare", re.compile(r"(\d+\.\d{2})", re.ASCII)),
]

NUMBER_RE = re.compile(r"\d+(?:\.\d{2})?", re.ASCII)

# (name, pattern, order of the captured groups)
DATE_PATTERNS = [
    ("d/m/yyyy", re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})", re.ASCII), ("day", "month", "year")),
    ("yyyy-mm-dd", re.compile(r"(\d{4})-(\d{2})-(\d{2})", re.ASCII), ("year", "month", "day")),
    ("d-m-yyyy", re.compile(r"(\d{1,2})-(\d{1,2})-(\d{4})", re.ASCII), ("day", "month", "year")),
]

# Lines that are only date/amount noise or separators such as ***** or =====
DESCRIPTION_NOISE_PATTERNS = [
    re.compile(r"^\d+$", re.ASCII),
    re.compile(r"^[\d\s" + re.escape(string.punctuation) + r"]+$", re.ASCII),
]


def normalize_extension(name: str) -> str:
    """Lowercase extension of a filename, with the leading dot ('' if none)."""
    return PurePath(name).suffix.lower()


def normalize_amount(s: str) -> Optional[Decimal]:
    """Normalize amount string to Decimal."""
    if not s:
        return None
    s = s.replace(",", "").replace(" ", "")
    try:
        return Decimal(s)
    except InvalidOperation:
        return None


def generate_stored_name(extension: str) -> str:
    """Timestamp plus random suffix, e.g. receipt-1700000000000-123456789.png"""
    millis = int(time.time() * 1000)
    suffix = secrets.randbelow(10 ** 9)
    return f"{STORED_NAME_PREFIX}{millis}-{suffix}{extension}"
