"""
Parsers for extracting transaction fields from receipt text.

Each field is resolved by its own ordered cascade of patterns (see
``utils.AMOUNT_PATTERNS`` and ``utils.DATE_PATTERNS``); the first pattern
that yields a usable value wins. Nothing here raises on unrecognized text:
every field has a default.
"""

import datetime as dt
from decimal import Decimal
from typing import List, Optional, Tuple

from .logger import setup_logger
from .models import ParsedFields, DEFAULT_CATEGORY, DEFAULT_DESCRIPTION, EXPENSE
from .utils import (AMOUNT_PATTERNS, DATE_PATTERNS, DESCRIPTION_NOISE_PATTERNS,
                    DESCRIPTION_LINE_COUNT, DESCRIPTION_MAX_LENGTH, NUMBER_RE,
                    normalize_amount)

logger = setup_logger(__name__)


def match_amount(text: str) -> Optional[Tuple[str, Decimal]]:
    """
    Run the amount cascade.

    Returns:
        Tuple of (pattern name, amount), or None if no pattern matches
    """
    for name, pattern in AMOUNT_PATTERNS:
        m = pattern.search(text)
        if not m:
            continue
        # First number inside the first match only
        number = NUMBER_RE.search(m.group(0))
        if number:
            value = normalize_amount(number.group(0))
            if value is not None:
                return name, value
    return None


def parse_amount(text: str) -> Decimal:
    """Extract the transaction amount; 0 when nothing amount-like is found."""
    found = match_amount(text)
    if found is None:
        logger.debug("No amount found, defaulting to 0")
        return Decimal("0")
    name, value = found
    logger.debug(f"Amount {value} (pattern: {name})")
    return value


def match_date(text: str) -> Optional[Tuple[str, dt.date]]:
    """
    Run the date cascade.

    Only the first match of each pattern is considered. A match that is not
    a real calendar date (e.g. 31/02/2024) hands over to the next pattern.
    """
    for name, pattern, order in DATE_PATTERNS:
        m = pattern.search(text)
        if not m:
            continue
        parts = dict(zip(order, (int(g) for g in m.groups())))
        try:
            return name, dt.date(parts["year"], parts["month"], parts["day"])
        except ValueError:
            logger.debug(f"Ignoring invalid date {m.group(0)!r} (pattern: {name})")
    return None


def parse_date(text: str, today: Optional[dt.date] = None) -> dt.date:
    """Extract the receipt date, falling back to the processing date."""
    found = match_date(text)
    if found is None:
        fallback = today or dt.date.today()
        logger.debug(f"No date found, using processing date {fallback.isoformat()}")
        return fallback
    name, value = found
    logger.debug(f"Date {value.isoformat()} (pattern: {name})")
    return value


def _is_noise(line: str) -> bool:
    return any(p.match(line) for p in DESCRIPTION_NOISE_PATTERNS)


def parse_description(text: str) -> str:
    """First three meaningful lines, joined by spaces and capped at 255 chars."""
    lines = [ln.strip() for ln in text.splitlines()]
    meaningful: List[str] = [ln for ln in lines if ln and not _is_noise(ln)]
    description = " ".join(meaningful[:DESCRIPTION_LINE_COUNT]) or DEFAULT_DESCRIPTION
    return description[:DESCRIPTION_MAX_LENGTH]


def parse_receipt_text(text: str, today: Optional[dt.date] = None) -> ParsedFields:
    """
    Infer transaction fields from raw receipt text.

    Receipts are always booked as General expenses.

    Args:
        text: Raw OCR / PDF text
        today: Processing date used when no date is found (defaults to today)

    Returns:
        ParsedFields
    """
    text = text or ""
    return ParsedFields(
        amount=parse_amount(text),
        description=parse_description(text),
        date=parse_date(text, today=today),
        category=DEFAULT_CATEGORY,
        type=EXPENSE,
    )

