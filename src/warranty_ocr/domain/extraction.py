"""Candidate date extraction from noisy OCR text.

Each strategy is a pure function over the text. Results are unioned in
strategy order and deduplicated by calendar date, keeping first-seen order.
"""

import logging
import re
from collections.abc import Iterable, Iterator
from datetime import date

from ..config import DEFAULT_MAX_YEAR, DEFAULT_MIN_TOKEN_LENGTH, DEFAULT_MIN_YEAR
from .formats import (
    ISO_PATTERN,
    LOCATOR_PATTERNS,
    NUMERIC_LAYOUTS,
    SPACED_PATTERN,
    in_year_range,
    normalize_digits,
    parse_layout,
)

logger = logging.getLogger(__name__)


def _first_layout_match(
    value: str, layouts: Iterable[str], min_year: int, max_year: int
) -> date | None:
    for layout in layouts:
        parsed = parse_layout(value, layout)
        if parsed and in_year_range(parsed, min_year, max_year):
            return parsed
    return None


def dates_from_patterns(text: str, min_year: int, max_year: int) -> Iterator[date]:
    """Locate date-shaped substrings and take the first layout that fits."""
    for pattern in LOCATOR_PATTERNS:
        for match in pattern.finditer(text):
            parsed = _first_layout_match(match.group(), NUMERIC_LAYOUTS, min_year, max_year)
            if parsed:
                yield parsed
            else:
                logger.debug(f"No layout fits {match.group()!r}")


def dates_from_tokens(
    text: str, min_year: int, max_year: int, min_token_length: int
) -> Iterator[date]:
    """Parse whole whitespace-separated tokens, keeping every layout that fits."""
    for token in text.split():
        if len(token) < min_token_length:
            continue
        for layout in NUMERIC_LAYOUTS:
            parsed = parse_layout(token, layout)
            if parsed and in_year_range(parsed, min_year, max_year):
                yield parsed


def dates_from_iso(text: str, min_year: int, max_year: int) -> Iterator[date]:
    """Strict yyyy-MM-dd literals."""
    for match in ISO_PATTERN.finditer(text):
        try:
            parsed = date.fromisoformat(match.group())
        except ValueError:
            logger.debug(f"Invalid ISO date {match.group()!r}")
            continue
        if in_year_range(parsed, min_year, max_year):
            yield parsed


def dates_from_readings(text: str, min_year: int, max_year: int) -> Iterator[date]:
    """Every reading of each located date, day-first before month-first.

    Covers dates glued to letters or punctuation, where the whole-word parse
    never sees them, and handwritten dates with whitespace around the slashes.
    """
    for pattern in (*LOCATOR_PATTERNS, SPACED_PATTERN):
        for match in pattern.finditer(text):
            compact = re.sub(r"\s+", "", match.group())
            for layout in NUMERIC_LAYOUTS:
                parsed = parse_layout(compact, layout)
                if parsed and in_year_range(parsed, min_year, max_year):
                    yield parsed


def extract_dates(
    text: str,
    *,
    min_year: int = DEFAULT_MIN_YEAR,
    max_year: int = DEFAULT_MAX_YEAR,
    min_token_length: int = DEFAULT_MIN_TOKEN_LENGTH,
) -> list[date]:
    """Extract distinct candidate dates from OCR text.

    Never raises; fragments that do not parse are skipped. Text without
    digits yields an empty list.
    """
    if not text:
        return []

    text = normalize_digits(text)
    if not any(ch.isdigit() for ch in text):
        return []

    found: dict[date, None] = {}
    strategies = (
        dates_from_patterns(text, min_year, max_year),
        dates_from_tokens(text, min_year, max_year, min_token_length),
        dates_from_iso(text, min_year, max_year),
        dates_from_readings(text, min_year, max_year),
    )
    for strategy in strategies:
        for candidate in strategy:
            found.setdefault(candidate, None)

    dates = list(found)
    logger.info(f"Extracted {len(dates)} unique dates: {[d.isoformat() for d in dates]}")
    return dates
