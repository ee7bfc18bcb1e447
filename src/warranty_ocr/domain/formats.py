"""Date layouts and locator patterns for invoice text.

Layouts are strptime formats tried against a located substring. Day-first
layouts come before month-first ones, so an ambiguous ``01/02/2025`` reads
as 1 February when only the first matching layout is taken.
"""

import re
from datetime import date, datetime

NUMERIC_LAYOUTS = (
    "%d/%m/%Y",
    "%m/%d/%Y",
    "%Y-%m-%d",
    "%d-%m-%Y",
    "%m-%d-%Y",
    "%d.%m.%Y",
    "%m.%d.%Y",
    "%Y.%m.%d",
    "%Y/%m/%d",
    # 2-digit years
    "%d/%m/%y",
    "%m/%d/%y",
    "%d-%m-%y",
    "%m-%d-%y",
    "%d.%m.%y",
    "%m.%d.%y",
)

_SEP = r"[/\-.]"

# Anchored on digit runs rather than \b: OCR output often glues dates to
# Hebrew or Latin letters, which count as word characters.
LOCATOR_PATTERNS = (
    re.compile(rf"(?<![0-9])[0-9]{{1,2}}{_SEP}[0-9]{{1,2}}{_SEP}[0-9]{{4}}(?![0-9])"),
    re.compile(rf"(?<![0-9])[0-9]{{4}}{_SEP}[0-9]{{1,2}}{_SEP}[0-9]{{1,2}}(?![0-9])"),
    re.compile(rf"(?<![0-9])[0-9]{{1,2}}{_SEP}[0-9]{{1,2}}{_SEP}[0-9]{{2}}(?![0-9])"),
)

ISO_PATTERN = re.compile(r"(?<![0-9])[0-9]{4}-[0-9]{2}-[0-9]{2}(?![0-9])")

# Handwritten dates: slashes with whitespace around them ("13 / 6 / 2025")
SPACED_PATTERN = re.compile(
    r"(?<![0-9])[0-9]{1,2}[ \t]*/[ \t]*[0-9]{1,2}[ \t]*/[ \t]*[0-9]{4}(?![0-9])"
)

_ARABIC_DIGITS = str.maketrans(
    "٠١٢٣٤٥٦٧٨٩"
    "۰۱۲۳۴۵۶۷۸۹",
    "0123456789" * 2,
)


def normalize_digits(text: str) -> str:
    """Map Arabic-Indic digits to ASCII digits."""
    return text.translate(_ARABIC_DIGITS)


def parse_layout(value: str, layout: str) -> date | None:
    """Parse value strictly with a single layout, None if it does not fit."""
    try:
        return datetime.strptime(value, layout).date()
    except ValueError:
        return None


def in_year_range(value: date, min_year: int, max_year: int) -> bool:
    return min_year <= value.year <= max_year
