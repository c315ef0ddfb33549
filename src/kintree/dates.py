"""Lenient date normalization for birth and death dates."""

from datetime import date, datetime
import re

MONTHS = {
    name: number
    for number, names in enumerate(
        [
            ("JAN", "JANUARY"),
            ("FEB", "FEBRUARY"),
            ("MAR", "MARCH"),
            ("APR", "APRIL"),
            ("MAY",),
            ("JUN", "JUNE"),
            ("JUL", "JULY"),
            ("AUG", "AUGUST"),
            ("SEP", "SEPT", "SEPTEMBER"),
            ("OCT", "OCTOBER"),
            ("NOV", "NOVEMBER"),
            ("DEC", "DECEMBER"),
        ],
        start=1,
    )
    for name in names
}

QUALIFIERS = re.compile(
    r"^(ABOUT|ABT\.?|BEFORE|BEF\.?|AFTER|AFT\.?|EST\.?|CAL\.?|CIRCA|CA\.?|AROUND):?\s*",
    flags=re.IGNORECASE,
)


def _iso(year: int, month: int, day: int) -> str | None:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def _month(name: str) -> int | None:
    return MONTHS.get(name.upper().rstrip("."))


def normalize_date(value) -> str | None:
    """
    Normalize a date value into ISO format (YYYY-MM-DD).
    Returns None if the value is empty or cannot be parsed.

    Accepts date/datetime objects and strings such as:
    - "1839-08-29" or "1839-08-29T00:00:00Z"
    - "25 NOV 1954", "08 March 1893"
    - "NOV 1954", "May, 1837"
    - "April 17, 1850"
    - "05/15/1923" (MM/DD/YYYY)
    - "1698", "ABT 1905"
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    s = QUALIFIERS.sub("", str(value).strip().strip("()").rstrip("?")).strip()
    if not s:
        return None

    # ISO date, optionally followed by a time component; 00 month/day default to 1
    match = re.match(r"^(\d{4})-(\d{2})-(\d{2})(?:[T ].*)?$", s)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _iso(year, month or 1, day or 1)

    match = re.match(r"^(\d{1,2})\s+([A-Za-z]+)\.?\s*(\d{4})$", s)
    if match:
        month = _month(match.group(2))
        return _iso(int(match.group(3)), month, int(match.group(1))) if month else None

    match = re.match(r"^([A-Za-z]+)\.?,?\s*(\d{4})$", s)
    if match:
        month = _month(match.group(1))
        return _iso(int(match.group(2)), month, 1) if month else None

    match = re.match(r"^([A-Za-z]+)\.?\s*(\d{1,2}),?\s*(\d{4})$", s)
    if match:
        month = _month(match.group(1))
        return _iso(int(match.group(3)), month, int(match.group(2))) if month else None

    match = re.match(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$", s)
    if match:
        return _iso(int(match.group(3)), int(match.group(1)), int(match.group(2)))

    match = re.match(r"^(\d{4})$", s)
    if match:
        return _iso(int(match.group(1)), 1, 1)

    return None
