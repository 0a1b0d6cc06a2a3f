"""Flexible date parsing for backend date fields.

Backends encode dates inconsistently, per deployment and per field: some
return ISO-8601 timestamps, others Unix epoch seconds as decimal strings. A
malformed date must never fail a whole result set, so the parser returns
``None`` instead of raising.

Parsing Order (first success wins):
    1. ISO-8601 extended form: anything starting with ``YYYY-MM-DD`` that
       ``datetime.fromisoformat`` accepts, with a ``Z`` suffix read as UTC.
       Naive timestamps are taken as UTC.
    2. Optionally signed decimal integer: whole seconds since the Unix epoch.
    3. Anything else: ``None``.

Each attempt is a small function returning ``Optional[datetime]`` so the
chain short-circuits on values, not on exceptions.

Usage:
    >>> from searchcomponents.dates import parse_date
    >>> parse_date("1609459200")
    datetime.datetime(2021, 1, 1, 0, 0, tzinfo=datetime.timezone.utc)
    >>> parse_date("2021-01-01T10")
    datetime.datetime(2021, 1, 1, 10, 0, tzinfo=datetime.timezone.utc)
    >>> parse_date("not-a-date") is None
    True
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional


__all__ = ["EPOCH", "parse_date", "parse_epoch_seconds", "parse_iso8601"]


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Extended calendar date prefix; basic-form digits go to the epoch attempt
_ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")
_FRACTION_PATTERN = re.compile(r"(\d{2}:\d{2}:\d{2})[.,](\d+)")

# 20 digits already exceed the datetime range in seconds
_MAX_EPOCH_DIGITS = 20
_EPOCH_PATTERN = re.compile(r"^[+-]?\d+$")


def _six_digit_fraction(match: re.Match[str]) -> str:
    return f"{match.group(1)}.{match.group(2)[:6].ljust(6, '0')}"


def parse_iso8601(raw: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, returning None when it is not one.

    Args:
        raw: Candidate timestamp string, already stripped.

    Returns:
        Timezone-aware datetime, or None.
    """
    if _ISO_DATE_PREFIX.match(raw) is None:
        return None

    candidate = raw
    if candidate[-1] in "Zz":
        candidate = candidate[:-1] + "+00:00"
    # Fractions beyond microseconds are truncated
    candidate = _FRACTION_PATTERN.sub(_six_digit_fraction, candidate, count=1)

    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_epoch_seconds(raw: str) -> Optional[datetime]:
    """Parse a decimal integer as whole seconds since the Unix epoch.

    Args:
        raw: Candidate string, already stripped.

    Returns:
        UTC datetime, or None for non-numeric or out-of-range input.
    """
    if _EPOCH_PATTERN.match(raw) is None:
        return None
    if len(raw.lstrip("+-")) > _MAX_EPOCH_DIGITS:
        return None
    try:
        return EPOCH + timedelta(seconds=int(raw))
    except (OverflowError, ValueError):
        return None


_ATTEMPTS: tuple[Callable[[str], Optional[datetime]], ...] = (
    parse_iso8601,
    parse_epoch_seconds,
)


def parse_date(raw: Optional[str]) -> Optional[datetime]:
    """Convert a backend date string into a point in time.

    Never raises: an unparseable value is treated as an absent date.

    Args:
        raw: Raw string from the backend, possibly None.

    Returns:
        Timezone-aware datetime, or None when no encoding matched.
    """
    if raw is None:
        return None
    candidate = str(raw).strip()
    if not candidate:
        return None
    for attempt in _ATTEMPTS:
        parsed = attempt(candidate)
        if parsed is not None:
            return parsed
    return None
