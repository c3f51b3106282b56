"""Parsers that turn user-facing strings into typed values.

Every parser raises ``ParseError`` on input it does not understand. Callers
treat that as "skip this field or filter", never as a fatal error.
"""

import string
from datetime import datetime, timedelta
from urllib.parse import urlparse

from dateutil.relativedelta import relativedelta

from .clock import Clock, start_of_day
from .exceptions import ParseError

# Tried in order; MM/DD/YYYY wins over DD/MM/YYYY for ambiguous input
DATE_FORMATS: tuple[tuple[str, bool], ...] = (
    ("%Y-%m-%d", False),
    ("%m/%d/%Y", False),
    ("%d/%m/%Y", False),
    ("%Y-%m-%d %H:%M", True),
)

PRIORITY_ALIASES: dict[str, int] = {
    "high": 1,
    "h": 1,
    "1": 1,
    "medium": 5,
    "med": 5,
    "m": 5,
    "5": 5,
    "low": 9,
    "l": 9,
    "9": 9,
    "none": 0,
    "n": 0,
    "0": 0,
}

# Trailing punctuation stripped from tag tokens; "#" is kept
TAG_TRAILING_PUNCTUATION = string.punctuation.replace("#", "")


def _parse(value: str, clock: Clock) -> tuple[datetime, bool]:
    """Resolve a date expression to ``(instant, has_time_of_day)``."""
    normalized = value.strip().lower()
    now = clock.now()

    if normalized == "today":
        return now, False
    if normalized == "tomorrow":
        return now + timedelta(days=1), False
    if normalized == "yesterday":
        return now - timedelta(days=1), False

    for fmt, has_time in DATE_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt), has_time
        except ValueError:
            continue

    # Relative expressions: "in 3 days", "in 2 weeks", "in 1 month"
    parts = normalized.split()
    if len(parts) == 3 and parts[0] == "in" and parts[1].isdigit():
        amount = int(parts[1])
        unit = parts[2]
        if amount > 0:
            if unit.startswith("day"):
                return now + timedelta(days=amount), False
            if unit.startswith("week"):
                return now + timedelta(weeks=amount), False
            if unit.startswith("month"):
                return now + relativedelta(months=amount), False

    raise ParseError("date", value)


def parse_date(value: str, clock: Clock) -> datetime:
    """Parse a date expression into an instant.

    Resolution order, first match wins:

    1. ``today``, ``tomorrow``, ``yesterday`` relative to ``clock.now()``
    2. ``YYYY-MM-DD``, ``MM/DD/YYYY``, ``DD/MM/YYYY``, ``YYYY-MM-DD HH:MM``
    3. ``in <n> day(s)|week(s)|month(s)`` with a positive ``n``

    ``03/04/2025`` is always March 4th because ``MM/DD/YYYY`` is tried first.

    Raises:
        ParseError: If the input matches none of the above.
    """
    instant, _ = _parse(value, clock)
    return instant


def parse_due_date(value: str, clock: Clock) -> datetime:
    """Parse a date expression for storage as a due or start date.

    Dates are kept at day granularity (midnight) unless the input carried an
    explicit time of day.
    """
    instant, has_time = _parse(value, clock)
    if has_time:
        return instant
    return start_of_day(instant)


def parse_priority(value: str) -> int:
    """Parse a priority token into an integer in 0-9.

    Accepts ``high``/``h``, ``medium``/``med``/``m``, ``low``/``l`` and
    ``none``/``n`` case-insensitively, or any integer from 0 to 9.
    """
    normalized = value.strip().lower()
    if normalized in PRIORITY_ALIASES:
        return PRIORITY_ALIASES[normalized]
    if normalized.isdigit() and 0 <= int(normalized) <= 9:
        return int(normalized)
    raise ParseError("priority", value)


def parse_url(value: str) -> str:
    """Validate an absolute URL and return it stripped of whitespace."""
    candidate = value.strip()
    parsed = urlparse(candidate)
    if not parsed.scheme or not (parsed.netloc or parsed.path):
        raise ParseError("url", value)
    return candidate


def _tag_from_token(token: str) -> str | None:
    if not token.startswith("#"):
        return None
    stripped = token.rstrip(TAG_TRAILING_PUNCTUATION)
    if len(stripped) <= 1:
        return None
    return stripped[1:]


def extract_tags(text: str | None) -> tuple[str, list[str]]:
    """Split ``text`` into its tag-free text and its tags.

    A tag is a whitespace-delimited token starting with ``#`` that is longer
    than one character once trailing punctuation is stripped. Tags keep
    their case and are deduplicated, first occurrence wins. Only the first
    physical occurrence of a repeated tag is removed from the text; later
    repeats stay in the clean text.

    Returns:
        Tuple of (clean_text, tags) with whitespace collapsed in clean_text.
    """
    if not text:
        return "", []

    kept: list[str] = []
    tags: list[str] = []
    for token in text.split():
        tag = _tag_from_token(token)
        if tag is None or tag in tags:
            kept.append(token)
            continue
        tags.append(tag)

    return " ".join(kept), tags


def canonical_tag(tag: str) -> str:
    """Return ``tag`` in ``#tag`` form."""
    tag = tag.strip()
    return tag if tag.startswith("#") else f"#{tag}"


def join_tags(clean_text: str, tags: list[str]) -> str:
    """Re-append tags after the clean text in canonical form."""
    parts = [clean_text] if clean_text else []
    parts.extend(canonical_tag(tag) for tag in tags)
    return " ".join(parts)


def canonical_title(title: str) -> str:
    """Move every tag in ``title`` to the end, in ``#tag`` form."""
    clean, tags = extract_tags(title)
    return join_tags(clean, tags)
