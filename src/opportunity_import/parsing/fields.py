"""Parsers for loosely typed scraped and AI-suggested field values.

Every parser returns None for input it cannot interpret; none of them raise.
"""

import math
import re
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional, Union

from dateutil import parser as date_parser

from opportunity_import.models.preview import RiskLevel
from opportunity_import.models.scraped import ScrapedAddress

# Characters kept by the plain numeric strip
_NON_NUMERIC = re.compile(r"[^0-9.]")

# "5M", "$2.5 million", "250k", "1.2bn"
_MAGNITUDE_PATTERN = re.compile(
    r"(\d[\d,]*(?:\.\d+)?)\s*(thousand|million|billion|mm|bn|k|m|b)\b",
    re.IGNORECASE,
)
_MAGNITUDES = {
    "k": 1_000,
    "thousand": 1_000,
    "m": 1_000_000,
    "mm": 1_000_000,
    "million": 1_000_000,
    "b": 1_000_000_000,
    "bn": 1_000_000_000,
    "billion": 1_000_000_000,
}

# Substring -> risk level, checked in order
_RISK_KEYWORDS: list[tuple[str, RiskLevel]] = [
    ("low", RiskLevel.LOW),
    ("medium", RiskLevel.MEDIUM),
    ("moderate", RiskLevel.MEDIUM),
    ("high", RiskLevel.HIGH),
]

_ADDRESS_PARTS = ("line1", "line2", "city", "state", "country_code", "pincode")

# Fills missing components of partial dates ("June 2025" -> 2025-06-01)
_DATE_DEFAULT = datetime(2000, 1, 1)

DEFAULT_MAX_LENGTH = 255


def _finite(number: float) -> Optional[float]:
    return number if math.isfinite(number) else None


def clean_text(value: Any) -> Optional[str]:
    """Trimmed string, or None when missing/blank."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_currency(value: Any, *, magnitude: bool = True) -> Optional[float]:
    """
    Parse a currency amount from a number or free text.
    Numbers pass through unchanged (non-finite -> None). Strings are reduced to
    digits and decimal points. With magnitude=True a K/M/B (or thousand/
    million/billion) suffix multiplies the amount: "$5M" -> 5000000.0.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _finite(float(value))
    text = str(value).strip()
    if not text:
        return None
    if magnitude:
        match = _MAGNITUDE_PATTERN.search(text)
        if match:
            try:
                base = float(match.group(1).replace(",", ""))
            except ValueError:
                return None
            return _finite(base * _MAGNITUDES[match.group(2).lower()])
    stripped = _NON_NUMERIC.sub("", text)
    if not stripped:
        return None
    try:
        return _finite(float(stripped))
    except ValueError:
        return None


def parse_percentage(value: Any) -> Optional[float]:
    """Parse a percentage and clamp it to [0, 100]. Out-of-range input is clamped, not rejected."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = _finite(float(value))
    else:
        text = str(value).strip().rstrip("%").strip().replace(",", "")
        if not text:
            return None
        try:
            number = _finite(float(text))
        except ValueError:
            return None
    if number is None:
        return None
    return max(0.0, min(100.0, number))


def parse_date_to_iso(value: Union[datetime, date, str, None]) -> Optional[str]:
    """
    Convert a date-like value to an ISO-8601 string in UTC.
    Naive values are taken as UTC. Returns None for anything unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        # Month names alone ("June") are too vague to place on a calendar
        if not text or not any(ch.isdigit() for ch in text):
            return None
        try:
            parsed = date_parser.parse(text, default=_DATE_DEFAULT)
        except (ValueError, OverflowError):
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).isoformat()


def normalize_risk_level(value: Any) -> Optional[RiskLevel]:
    """Map free text such as 'Medium risk' to a RiskLevel; None when nothing matches."""
    if not value:
        return None
    if isinstance(value, RiskLevel):
        return value
    text = str(value).lower()
    for keyword, level in _RISK_KEYWORDS:
        if keyword in text:
            return level
    return None


def format_address(address: Union[ScrapedAddress, Mapping[str, Any], None]) -> Optional[str]:
    """Join the non-empty address parts with ', '."""
    if address is None:
        return None
    data = address.model_dump() if isinstance(address, ScrapedAddress) else dict(address)
    parts = [clean_text(data.get(name)) for name in _ADDRESS_PARTS]
    parts = [p for p in parts if p]
    return ", ".join(parts) if parts else None


def sanitize_text(value: Any, max_length: int = DEFAULT_MAX_LENGTH) -> Optional[str]:
    """Trim, then hard-truncate to max_length characters."""
    text = clean_text(value)
    if text is None:
        return None
    return text[:max_length]
