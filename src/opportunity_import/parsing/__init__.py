"""Field parsers for scraped and AI-suggested values."""

from opportunity_import.parsing.fields import (
    clean_text,
    format_address,
    normalize_risk_level,
    parse_currency,
    parse_date_to_iso,
    parse_percentage,
    sanitize_text,
)

__all__ = [
    "clean_text",
    "format_address",
    "normalize_risk_level",
    "parse_currency",
    "parse_date_to_iso",
    "parse_percentage",
    "sanitize_text",
]
