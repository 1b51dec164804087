"""Merge scraped page data and AI suggestions into an ImportedOpportunityPreview.

Precedence for every field: AI-enhanced value, then scraped value, then a
structural fallback. The normalizer is pure: no I/O, same input -> same output.
"""

from typing import Any, Optional

from opportunity_import.models.preview import (
    ImportedOpportunityPreview,
    NormalizedImport,
    PreviewContacts,
    PreviewDocument,
)
from opportunity_import.models.scraped import ScrapedInfo, ScrapedOpportunity
from opportunity_import.parsing.fields import (
    clean_text,
    format_address,
    normalize_risk_level,
    parse_currency,
    parse_date_to_iso,
    parse_percentage,
)
from opportunity_import.resolver import EnhancedInput, as_enhanced, first_present, pick_enhanced_value

FALLBACK_PROJECT_NAME = "Imported Opportunity"
FALLBACK_CLIENT_NAME = "Unknown client"

# Probability assigned to any opportunity with a quantified value but no score.
# Confirm with product owners before extending this rule.
DEFAULT_QUANTIFIED_PROBABILITY = 45.0

# Enhancement keys per field, most specific first
PROJECT_NAME_KEYS = ("opportunity_name", "project_name", "project_title", "title")
CLIENT_NAME_KEYS = ("client_name", "organization_name", "company_name")
SUMMARY_KEYS = ("executive_summary", "summary", "opportunity_summary")
DESCRIPTION_KEYS = ("project_description", "description")
LOCATION_KEYS = ("location", "project_location", "address")
MARKET_SECTOR_KEYS = ("market_sector", "sector", "industry")
PROJECT_VALUE_KEYS = ("project_value", "estimated_value", "budget")
PROBABILITY_KEYS = ("win_probability", "match_score", "probability")
RISK_KEYS = ("risk_level", "risk", "risk_assessment")
EXPECTED_RFP_DATE_KEYS = ("expected_rfp_date", "rfp_date", "release_date")
DEADLINE_KEYS = ("deadline", "due_date", "submission_deadline")
DOCUMENT_KEYS = ("documents", "related_documents")


def format_currency(amount: float) -> str:
    """'$5,000,000' for whole amounts, '$1,234.50' otherwise."""
    if float(amount).is_integer():
        return f"${amount:,.0f}"
    return f"${amount:,.2f}"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _value_from_raw(raw: Any) -> tuple[Optional[float], Optional[str]]:
    """(numeric, display text) for one raw project value."""
    if _is_number(raw):
        numeric = parse_currency(raw)
        return numeric, format_currency(numeric) if numeric is not None else None
    if isinstance(raw, str):
        text = clean_text(raw)
        return (parse_currency(text) if text else None), text
    return None, None


def _resolve_project_value(
    bag: EnhancedInput, scraped: Optional[ScrapedOpportunity]
) -> tuple[Optional[float], Optional[str]]:
    enhanced_value = pick_enhanced_value(bag, PROJECT_VALUE_KEYS)
    if enhanced_value is not None:
        numeric, text = _value_from_raw(enhanced_value)
        if numeric is not None or text is not None:
            return numeric, text
    if scraped is None:
        return None, None
    if scraped.project_value_numeric is not None:
        numeric = parse_currency(scraped.project_value_numeric)
        if numeric is not None:
            text = clean_text(scraped.budget_text) or format_currency(numeric)
            return numeric, text
    return _value_from_raw(scraped.budget_text)


def _to_document(item: Any) -> Optional[PreviewDocument]:
    if isinstance(item, PreviewDocument):
        return item
    if isinstance(item, str):
        url = clean_text(item)
        return PreviewDocument(url=url) if url else None
    if hasattr(item, "model_dump"):
        item = item.model_dump()
    if isinstance(item, dict):
        url = clean_text(item.get("url") or item.get("href") or item.get("link"))
        title = clean_text(item.get("title") or item.get("name"))
        if not url and not title:
            return None
        return PreviewDocument(url=url, title=title, type=clean_text(item.get("type")))
    return None


def _to_documents(items: Any) -> Optional[list[PreviewDocument]]:
    if not isinstance(items, (list, tuple)):
        return None
    documents = [doc for doc in (_to_document(i) for i in items) if doc is not None]
    return documents or None


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) or _is_number(value):
        return clean_text(value)
    return None


def normalize_opportunity(
    source_url: str,
    info: Optional[ScrapedInfo] = None,
    opportunity: Optional[ScrapedOpportunity] = None,
    enhanced: EnhancedInput = None,
) -> NormalizedImport:
    """
    Build the canonical preview for one scraped opportunity.
    Returns the preview together with the resolved summary (ai_summary).
    """
    bag = as_enhanced(enhanced)
    scraped = opportunity or ScrapedOpportunity()
    page = info or ScrapedInfo()

    def enhanced_text(keys: tuple[str, ...]):
        return lambda: _text(pick_enhanced_value(bag, keys))

    project_name = first_present(
        enhanced_text(PROJECT_NAME_KEYS),
        lambda: clean_text(scraped.title),
        lambda: clean_text(page.name),
        lambda: clean_text(source_url),
    ) or FALLBACK_PROJECT_NAME

    client_name = first_present(
        enhanced_text(CLIENT_NAME_KEYS),
        lambda: clean_text(scraped.client),
        lambda: clean_text(page.name),
    ) or FALLBACK_CLIENT_NAME

    status = clean_text(scraped.status)
    summary = first_present(
        enhanced_text(SUMMARY_KEYS),
        lambda: clean_text(scraped.description),
        lambda: status,
    )
    description = first_present(
        enhanced_text(DESCRIPTION_KEYS),
        lambda: clean_text(scraped.description),
        lambda: summary,
    )

    location = first_present(
        enhanced_text(LOCATION_KEYS),
        lambda: clean_text(scraped.location),
        lambda: format_address(page.address),
    )

    market_sector = first_present(
        enhanced_text(MARKET_SECTOR_KEYS),
        lambda: ", ".join(t for t in scraped.tags if t.strip()) or None,
    )

    value_numeric, value_text = _resolve_project_value(bag, opportunity)

    probability = parse_percentage(pick_enhanced_value(bag, PROBABILITY_KEYS))
    if probability is None and value_numeric is not None:
        probability = DEFAULT_QUANTIFIED_PROBABILITY

    risk_level = first_present(
        lambda: normalize_risk_level(pick_enhanced_value(bag, RISK_KEYS)),
        lambda: normalize_risk_level(status),
    )

    # Scraped pages carry a single date; it backs both fields
    expected_rfp_date = first_present(
        lambda: parse_date_to_iso(pick_enhanced_value(bag, EXPECTED_RFP_DATE_KEYS)),
        lambda: parse_date_to_iso(scraped.deadline),
    )
    deadline = first_present(
        lambda: parse_date_to_iso(pick_enhanced_value(bag, DEADLINE_KEYS)),
        lambda: parse_date_to_iso(scraped.deadline),
    )

    documents = first_present(
        lambda: _to_documents(pick_enhanced_value(bag, DOCUMENT_KEYS)),
        lambda: _to_documents(scraped.documents),
    )

    preview = ImportedOpportunityPreview(
        project_name=project_name,
        client_name=client_name,
        description=description,
        summary=summary,
        status=status,
        location=location,
        market_sector=market_sector,
        project_value_numeric=value_numeric,
        project_value_text=value_text,
        probability=probability,
        risk_level=risk_level,
        expected_rfp_date=expected_rfp_date,
        deadline=deadline,
        contacts=PreviewContacts(emails=list(page.email), phones=list(page.phone)),
        documents=documents,
        tags=list(scraped.tags),
        detail_url=clean_text(scraped.detail_url) or clean_text(source_url),
    )
    return NormalizedImport(preview=preview, ai_summary=summary)
