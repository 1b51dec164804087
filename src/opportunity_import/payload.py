"""Build the backend create-opportunity payload from a normalized preview."""

import math
from typing import Optional

from opportunity_import.models.preview import ImportedOpportunityPreview, PreviewDocument
from opportunity_import.models.staging import OpportunityCreatePayload


def round_score(probability: Optional[float]) -> Optional[int]:
    """Nearest integer, halves rounded up; None passes through."""
    if probability is None:
        return None
    return int(math.floor(probability + 0.5))


def _document_line(doc: PreviewDocument) -> Optional[str]:
    if not doc.url:
        return None
    if doc.title and doc.title != doc.url:
        return f"- {doc.title}: {doc.url}"
    return f"- {doc.url}"


def compose_description(preview: ImportedOpportunityPreview, source_url: str) -> str:
    """
    Human-readable description: primary text, then status, location, market sector,
    related documents and contacts, each only when present and not already part of
    the primary text. The source line is always last.
    """
    primary = preview.description or preview.summary or ""
    primary_lower = primary.lower()
    sections: list[str] = [primary] if primary else []

    def is_new(value: Optional[str]) -> bool:
        return bool(value) and value.lower() not in primary_lower

    if is_new(preview.status):
        sections.append(f"**Status:** {preview.status}")
    if is_new(preview.location):
        sections.append(f"**Location:** {preview.location}")
    if is_new(preview.market_sector):
        sections.append(f"**Market Sector:** {preview.market_sector}")

    doc_lines = [
        line
        for line in (_document_line(d) for d in preview.documents or [] if is_new(d.url))
        if line
    ]
    if doc_lines:
        sections.append("**Related Documents:**\n" + "\n".join(doc_lines))

    contact_lines = [f"- Email: {e}" for e in preview.contacts.emails if is_new(e)]
    contact_lines += [f"- Phone: {p}" for p in preview.contacts.phones if is_new(p)]
    if contact_lines:
        sections.append("**Contact Information:**\n" + "\n".join(contact_lines))

    sections.append(f"**Source:** {source_url}")
    return "\n\n".join(sections)


def build_create_payload(
    preview: ImportedOpportunityPreview, source_url: str
) -> OpportunityCreatePayload:
    """Serialize a preview into the create-opportunity payload. No extra validation."""
    return OpportunityCreatePayload(
        project_name=preview.project_name,
        client_name=preview.client_name,
        description=compose_description(preview, source_url),
        risk_level=preview.risk_level.value if preview.risk_level else None,
        project_value=preview.project_value_numeric,
        expected_rfp_date=preview.expected_rfp_date,
        deadline=preview.deadline,
        state=preview.location,
        market_sector=preview.market_sector,
        match_score=round_score(preview.probability),
    )
