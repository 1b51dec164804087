"""Pipeline orchestration: scrape -> enhance -> normalize -> dedup -> stage."""

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from opportunity_import.connectors.base import BaseEnhancer, BaseScraper, BaseStagingStore
from opportunity_import.dedup import (
    ImportReport,
    SignatureSet,
    signature_for_payload,
    signature_for_preview,
)
from opportunity_import.errors import EnrichmentError, StagingWriteError
from opportunity_import.models.enhanced import EnhancedData
from opportunity_import.models.preview import NormalizedImport, RiskLevel
from opportunity_import.models.scraped import ScrapedInfo, ScrapedOpportunity, ScrapeResult
from opportunity_import.models.staging import OpportunityCreatePayload, TempOpportunityCreate
from opportunity_import.normalizer import normalize_opportunity
from opportunity_import.parsing.fields import DEFAULT_MAX_LENGTH, parse_percentage, sanitize_text
from opportunity_import.payload import build_create_payload, round_score
from opportunity_import.resolver import pick_enhanced_value

logger = logging.getLogger(__name__)

ENHANCEMENT_UNAVAILABLE = "AI enhancement unavailable. Using scraped details only."

SUMMARY_MAX_LENGTH = 2000

RISK_SCORES = {
    RiskLevel.HIGH: 80,
    RiskLevel.MEDIUM: 55,
    RiskLevel.LOW: 20,
}

STRATEGIC_FIT_KEYS = ("strategic_fit_score", "strategic_fit")

# Scraped fields forwarded to the enrichment call as hints
_PARTIAL_FIELDS = (
    "title",
    "client",
    "location",
    "budget_text",
    "deadline",
    "description",
    "status",
    "tags",
)


def risk_score_for(level: Optional[RiskLevel]) -> Optional[int]:
    """Numeric band for a risk level: high 80, medium 55, low 20."""
    return RISK_SCORES.get(level) if level else None


def partial_data_for(
    opportunity: ScrapedOpportunity, info: Optional[ScrapedInfo] = None
) -> dict[str, Any]:
    """Non-empty scraped fields sent to the enrichment service."""
    data = opportunity.model_dump(include=set(_PARTIAL_FIELDS))
    partial = {k: v for k, v in data.items() if v not in (None, "", [])}
    if info and info.name and "client" not in partial:
        partial["client"] = info.name
    return partial


def enhance_opportunity(
    enhancer: Optional[BaseEnhancer],
    detail_url: str,
    opportunity: ScrapedOpportunity,
    info: Optional[ScrapedInfo] = None,
) -> tuple[Optional[EnhancedData], list[str]]:
    """
    Call the enhancer for one opportunity. Returns (enhanced_data, warnings).
    A failed call yields (None, [ENHANCEMENT_UNAVAILABLE]) so the batch continues.
    """
    if enhancer is None:
        return None, []
    try:
        result = enhancer.enhance(detail_url, partial_data_for(opportunity, info))
    except EnrichmentError as e:
        logger.warning("Enhancement failed for %s: %s", detail_url, e)
        return None, [ENHANCEMENT_UNAVAILABLE]
    return result.enhanced_data, list(result.warnings)


def build_temp_payload(
    normalized: NormalizedImport,
    source_url: str,
    *,
    create_payload: Optional[OpportunityCreatePayload] = None,
    enhanced: Optional[EnhancedData] = None,
    warnings: Optional[list[str]] = None,
    imported_at: Optional[datetime] = None,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> TempOpportunityCreate:
    """Staging-store payload for one normalized candidate; short text fields are truncated."""
    preview = normalized.preview
    create_payload = create_payload or build_create_payload(preview, source_url)
    imported_at = imported_at or datetime.now(timezone.utc)
    documents = [d.url for d in preview.documents or [] if d.url]
    strategic_fit = parse_percentage(pick_enhanced_value(enhanced, STRATEGIC_FIT_KEYS))

    return TempOpportunityCreate(
        project_title=sanitize_text(preview.project_name, max_length),
        client_name=sanitize_text(preview.client_name, max_length),
        location=sanitize_text(preview.location, max_length),
        budget_text=sanitize_text(preview.project_value_text, max_length),
        deadline=preview.deadline,
        documents=documents or None,
        tags=[sanitize_text(t, max_length) for t in preview.tags if t.strip()] or None,
        ai_summary=sanitize_text(normalized.ai_summary, SUMMARY_MAX_LENGTH),
        ai_metadata={
            "preview": preview.model_dump(mode="json"),
            "enhanced_data": enhanced.to_plain() if enhanced else None,
            "warnings": list(warnings or []),
            "source_url": source_url,
            "imported_at": imported_at.isoformat(),
        },
        raw_payload={**create_payload.model_dump(mode="json"), "source_url": source_url},
        match_score=round_score(preview.probability),
        risk_score=risk_score_for(preview.risk_level),
        strategic_fit_score=round_score(strategic_fit),
        reviewer_notes=None,
    )


def run_import(
    urls: list[str],
    scraper: BaseScraper,
    staging_store: BaseStagingStore,
    enhancer: Optional[BaseEnhancer] = None,
    *,
    signatures: Optional[SignatureSet] = None,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> ImportReport:
    """
    Import opportunities from urls into the staging store.
    Candidates are enhanced, checked and stored one at a time, in scrape order;
    the signature set grows as it goes so duplicates within the batch are skipped.
    Raises StagingWriteError (with .report) if a write fails; earlier writes stay.
    """
    report = ImportReport()
    results = scraper.scrape(urls)

    if signatures is None:
        signatures = SignatureSet.from_records(staging_store.list_existing())

    for result in results:
        if result.error:
            logger.warning("Scrape failed for %s: %s", result.url, result.error)
            report.errors.append(f"{result.url}: {result.error}")
            continue
        if not result.opportunities:
            logger.info("No opportunities found on %s", result.url)

        for opportunity in result.opportunities:
            detail_url = opportunity.detail_url or result.url
            enhanced, warnings = enhance_opportunity(enhancer, detail_url, opportunity, result.info)
            for warning in warnings:
                report.add_warning(warning)

            normalized = normalize_opportunity(result.url, result.info, opportunity, enhanced)
            payload = build_temp_payload(
                normalized,
                result.url,
                enhanced=enhanced,
                warnings=warnings,
                max_length=max_length,
            )

            # Signed on the stored (truncated) fields so re-imports match staged records
            signature = signature_for_payload(payload)
            if signatures.check_and_add(signature):
                logger.debug("Skipping duplicate lead %s", signature)
                report.skipped_duplicates += 1
                continue

            try:
                record = staging_store.create_temp(payload)
            except StagingWriteError as e:
                report.failed += 1
                report.errors.append(str(e))
                e.report = report
                raise
            report.stored += 1
            report.stored_records.append(record)

    logger.info(
        "Import finished: %d stored, %d duplicates skipped, %d errors",
        report.stored,
        report.skipped_duplicates,
        len(report.errors),
    )
    return report


def preview_scrape_results(
    results: Iterable[ScrapeResult],
    enhanced_by_url: Optional[Mapping[str, Any]] = None,
) -> list[dict[str, Any]]:
    """
    Offline normalization of saved scrape results (no enrichment calls, no storage).
    enhanced_by_url maps a detail or page URL to an enhancement bag.
    """
    enhanced_by_url = enhanced_by_url or {}
    previews: list[dict[str, Any]] = []
    for result in results:
        if result.error:
            previews.append({"source_url": result.url, "error": result.error})
            continue
        for opportunity in result.opportunities:
            bag = enhanced_by_url.get(opportunity.detail_url or "") or enhanced_by_url.get(result.url)
            normalized = normalize_opportunity(result.url, result.info, opportunity, bag)
            previews.append(
                {
                    "source_url": result.url,
                    "signature": signature_for_preview(normalized.preview),
                    "ai_summary": normalized.ai_summary,
                    "preview": normalized.preview.model_dump(mode="json"),
                    "create_payload": build_create_payload(
                        normalized.preview, result.url
                    ).model_dump(mode="json"),
                }
            )
    return previews
