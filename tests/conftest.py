"""Pytest fixtures for opportunity-import tests."""

import tempfile
from pathlib import Path
from typing import Any, Optional

import pytest

from opportunity_import.connectors.base import BaseEnhancer, BaseScraper, BaseStagingStore
from opportunity_import.errors import EnrichmentError, StagingWriteError
from opportunity_import.models.enhanced import EnhancedData, EnhancementResult
from opportunity_import.models.scraped import ScrapedInfo, ScrapedOpportunity, ScrapeResult
from opportunity_import.models.staging import StagedRecord, TempOpportunityCreate


class FakeScraper(BaseScraper):
    """Returns canned results and records the URLs it was asked for."""

    def __init__(self, results: list[ScrapeResult]):
        self.results = results
        self.calls: list[list[str]] = []

    def scrape(self, urls: list[str]) -> list[ScrapeResult]:
        self.calls.append(list(urls))
        return self.results


class FakeEnhancer(BaseEnhancer):
    """Returns bags keyed by detail URL; raises EnrichmentError for URLs in fail_urls."""

    def __init__(
        self,
        bags: Optional[dict[str, dict[str, Any]]] = None,
        warnings: Optional[list[str]] = None,
        fail_urls: Optional[set[str]] = None,
    ):
        self.bags = bags or {}
        self.warnings = warnings or []
        self.fail_urls = fail_urls or set()
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def enhance(self, detail_url: str, partial_data: dict[str, Any]) -> EnhancementResult:
        self.calls.append((detail_url, partial_data))
        if detail_url in self.fail_urls:
            raise EnrichmentError("service down")
        return EnhancementResult(
            enhanced_data=EnhancedData.from_mapping(self.bags.get(detail_url, {})),
            warnings=list(self.warnings),
        )


class InMemoryStagingStore(BaseStagingStore):
    """List-backed staging store; fail_on_title makes create_temp raise for that title."""

    def __init__(
        self,
        existing: Optional[list[StagedRecord]] = None,
        fail_on_title: Optional[str] = None,
    ):
        self.records: list[StagedRecord] = list(existing or [])
        self.created: list[TempOpportunityCreate] = []
        self.list_calls = 0
        self.fail_on_title = fail_on_title

    def list_existing(self) -> list[StagedRecord]:
        self.list_calls += 1
        return list(self.records)

    def create_temp(self, payload: TempOpportunityCreate) -> StagedRecord:
        if self.fail_on_title and payload.project_title == self.fail_on_title:
            raise StagingWriteError(f"Could not store '{payload.project_title}'")
        self.created.append(payload)
        record = StagedRecord(
            id=str(len(self.records) + 1),
            project_title=payload.project_title,
            client_name=payload.client_name,
            location=payload.location,
        )
        self.records.append(record)
        return record


@pytest.fixture
def highway_opportunity() -> ScrapedOpportunity:
    """Scraped opportunity with budget text only."""
    return ScrapedOpportunity(
        title="Highway Repaving",
        client="City of Austin",
        location="Austin, TX",
        budget_text="$5,000,000",
    )


@pytest.fixture
def sample_info() -> ScrapedInfo:
    """Organization info with contacts and an address."""
    return ScrapedInfo(
        name="City of Austin Procurement",
        email=["bids@austintexas.gov"],
        phone=["+1 512 555 0100"],
        address={
            "line1": "124 W 8th St",
            "city": "Austin",
            "state": "TX",
            "country_code": "US",
            "pincode": "78701",
        },
    )


@pytest.fixture
def sample_scrape_result(highway_opportunity: ScrapedOpportunity, sample_info: ScrapedInfo) -> ScrapeResult:
    """One page with two distinct opportunities."""
    bridge = ScrapedOpportunity(
        title="Bridge Inspection Services",
        client="City of Austin",
        location="Austin, TX",
        detail_url="https://austin.example.gov/bids/bridge",
        deadline="2025-07-15",
    )
    return ScrapeResult(
        url="https://austin.example.gov/bids",
        info=sample_info,
        opportunities=[highway_opportunity, bridge],
    )


@pytest.fixture
def temp_db_path() -> Path:
    """Temporary database path for isolated tests."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = Path(f.name)
    yield path
    path.unlink(missing_ok=True)
