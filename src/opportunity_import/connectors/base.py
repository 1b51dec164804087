"""Abstract interfaces for the scraper, enrichment and staging-store collaborators."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from opportunity_import.models.enhanced import EnhancementResult
from opportunity_import.models.scraped import ScrapeResult
from opportunity_import.models.staging import StagedRecord, TempOpportunityCreate


class BaseScraper(ABC):
    """Fetches pages and extracts candidate opportunities."""

    @abstractmethod
    def scrape(self, urls: list[str]) -> list[ScrapeResult]:
        """
        Scrape all URLs in one batched call; one ScrapeResult per URL.
        Per-URL failures are reported on ScrapeResult.error, not raised.
        """
        pass


class BaseEnhancer(ABC):
    """AI enrichment service that suggests structured field values."""

    @abstractmethod
    def enhance(self, detail_url: str, partial_data: dict[str, Any]) -> EnhancementResult:
        """
        Return suggested values for the page at detail_url.
        Raises EnrichmentError on failure.
        """
        pass


class BaseStagingStore(ABC):
    """Queue of temp opportunities awaiting human review."""

    @abstractmethod
    def list_existing(self) -> list[StagedRecord]:
        """All staged records relevant for duplicate detection."""
        pass

    @abstractmethod
    def create_temp(self, payload: TempOpportunityCreate) -> StagedRecord:
        """
        Persist one temp record. Raises StagingWriteError on failure.
        """
        pass

    def get(self, temp_id: str) -> Optional[StagedRecord]:
        """Look up one record by id. Default: linear scan of list_existing()."""
        return next((r for r in self.list_existing() if r.id == temp_id), None)
