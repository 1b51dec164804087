"""HTTP implementations of the collaborators, backed by the REST API.

Endpoints used:
- POST /scraper/scrape                          -> {"results": [ScrapeResult, ...]}
- POST /api/ai/enhance-opportunity-data         -> {"enhanced_data": {...}, "warnings": [...]}
- GET  /opportunities/ingestion/temp            -> [StagedRecord, ...]
- POST /opportunities/ingestion/temp            -> StagedRecord
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from opportunity_import.config import ImportSettings
from opportunity_import.connectors.base import BaseEnhancer, BaseScraper, BaseStagingStore
from opportunity_import.errors import EnrichmentError, StagingWriteError
from opportunity_import.models.enhanced import EnhancedData, EnhancementResult
from opportunity_import.models.scraped import ScrapeResult
from opportunity_import.models.staging import StagedRecord, TempOpportunityCreate

logger = logging.getLogger(__name__)


class _ApiClient:
    """Shared httpx client setup: base URL, bearer token, timeout."""

    DEFAULT_HEADERS = {
        "User-Agent": "opportunity-import/0.1",
        "Accept": "application/json",
    }

    def __init__(
        self,
        settings: Optional[ImportSettings] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.settings = settings or ImportSettings.from_env()
        headers = dict(self.DEFAULT_HEADERS)
        if self.settings.api_token:
            headers["Authorization"] = f"Bearer {self.settings.api_token}"
        self._client = client or httpx.Client(
            base_url=self.settings.api_base_url,
            timeout=self.settings.timeout_seconds,
            follow_redirects=True,
            headers=headers,
        )

    def close(self) -> None:
        self._client.close()


class HttpScraper(_ApiClient, BaseScraper):
    SCRAPE_PATH = "/scraper/scrape"

    def scrape(self, urls: list[str]) -> list[ScrapeResult]:
        """
        One batched request for all URLs. A failed request is reported as an
        error on every URL so the caller can still account for each one.
        """
        if not urls:
            return []
        try:
            resp = self._client.post(self.SCRAPE_PATH, json={"urls": urls})
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as e:
            message = f"HTTP {e.response.status_code}"
        except (httpx.RequestError, ValueError) as e:
            message = str(e) or type(e).__name__
        else:
            results = body.get("results") if isinstance(body, dict) else None
            if isinstance(results, list):
                return [_parse_result(r) for r in results]
            message = "Unexpected scrape response"
        logger.warning("Scrape request failed: %s", message)
        return [ScrapeResult(url=u, error=message) for u in urls]


def _parse_result(raw: Any) -> ScrapeResult:
    """Validate one result; an invalid one becomes an error for its own URL only."""
    try:
        return ScrapeResult.model_validate(raw)
    except ValidationError as e:
        url = raw.get("url") if isinstance(raw, dict) else None
        url = str(url) if url else "unknown"
        logger.warning("Invalid scrape result for %s: %s", url, e)
        return ScrapeResult(url=url, error=f"Invalid scrape result ({e.error_count()} validation errors)")


class HttpEnhancer(_ApiClient, BaseEnhancer):
    ENHANCE_PATH = "/api/ai/enhance-opportunity-data"

    def enhance(self, detail_url: str, partial_data: dict[str, Any]) -> EnhancementResult:
        payload = {"company_website": detail_url, "partial_data": partial_data}
        try:
            resp = self._client.post(self.ENHANCE_PATH, json=payload)
            resp.raise_for_status()
            data = resp.json()
            if not isinstance(data, dict):
                raise EnrichmentError(f"Unexpected enhancement response: {type(data).__name__}")
            warnings = data.get("warnings") or []
            if not isinstance(warnings, list):
                warnings = [warnings]
            return EnhancementResult(
                enhanced_data=EnhancedData.from_mapping(data.get("enhanced_data")),
                warnings=[str(w) for w in warnings],
            )
        except httpx.HTTPStatusError as e:
            raise EnrichmentError(f"HTTP {e.response.status_code}") from e
        except (httpx.RequestError, ValueError, ValidationError) as e:
            raise EnrichmentError(str(e) or type(e).__name__) from e


class HttpStagingStore(_ApiClient, BaseStagingStore):
    TEMP_PATH = "/opportunities/ingestion/temp"

    def list_existing(self) -> list[StagedRecord]:
        resp = self._client.get(self.TEMP_PATH)
        resp.raise_for_status()
        return [StagedRecord.model_validate(r) for r in resp.json()]

    def create_temp(self, payload: TempOpportunityCreate) -> StagedRecord:
        try:
            resp = self._client.post(self.TEMP_PATH, json=payload.model_dump(mode="json"))
            resp.raise_for_status()
            return StagedRecord.model_validate(resp.json())
        except httpx.HTTPStatusError as e:
            raise StagingWriteError(
                f"Could not store '{payload.project_title}': HTTP {e.response.status_code}"
            ) from e
        except (httpx.RequestError, ValueError, ValidationError) as e:
            raise StagingWriteError(f"Could not store '{payload.project_title}': {e}") from e
