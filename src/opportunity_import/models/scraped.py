"""Scraper output models: raw page data before any AI enrichment."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_list(value: Any) -> list:
    """Coerce a scalar or missing value to a list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return [v for v in value if v is not None]
    return [value]


class ScrapedDocument(BaseModel):
    """Document linked from a scraped opportunity page."""

    model_config = ConfigDict(extra="allow")

    url: Optional[str] = None
    title: Optional[str] = None
    type: Optional[str] = None


class ScrapedOpportunity(BaseModel):
    """
    One candidate opportunity extracted from a page.
    Scrapers add extra keys freely; only the fields below are read.
    """

    model_config = ConfigDict(extra="allow")

    title: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None
    client: Optional[str] = None
    location: Optional[str] = None
    budget_text: Optional[str] = None
    project_value_numeric: Optional[float] = None
    deadline: Optional[str] = None
    detail_url: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    documents: list[ScrapedDocument] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> list:
        return [str(t) for t in _as_list(value)]

    @field_validator("project_value_numeric", mode="before")
    @classmethod
    def _coerce_value(cls, value: Any) -> Optional[float]:
        # "TBD" and similar placeholders mean no value rather than a bad record
        from opportunity_import.parsing.fields import parse_currency

        return parse_currency(value)

    @field_validator("documents", mode="before")
    @classmethod
    def _coerce_documents(cls, value: Any) -> list:
        # Bare URL strings are accepted as documents without a title
        return [{"url": d} if isinstance(d, str) else d for d in _as_list(value)]


class ScrapedAddress(BaseModel):
    """Postal address found on the page; every part optional."""

    model_config = ConfigDict(extra="allow")

    line1: Optional[str] = None
    line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country_code: Optional[str] = None
    pincode: Optional[str] = None


class ScrapedInfo(BaseModel):
    """Organization-level metadata for the scraped page."""

    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    email: list[str] = Field(default_factory=list)
    phone: list[str] = Field(default_factory=list)
    address: Optional[ScrapedAddress] = None

    @field_validator("email", "phone", mode="before")
    @classmethod
    def _coerce_contacts(cls, value: Any) -> list:
        return [str(v) for v in _as_list(value)]


class ScrapeResult(BaseModel):
    """Scraper result for one requested URL."""

    model_config = ConfigDict(extra="allow")

    url: str
    info: Optional[ScrapedInfo] = None
    error: Optional[str] = None
    opportunities: list[ScrapedOpportunity] = Field(default_factory=list)

    @field_validator("opportunities", mode="before")
    @classmethod
    def _coerce_opportunities(cls, value: Any) -> list:
        return _as_list(value)
