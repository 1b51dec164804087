"""Normalized preview of one imported opportunity."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PreviewDocument(BaseModel):
    """Document reference carried on the preview."""

    model_config = ConfigDict(frozen=True)

    url: Optional[str] = None
    title: Optional[str] = None
    type: Optional[str] = None


class PreviewContacts(BaseModel):
    model_config = ConfigDict(frozen=True)

    emails: list[str] = Field(default_factory=list)
    phones: list[str] = Field(default_factory=list)


class ImportedOpportunityPreview(BaseModel):
    """
    Canonical candidate produced by the normalizer.
    Immutable once built; project_name and client_name are never empty.
    """

    model_config = ConfigDict(frozen=True)

    project_name: str
    client_name: str
    description: Optional[str] = None
    summary: Optional[str] = None
    status: Optional[str] = None
    location: Optional[str] = None
    market_sector: Optional[str] = None
    project_value_numeric: Optional[float] = None
    project_value_text: Optional[str] = None
    probability: Optional[float] = Field(default=None, ge=0, le=100)
    risk_level: Optional[RiskLevel] = None
    expected_rfp_date: Optional[str] = None
    deadline: Optional[str] = None
    contacts: PreviewContacts = Field(default_factory=PreviewContacts)
    documents: Optional[list[PreviewDocument]] = None
    tags: list[str] = Field(default_factory=list)
    detail_url: Optional[str] = None

    @field_validator("project_name", "client_name")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must be a non-empty string")
        return value


class NormalizedImport(BaseModel):
    """Preview plus the summary text shown in lightweight listings."""

    model_config = ConfigDict(frozen=True)

    preview: ImportedOpportunityPreview
    ai_summary: Optional[str] = None
