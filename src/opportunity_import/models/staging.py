"""Staging-queue and backend create-record payload models."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class TempStatus(str, Enum):
    PENDING_REVIEW = "pending_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    PROMOTED = "promoted"


class StagedRecord(BaseModel):
    """
    Temp opportunity already in the staging queue.
    Only project_title, client_name and location are needed for dedup; the rest
    is populated when the store returns full rows.
    """

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    temp_identifier: Optional[str] = None
    project_title: str = ""
    client_name: Optional[str] = None
    location: Optional[str] = None
    budget_text: Optional[str] = None
    deadline: Optional[str] = None
    documents: Optional[list[str]] = None
    tags: Optional[list[str]] = None
    ai_summary: Optional[str] = None
    match_score: Optional[int] = None
    risk_score: Optional[int] = None
    strategic_fit_score: Optional[int] = None
    status: TempStatus = TempStatus.PENDING_REVIEW
    reviewer_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OpportunityCreatePayload(BaseModel):
    """Shape expected by the backend create-opportunity endpoint."""

    project_name: str
    client_name: str
    description: str
    stage: str = "lead"
    risk_level: Optional[str] = None
    project_value: Optional[float] = None
    currency: str = "USD"
    expected_rfp_date: Optional[str] = None
    deadline: Optional[str] = None
    state: Optional[str] = None
    market_sector: Optional[str] = None
    match_score: Optional[int] = None


class TempOpportunityCreate(BaseModel):
    """Payload for the staging store's create-temp call."""

    source_id: Optional[str] = None
    history_id: Optional[str] = None
    project_title: str
    client_name: Optional[str] = None
    location: Optional[str] = None
    budget_text: Optional[str] = None
    deadline: Optional[str] = None
    documents: Optional[list[str]] = None
    tags: Optional[list[str]] = None
    ai_summary: Optional[str] = None
    ai_metadata: Optional[dict[str, Any]] = None
    raw_payload: dict[str, Any] = Field(default_factory=dict)
    match_score: Optional[int] = None
    risk_score: Optional[int] = None
    strategic_fit_score: Optional[int] = None
    reviewer_notes: Optional[str] = None
