"""Signature-based duplicate detection for staged and in-batch candidates."""

import logging
from enum import Enum
from typing import Any, Iterable, Iterator, Optional

from pydantic import BaseModel, Field, computed_field

from opportunity_import.models.preview import ImportedOpportunityPreview
from opportunity_import.models.staging import StagedRecord, TempOpportunityCreate

logger = logging.getLogger(__name__)


def _normalize_part(value: Any) -> str:
    """Lowercase and strip; empty string if None."""
    return "" if value is None else str(value).strip().lower()


def build_signature(title: Any, client: Any, location: Any) -> str:
    """'title|client|location', each part lower-cased and trimmed."""
    return "|".join(_normalize_part(part) for part in (title, client, location))


def signature_for_preview(preview: ImportedOpportunityPreview) -> str:
    return build_signature(preview.project_name, preview.client_name, preview.location)


def signature_for_record(record: StagedRecord) -> str:
    return build_signature(record.project_title, record.client_name, record.location)


def signature_for_payload(payload: TempOpportunityCreate) -> str:
    """Signature of a record as it will be stored, after truncation."""
    return build_signature(payload.project_title, payload.client_name, payload.location)


class SignatureSet:
    """
    Accumulated signatures for one import batch.
    Seeded once from existing staged records, then grows in arrival order.
    """

    def __init__(self, signatures: Optional[Iterable[str]] = None):
        self._signatures: set[str] = set(signatures or ())

    @classmethod
    def from_records(cls, records: Iterable[StagedRecord]) -> "SignatureSet":
        return cls(signature_for_record(r) for r in records)

    def __contains__(self, signature: object) -> bool:
        return signature in self._signatures

    def __len__(self) -> int:
        return len(self._signatures)

    def __iter__(self) -> Iterator[str]:
        return iter(self._signatures)

    def check_and_add(self, signature: str) -> bool:
        """
        Return True if signature was already seen. The signature is added either
        way, so later copies of a duplicate are also caught.
        """
        seen = signature in self._signatures
        self._signatures.add(signature)
        return seen


class DedupDecision(BaseModel):
    """Whether one candidate is new or a duplicate."""

    signature: str
    is_duplicate: bool
    preview: ImportedOpportunityPreview


def deduplicate(
    previews: Iterable[ImportedOpportunityPreview],
    signatures: SignatureSet,
) -> list[DedupDecision]:
    """Classify previews strictly in order, mutating signatures as it goes."""
    decisions: list[DedupDecision] = []
    for preview in previews:
        signature = signature_for_preview(preview)
        is_duplicate = signatures.check_and_add(signature)
        if is_duplicate:
            logger.debug("Duplicate lead skipped: %s", signature)
        decisions.append(
            DedupDecision(signature=signature, is_duplicate=is_duplicate, preview=preview)
        )
    return decisions


class ImportOutcome(str, Enum):
    NOTHING_FOUND = "nothing_found"
    ALL_STORED = "all_stored"
    PARTIAL = "partial"
    ALL_DUPLICATES = "all_duplicates"
    FAILED = "failed"


class ImportReport(BaseModel):
    """Counts and messages accumulated over one import batch."""

    stored: int = 0
    skipped_duplicates: int = 0
    failed: int = 0
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    stored_records: list[StagedRecord] = Field(default_factory=list)

    def add_warning(self, message: str) -> None:
        """Record a warning once; order of first occurrence is kept."""
        if message and message not in self.warnings:
            self.warnings.append(message)

    @computed_field
    @property
    def outcome(self) -> ImportOutcome:
        if self.stored == 0 and self.skipped_duplicates > 0:
            return ImportOutcome.ALL_DUPLICATES
        if self.stored == 0 and (self.failed or self.errors):
            return ImportOutcome.FAILED
        if self.stored == 0:
            return ImportOutcome.NOTHING_FOUND
        if self.skipped_duplicates or self.failed:
            return ImportOutcome.PARTIAL
        return ImportOutcome.ALL_STORED

    def summary_message(self) -> str:
        outcome = self.outcome
        if outcome is ImportOutcome.ALL_DUPLICATES:
            return (
                f"All leads already queued ({self.skipped_duplicates} duplicate"
                f"{'' if self.skipped_duplicates == 1 else 's'} skipped)."
            )
        if outcome is ImportOutcome.FAILED:
            return "Import failed: " + ("; ".join(self.errors) or "no records stored.")
        if outcome is ImportOutcome.NOTHING_FOUND:
            return "No opportunities found."
        if outcome is ImportOutcome.PARTIAL:
            return (
                f"Stored {self.stored} new lead{'' if self.stored == 1 else 's'}, "
                f"skipped {self.skipped_duplicates} duplicate"
                f"{'' if self.skipped_duplicates == 1 else 's'}."
            )
        return f"Stored {self.stored} new lead{'' if self.stored == 1 else 's'}."
