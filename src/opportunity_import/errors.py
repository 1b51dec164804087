"""Exceptions raised by the import pipeline and its collaborators."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from opportunity_import.dedup import ImportReport


class OpportunityImportError(Exception):
    """Base class for import errors."""


class ConfigError(OpportunityImportError):
    """Invalid or incomplete configuration."""


class EnrichmentError(OpportunityImportError):
    """AI enrichment call failed; callers fall back to scraped data."""


class StagingWriteError(OpportunityImportError):
    """
    Writing a temp record failed. Records written earlier in the batch stay
    committed; report carries the counts up to the failure.
    """

    def __init__(self, message: str, report: Optional["ImportReport"] = None):
        super().__init__(message)
        self.report = report
