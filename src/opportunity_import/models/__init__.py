"""Data models for scraped input, enhancement data, previews and staging records."""

from opportunity_import.models.enhanced import (
    EnhancedData,
    EnhancedValue,
    EnhancementResult,
    RawSuggestion,
    SuggestionWrapper,
)
from opportunity_import.models.preview import (
    ImportedOpportunityPreview,
    NormalizedImport,
    PreviewContacts,
    PreviewDocument,
    RiskLevel,
)
from opportunity_import.models.scraped import (
    ScrapedAddress,
    ScrapedDocument,
    ScrapedInfo,
    ScrapedOpportunity,
    ScrapeResult,
)
from opportunity_import.models.staging import (
    OpportunityCreatePayload,
    StagedRecord,
    TempOpportunityCreate,
    TempStatus,
)

__all__ = [
    "EnhancedData",
    "EnhancedValue",
    "EnhancementResult",
    "ImportedOpportunityPreview",
    "NormalizedImport",
    "OpportunityCreatePayload",
    "PreviewContacts",
    "PreviewDocument",
    "RawSuggestion",
    "RiskLevel",
    "ScrapedAddress",
    "ScrapedDocument",
    "ScrapedInfo",
    "ScrapedOpportunity",
    "ScrapeResult",
    "StagedRecord",
    "SuggestionWrapper",
    "TempOpportunityCreate",
    "TempStatus",
]
