"""AI enhancement bag: field name -> suggestion wrapper or raw value."""

import logging
from typing import Any, Iterator, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel, model_validator

logger = logging.getLogger(__name__)

# Order in which a wrapper's value slots are consulted
WRAPPER_FIELDS = ("value", "suggested_value", "default_value", "content")


class SuggestionWrapper(BaseModel):
    """
    Wrapper object returned by the enrichment service for one field.
    Only the four value slots matter for resolution; confidence/source/reasoning
    are kept for display.
    """

    model_config = ConfigDict(extra="allow")

    value: Any = None
    suggested_value: Any = None
    default_value: Any = None
    content: Any = None
    confidence: Optional[float] = None
    source: Optional[str] = None
    reasoning: Optional[str] = None

    def unwrap(self) -> Any:
        """value ?? suggested_value ?? default_value ?? content."""
        for name in WRAPPER_FIELDS:
            candidate = getattr(self, name)
            if candidate is not None:
                return candidate
        return None


class RawSuggestion(BaseModel):
    """Plain value (string, number, list, or unknown-shape dict)."""

    raw: Any = None

    def unwrap(self) -> Any:
        return self.raw


EnhancedValue = Union[SuggestionWrapper, RawSuggestion]


def _is_wrapper_shape(value: Any) -> bool:
    return isinstance(value, Mapping) and any(key in value for key in WRAPPER_FIELDS)


def to_enhanced_value(value: Any) -> EnhancedValue:
    """Tag a raw enrichment entry as a wrapper or a raw value."""
    if isinstance(value, (SuggestionWrapper, RawSuggestion)):
        return value
    if _is_wrapper_shape(value):
        return SuggestionWrapper.model_validate(dict(value))
    if isinstance(value, Mapping):
        logger.debug("Unrecognized suggestion shape with keys %s; treating as raw value", sorted(value))
    return RawSuggestion(raw=value)


class EnhancedData(RootModel[dict[str, EnhancedValue]]):
    """Typed mapping of semantic field name to enhancement value."""

    root: dict[str, EnhancedValue] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _tag_values(cls, value: Any) -> dict[str, EnhancedValue]:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            return value
        return {str(k): to_enhanced_value(v) for k, v in value.items()}

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "EnhancedData":
        """Build from a plain mapping; raises ValueError for any other shape."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ValueError(f"Enhancement data must be a mapping, got {type(data).__name__}")
        return cls.model_validate(dict(data))

    def unwrap(self, key: str) -> Any:
        """Unwrapped value for key, or None when missing."""
        entry = self.root.get(key)
        return entry.unwrap() if entry is not None else None

    def to_plain(self) -> dict[str, Any]:
        """Flatten to {key: unwrapped value} for metadata storage."""
        return {k: v.unwrap() for k, v in self.root.items()}

    def __contains__(self, key: object) -> bool:
        return key in self.root

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)


class EnhancementResult(BaseModel):
    """Response of the enrichment call."""

    enhanced_data: EnhancedData = Field(default_factory=EnhancedData)
    warnings: list[str] = Field(default_factory=list)
