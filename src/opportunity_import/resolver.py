"""Resolve values from the AI enhancement bag and ordered fallback chains."""

from typing import Any, Callable, Iterable, Mapping, Optional, Union

from opportunity_import.models.enhanced import EnhancedData

EnhancedInput = Union[EnhancedData, Mapping[str, Any], None]
Resolver = Callable[[], Any]


def is_present(value: Any) -> bool:
    """None and empty/blank strings count as absent; everything else is usable."""
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def as_enhanced(enhanced: EnhancedInput) -> Optional[EnhancedData]:
    """Accept a plain mapping or EnhancedData; None stays None."""
    if enhanced is None or isinstance(enhanced, EnhancedData):
        return enhanced
    return EnhancedData.from_mapping(enhanced)


def pick_enhanced_value(enhanced: EnhancedInput, keys: Iterable[str]) -> Any:
    """
    Return the first usable value among keys, most preferred key first.
    Wrapper entries are unwrapped via value ?? suggested_value ?? default_value ?? content.
    """
    bag = as_enhanced(enhanced)
    if bag is None:
        return None
    for key in keys:
        candidate = bag.unwrap(key)
        if is_present(candidate):
            return candidate
    return None


def first_present(*resolvers: Resolver) -> Any:
    """Evaluate resolvers left to right; first present value wins."""
    for resolve in resolvers:
        candidate = resolve()
        if is_present(candidate):
            return candidate
    return None
