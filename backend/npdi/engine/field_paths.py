"""Field Paths - Nested value resolution and emptiness rules for ticket data"""
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..utils.logger import get_logger

logger = get_logger(__name__)

PATH_SEPARATOR = "."

ValueLookup = Callable[[str], Any]


def get_nested_value(data: Any, path: str) -> Any:
    """
    Get value from nested dicts/lists using dot notation
    
    Example: "chemicalProperties.casNumber" -> data["chemicalProperties"]["casNumber"]
    Numeric segments index into lists ("skuVariants.0.sku"). Returns None for any
    missing segment.
    """
    if not isinstance(data, (dict, list)) or not path:
        return None
    
    current = data
    for part in path.split(PATH_SEPARATOR):
        if isinstance(current, dict):
            current = current.get(part)
        elif isinstance(current, list) and part.isdigit():
            index = int(part)
            current = current[index] if index < len(current) else None
        else:
            return None
        if current is None:
            return None
    
    return current


def is_field_empty(value: Any) -> bool:
    """
    Check if a field value counts as not filled in
    
    None, blank strings, empty lists and empty dicts are empty.
    0 and False are real answers and are not empty.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    if isinstance(value, dict):
        return len(value) == 0
    return False


def resolve_field_value(
    data: Dict[str, Any],
    field_key: str,
    fallback_prefixes: Optional[Sequence[str]] = None
) -> Any:
    """
    Resolve a required field's value from ticket data
    
    Tries the declared path first. A bare key (no separator) that comes back empty
    is retried under each fallback prefix in order; the first non-empty hit wins.
    """
    value = get_nested_value(data, field_key)
    if not is_field_empty(value) or PATH_SEPARATOR in field_key or not fallback_prefixes:
        return value
    
    for prefix in fallback_prefixes:
        candidate = get_nested_value(data, f"{prefix}{PATH_SEPARATOR}{field_key}")
        if not is_field_empty(candidate):
            logger.debug(
                f"Resolved bare key '{field_key}' under legacy prefix '{prefix}'",
                extra={"field_key": field_key}
            )
            return candidate
    
    return value


def make_value_lookup(
    data: Dict[str, Any],
    fallback_prefixes: Optional[Sequence[str]] = None
) -> ValueLookup:
    """Build a read-only lookup function over ticket data"""
    def lookup(field_key: str) -> Any:
        return resolve_field_value(data, field_key, fallback_prefixes)
    return lookup


def qualified_candidates(field_key: str, fallback_prefixes: Sequence[str]) -> List[str]:
    """All paths a bare key may be read from, in lookup order"""
    if PATH_SEPARATOR in field_key:
        return [field_key]
    return [field_key] + [f"{prefix}{PATH_SEPARATOR}{field_key}" for prefix in fallback_prefixes]
