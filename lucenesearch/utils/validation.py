"""
Input validation utilities.
"""

from typing import Any, Iterable, List
import re

from ..core.exceptions import ValidationError


# Field names: letters, digits, underscores, dots and hyphens; no query syntax
FIELD_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_.\-]*$')

# Maximum limits
MAX_FIELD_LENGTH = 128
MAX_PER_PAGE = 10000


def validate_field_name(name: Any) -> str:
    """
    Validate an index field name.
    
    Args:
        name: The field name to validate
        
    Returns:
        The validated field name (stripped)
        
    Raises:
        ValidationError: If the name is invalid
    """
    if not isinstance(name, str):
        raise ValidationError(
            f"Field name must be a string, got {type(name).__name__}"
        )
    
    name = name.strip()
    
    if not name:
        raise ValidationError("Field name cannot be empty")
    
    if len(name) > MAX_FIELD_LENGTH:
        raise ValidationError(
            f"Field name too long: {len(name)} characters (max {MAX_FIELD_LENGTH})"
        )
    
    if not FIELD_PATTERN.match(name):
        raise ValidationError(
            f"Invalid field name '{name}': must start with a letter or underscore "
            "and contain only alphanumeric characters, underscores, dots or hyphens"
        )
    
    return name


def validate_field_names(names: Iterable[Any]) -> List[str]:
    """Validate a list of field names, rejecting empty lists and duplicates."""
    validated = [validate_field_name(n) for n in names]
    
    if not validated:
        raise ValidationError("At least one field is required")
    
    if len(set(validated)) != len(validated):
        raise ValidationError(f"Duplicate field names: {validated}")
    
    return validated


def validate_per_page(per_page: Any) -> int:
    """
    Validate a page size.
    
    Raises:
        ValidationError: If per_page is not a positive integer within limits
    """
    if isinstance(per_page, bool) or not isinstance(per_page, int):
        raise ValidationError(
            f"per_page must be an integer, got {type(per_page).__name__}"
        )
    
    if per_page < 1:
        raise ValidationError(f"per_page must be >= 1, got {per_page}")
    
    if per_page > MAX_PER_PAGE:
        raise ValidationError(f"per_page too large: {per_page} (max {MAX_PER_PAGE})")
    
    return per_page
