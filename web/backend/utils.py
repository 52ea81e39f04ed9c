#!/usr/bin/env python3
"""
Utility functions for the web application.
"""

import uuid
from typing import Optional, Any

from .exceptions import ValidationError


def parse_uuid(value: Any, field_name: str = "id") -> uuid.UUID:
    """
    Parse a UUID from request input.

    Raises:
        ValidationError: value is missing or not a valid UUID.
    """
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError):
        raise ValidationError(f"Invalid {field_name}: {value}. Must be a valid UUID.")


def safe_str(value: Optional[Any], default: str = "") -> str:
    """
    Safely convert value to string.

    Args:
        value: Value to convert.
        default: Default value if value is None.

    Returns:
        String value.
    """
    if value is None:
        return default
    return str(value)
