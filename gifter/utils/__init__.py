"""Utility modules."""

from gifter.utils.normalization import (
    normalize_email,
    normalize_name,
    normalize_text,
)

__all__ = [
    "normalize_email",
    "normalize_name",
    "normalize_text",
]
