"""Input normalization shared by the service layer."""

from typing import Optional


def normalize_email(email: Optional[str]) -> Optional[str]:
    """
    Normalize email to lowercase.

    Args:
        email: Raw email input

    Returns:
        Lowercased email or None if empty
    """
    if not email or not email.strip():
        return None
    return email.strip().lower()


def normalize_name(name: Optional[str]) -> Optional[str]:
    """
    Normalize name by stripping whitespace and collapsing multiple spaces.

    Args:
        name: Raw name input

    Returns:
        Cleaned name or None if empty
    """
    if not name:
        return None
    return " ".join(name.split()) or None


def normalize_text(value: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace, keeping inner formatting. None if empty."""
    if not value:
        return None
    return value.strip() or None
