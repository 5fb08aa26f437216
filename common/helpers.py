"""
Nepify Storefront - Shared Helpers
====================================
Pure utility functions with NO network or module dependencies.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional


def safe_decimal(value) -> Optional[Decimal]:
    """Safely convert a query-string value to Decimal. Returns None on failure."""
    if value is None or str(value).strip() == "":
        return None
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None


def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


_SLUG_STRIP = re.compile(r"[^a-z0-9\s-]")
_SLUG_SPACES = re.compile(r"\s+")
_SLUG_DASHES = re.compile(r"-+")


def slugify(name: str) -> str:
    """
    Shop URL slug as the API derives it:
    lowercase, drop anything but [a-z0-9 -], spaces → dash, collapse dashes.
    """
    slug = _SLUG_STRIP.sub("", (name or "").lower().strip())
    slug = _SLUG_SPACES.sub("-", slug)
    slug = _SLUG_DASHES.sub("-", slug)
    return slug.strip("-")
