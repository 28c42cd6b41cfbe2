"""
Platform version detection.

Finds the newest known version token mentioned in free text, either as the
raw token ("v13") or spelled with the product name ("Umbraco 13").
"""

from typing import Optional

__all__ = ["KNOWN_VERSIONS", "PRODUCT_NAME", "detect_version", "normalize_version"]

# Newest first: when text mentions several versions the newest wins.
KNOWN_VERSIONS: tuple[str, ...] = (
    "v17",
    "v16",
    "v15",
    "v14",
    "v13",
    "v12",
    "v11",
    "v10",
    "v9",
    "v8",
)

PRODUCT_NAME = "Umbraco"


def _product_form(version: str, product_name: str) -> str:
    """'v13' -> 'Umbraco 13'."""
    return f"{product_name} {version[1:]}"


def detect_version(
    text: Optional[str],
    *,
    versions: tuple[str, ...] = KNOWN_VERSIONS,
    product_name: str = PRODUCT_NAME,
) -> Optional[str]:
    """
    Return the first known version (newest first) mentioned in text.

    Args:
        text: Free text such as a topic title
        versions: Ordered version tokens, newest first
        product_name: Display name used for the spelled-out form

    Returns:
        The matching version token, or None

    Example:
        >>> detect_version("Upgrading from Umbraco 13 to v14")
        'v14'
    """
    if not text:
        return None

    haystack = text.lower()
    for version in versions:
        if version.lower() in haystack:
            return version
        if _product_form(version, product_name).lower() in haystack:
            return version
    return None


def normalize_version(
    value: Optional[str],
    *,
    versions: tuple[str, ...] = KNOWN_VERSIONS,
    product_name: str = PRODUCT_NAME,
) -> Optional[str]:
    """Map caller input like 'V13', '13' or 'Umbraco 13' to a version token."""
    if value is None or not value.strip():
        return None

    cleaned = value.strip().lower()
    if cleaned.isdigit():
        cleaned = f"v{cleaned}"
    if cleaned in versions:
        return cleaned

    return detect_version(cleaned, versions=versions, product_name=product_name) or cleaned
