"""Address parsing utilities."""
import re
from typing import Optional
import usaddress

ZIP_IN_TEXT = re.compile(r"\b(\d{5})(?:-\d{4})?\b")


def parse_address(address: str) -> dict:
    """
    Parse address using usaddress library.

    Args:
        address: Address string to parse

    Returns:
        Dict with parsed components
    """
    try:
        parsed, _ = usaddress.tag(address)
        return dict(parsed)
    except Exception:
        return {}


def extract_zip_from_address(address: Optional[str]) -> Optional[str]:
    """
    Extract a 5-digit zip code from a street address.

    Only the usaddress ZipCode component counts when the address can be
    tagged, so a street number is never taken for a zip. The first
    standalone 5-digit token is used only when tagging fails.

    Args:
        address: Full street address

    Returns:
        5-digit zip code or None
    """
    if not address or not address.strip():
        return None

    parsed = parse_address(address)
    if parsed:
        match = ZIP_IN_TEXT.search(parsed.get("ZipCode", ""))
    else:
        match = ZIP_IN_TEXT.search(address)
    return match.group(1) if match else None
