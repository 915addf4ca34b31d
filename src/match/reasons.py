"""Human-readable match justification."""
from typing import List, Optional


def format_reason_code(code: str, region_label: Optional[str] = None) -> str:
    """
    Format a match reason code into display text.

    Args:
        code: Reason code (e.g., "MC_PROGRAM", "LOCATION")
        region_label: Region name used by the location reason

    Returns:
        Human-readable reason string
    """
    reason_map = {
        "MC_PROGRAM": "Specialized memory care program",
        "AMENITIES": "Excellent amenities and services",
        "ACTIVITIES": "Robust activity programs",
        "LOCATION": f"Convenient location in {region_label or 'Greater Cleveland'}",
        "RATED": "Highly rated community",
        "CARE": "Strong care programs",
    }

    return reason_map.get(code, code)


def compose_reasons(reason_codes: List[str], region_label: Optional[str] = None) -> str:
    """
    Compose the justification line shown next to a matched community.

    Args:
        reason_codes: Ordered list of reason codes
        region_label: Region name used by the location reason

    Returns:
        Reasons joined with "; "
    """
    return "; ".join(format_reason_code(code, region_label) for code in reason_codes)
