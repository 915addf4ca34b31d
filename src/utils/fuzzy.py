"""Fuzzy name matching for city names and export column headers."""
from typing import Dict, Iterable, List, Optional
from rapidfuzz import fuzz, process


def find_best_match(
    target: str,
    candidates: Iterable[str],
    threshold: float = 80.0
) -> Optional[str]:
    """
    Return the candidate closest to target, ignoring case.

    Args:
        target: Name to look up, e.g. a misspelled city
        candidates: Known names
        threshold: Minimum fuzz.ratio score (0-100)

    Returns:
        Closest candidate, or None if nothing reaches the threshold
    """
    result = process.extractOne(
        target,
        list(candidates),
        scorer=fuzz.ratio,
        processor=str.upper,
        score_cutoff=threshold,
    )
    return result[0] if result else None


def map_headers(
    expected_headers: Dict[str, str],
    actual_headers: List[str],
    threshold: float = 80.0
) -> Dict[str, str]:
    """
    Map canonical column names to the headers found in a file.

    Case-insensitive exact matches are claimed first so a fuzzy match can
    never steal a header that matches another column exactly.

    Returns:
        Dict of canonical name -> actual header; unmatched columns are omitted
    """
    by_upper = {h.upper(): h for h in reversed(actual_headers)}
    mapping = {}
    for canonical, expected in expected_headers.items():
        actual = by_upper.get(expected.upper())
        if actual is not None and actual not in mapping.values():
            mapping[canonical] = actual

    for canonical, expected in expected_headers.items():
        if canonical in mapping:
            continue
        remaining = [h for h in actual_headers if h not in mapping.values()]
        match = find_best_match(expected, remaining, threshold)
        if match:
            mapping[canonical] = match

    return mapping
