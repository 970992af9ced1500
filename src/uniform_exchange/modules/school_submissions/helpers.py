"""
School Submission Helpers

Name normalization and location keys used by duplicate detection.
"""

import re
from uuid import UUID

_NON_WORD_PATTERN = re.compile(r"[^\w\s]")
_WHITESPACE_PATTERN = re.compile(r"\s+")


def normalize_school_name(name: str) -> str:
    """
    Normalize a school name for comparison.

    Lowercases, strips punctuation and collapses whitespace.

    Example: "St. Mary's  NS" -> "st marys ns"

    Args:
        name: The school name as entered

    Returns:
        The normalized name (may be empty)
    """
    lowered = name.lower()
    stripped = _NON_WORD_PATTERN.sub("", lowered)
    return _WHITESPACE_PATTERN.sub(" ", stripped).strip()


def build_location_fingerprint(county_id: UUID | str, locality_id: UUID | str | None = None) -> str:
    """
    Build the location key used to scope pending-submission duplicates.

    Returns "<county>" or "<county>:<locality>".
    """
    if locality_id:
        return f"{county_id}:{locality_id}"
    return str(county_id)


def names_overlap(first: str, second: str) -> bool:
    """
    Check whether two normalized names look like the same school.

    True when either name contains the other. Empty names never match.
    """
    if not first or not second:
        return False
    return first in second or second in first
