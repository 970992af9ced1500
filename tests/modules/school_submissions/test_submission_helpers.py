"""
Unit tests for school submission helpers.
"""

from uuid import uuid4

from uniform_exchange.modules.school_submissions.helpers import (
    build_location_fingerprint,
    names_overlap,
    normalize_school_name,
)


class TestNormalizeSchoolName:
    """Tests for normalize_school_name."""

    def test_lowercases_and_strips_punctuation(self):
        assert normalize_school_name("St. Mary's  NS") == "st marys ns"

    def test_collapses_whitespace(self):
        assert normalize_school_name("  Scoil   Bhríde \t Primary ") == "scoil bhríde primary"

    def test_keeps_digits(self):
        assert normalize_school_name("Gaelscoil No. 2") == "gaelscoil no 2"

    def test_punctuation_only_name_is_empty(self):
        assert normalize_school_name("!!! ...") == ""

    def test_same_school_different_spelling_matches(self):
        """Names that differ only in case and punctuation normalize alike."""
        assert normalize_school_name("ST MARY'S N.S.") == normalize_school_name("st marys ns")


class TestBuildLocationFingerprint:
    """Tests for build_location_fingerprint."""

    def test_county_only(self):
        county_id = uuid4()
        assert build_location_fingerprint(county_id) == str(county_id)

    def test_county_and_locality(self):
        county_id = uuid4()
        locality_id = uuid4()
        assert build_location_fingerprint(county_id, locality_id) == f"{county_id}:{locality_id}"

    def test_missing_locality_differs_from_present_locality(self):
        county_id = uuid4()
        assert build_location_fingerprint(county_id) != build_location_fingerprint(
            county_id, uuid4()
        )


class TestNamesOverlap:
    """Tests for names_overlap."""

    def test_identical_names_overlap(self):
        assert names_overlap("st marys ns", "st marys ns") is True

    def test_contained_name_overlaps(self):
        assert names_overlap("st marys", "st marys national school") is True
        assert names_overlap("st marys national school", "st marys") is True

    def test_unrelated_names_do_not_overlap(self):
        assert names_overlap("st marys ns", "scoil bhride") is False

    def test_empty_name_never_overlaps(self):
        assert names_overlap("", "st marys") is False
        assert names_overlap("st marys", "") is False
