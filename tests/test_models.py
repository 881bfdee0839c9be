"""Tests for specatlas.models."""

import pytest

from specatlas.models import (
    SpecPriority,
    SpecRecord,
    SpecStatus,
    parse_reference_number,
    parse_spec_number,
)


class TestSpecStatus:
    """Tests for SpecStatus parsing."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("planned", SpecStatus.PLANNED),
            ("in-progress", SpecStatus.IN_PROGRESS),
            ("in_progress", SpecStatus.IN_PROGRESS),
            ("InProgress", SpecStatus.IN_PROGRESS),
            ("Complete", SpecStatus.COMPLETE),
            ("completed", SpecStatus.COMPLETE),
            (" archived ", SpecStatus.ARCHIVED),
        ],
    )
    def test_parse_aliases(self, raw, expected):
        assert SpecStatus.parse(raw) is expected

    def test_parse_invalid_raises(self):
        with pytest.raises(ValueError, match="Invalid status"):
            SpecStatus.parse("done-ish")

    def test_str_is_value(self):
        assert str(SpecStatus.IN_PROGRESS) == "in-progress"


class TestSpecPriority:
    """Tests for SpecPriority parsing."""

    def test_parse_aliases(self):
        assert SpecPriority.parse("med") is SpecPriority.MEDIUM
        assert SpecPriority.parse("URGENT") is SpecPriority.CRITICAL
        assert SpecPriority.parse("low") is SpecPriority.LOW

    def test_parse_invalid_raises(self):
        with pytest.raises(ValueError):
            SpecPriority.parse("someday")


class TestSpecRecord:
    """Tests for SpecRecord properties."""

    def test_number_from_prefix(self):
        assert SpecRecord(id="001-feature-name").number == 1
        assert SpecRecord(id="170-cli").number == 170

    def test_number_missing(self):
        assert SpecRecord(id="feature-name").number is None

    def test_name_strips_prefix(self):
        assert SpecRecord(id="042-search").name == "search"
        assert SpecRecord(id="search").name == "search"

    def test_records_are_frozen(self):
        spec = SpecRecord(id="001-x")
        with pytest.raises(AttributeError):
            spec.title = "changed"

    def test_path_not_part_of_equality(self, tmp_path):
        assert SpecRecord(id="001-x", path=tmp_path) == SpecRecord(id="001-x")


class TestParseSpecNumber:
    def test_leading_digits(self):
        assert parse_spec_number("007-bond") == 7
        assert parse_spec_number(" 12 ") == 12

    def test_no_digits(self):
        assert parse_spec_number("abc-001") is None

    def test_oversized_prefix(self):
        assert parse_spec_number("1" * 5000 + "-huge") is None


class TestParseReferenceNumber:
    @pytest.mark.parametrize("raw,expected", [("7", 7), ("007", 7), (" 42 ", 42)])
    def test_ascii_digits(self, raw, expected):
        assert parse_reference_number(raw) == expected

    @pytest.mark.parametrize("raw", ["", "²", "٣", "12a", "001-auth", "9" * 5000])
    def test_not_numeric(self, raw):
        assert parse_reference_number(raw) is None
