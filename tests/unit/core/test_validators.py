"""Tests for DataValidator normalization helpers."""
import pytest

from daybook.core.exceptions import ValidationError
from daybook.core.validators import DataValidator


class TestRequiredFields:
    def test_passes_when_present(self):
        DataValidator.validate_required_fields({"name": "Work", "color": "#000000"}, ["name"])

    @pytest.mark.parametrize("data", [{}, {"name": None}, {"name": ""}])
    def test_missing_or_empty(self, data):
        with pytest.raises(ValidationError, match="Required field 'name' missing or empty"):
            DataValidator.validate_required_fields(data, ["name"])


class TestNormalizeString:
    def test_collapses_whitespace(self):
        assert DataValidator.normalize_string("  New   job \n") == "New job"

    def test_empty_becomes_none(self):
        assert DataValidator.normalize_string("   ") is None
        assert DataValidator.normalize_string(None) is None


class TestNormalizeInt:
    def test_converts(self):
        assert DataValidator.normalize_int("42") == 42

    def test_empty_is_none(self):
        assert DataValidator.normalize_int("") is None

    def test_rejects_bool(self):
        with pytest.raises(ValidationError):
            DataValidator.normalize_int(True)

    def test_rejects_text(self):
        with pytest.raises(ValidationError):
            DataValidator.normalize_int("many")


class TestNormalizeColor:
    def test_upper_cases(self):
        assert DataValidator.normalize_color("#4caf50") == "#4CAF50"

    @pytest.mark.parametrize("value", ["4CAF50", "#4CAF5", "#GGGGGG", "red"])
    def test_rejects_non_hex(self, value):
        with pytest.raises(ValidationError):
            DataValidator.normalize_color(value)


class TestNormalizeScore:
    @pytest.mark.parametrize("value", [0, 5, 10, "7"])
    def test_accepts_range(self, value):
        assert DataValidator.normalize_score(value) == int(value)

    @pytest.mark.parametrize("value", [-1, 11, None])
    def test_rejects_out_of_range(self, value):
        with pytest.raises(ValidationError):
            DataValidator.normalize_score(value)


class TestNormalizeTimezone:
    def test_accepts_iana(self):
        assert DataValidator.normalize_timezone("Europe/Berlin") == "Europe/Berlin"

    def test_empty_is_none(self):
        assert DataValidator.normalize_timezone("") is None

    def test_rejects_unknown(self):
        with pytest.raises(ValidationError, match="Unknown timezone"):
            DataValidator.normalize_timezone("Mars/Olympus")


class TestNormalizeCoordinate:
    def test_accepts_bounds_and_strings(self):
        assert DataValidator.normalize_coordinate("50.4501", 90, "latitude") == 50.4501
        assert DataValidator.normalize_coordinate(-180, 180, "longitude") == -180.0

    def test_blank_is_none(self):
        assert DataValidator.normalize_coordinate(None, 90, "latitude") is None
        assert DataValidator.normalize_coordinate("", 90, "latitude") is None

    @pytest.mark.parametrize("value", [90.01, -91, "north", True, float("nan")])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValidationError, match="latitude"):
            DataValidator.normalize_coordinate(value, 90, "latitude")


class TestNormalizeLocationName:
    def test_collapses_whitespace(self):
        assert DataValidator.normalize_location_name(" Kyiv,  Ukraine ") == "Kyiv, Ukraine"

    def test_rejects_long_names(self):
        with pytest.raises(ValidationError, match="120"):
            DataValidator.normalize_location_name("x" * 121)
