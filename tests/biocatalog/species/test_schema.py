"""Tests for species field normalization and validation."""

import pytest

from biocatalog.species.schema import (
    DEFAULT_VALUES,
    Kingdom,
    SpeciesRecord,
    SpeciesValidationError,
    check_species,
    normalize_population,
    normalize_species,
    normalize_text,
    validate_species,
)


def _valid(**overrides):
    values = {"scientific_name": "Cavia porcellus", "kingdom": "Animalia"}
    values.update(overrides)
    return values


class TestNormalizeText:
    """Trimming and empty handling for text fields."""

    @pytest.mark.parametrize("value", ["", "   ", "\t\n", None])
    def test_empty_optional_text_becomes_none(self, value):
        assert normalize_text(value) is None

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_empty_required_text_stays_empty_string(self, value):
        assert normalize_text(value, required=True) == ""

    def test_text_is_trimmed(self):
        assert normalize_text("  Guinea pig  ") == "Guinea pig"


class TestNormalizePopulation:
    """Parsing population counts never raises."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("300000", 300000),
            (" 42 ", 42),
            ("7.0", 7),
            (12, 12),
            (12.0, 12),
            ("", None),
            ("   ", None),
            ("lots", None),
            (None, None),
            (True, None),
            (float("nan"), None),
        ],
    )
    def test_parses_to_whole_numbers_or_none(self, value, expected):
        assert normalize_population(value) == expected

    def test_fractional_numbers_are_kept_for_validation(self):
        assert normalize_population("1.5") == 1.5
        assert normalize_population(1.5) == 1.5


class TestNormalizeSpecies:
    """Whole-record normalization."""

    def test_missing_keys_are_treated_as_empty(self):
        assert normalize_species({}) == {
            "scientific_name": "",
            "common_name": None,
            "kingdom": None,
            "total_population": None,
            "image": None,
            "description": None,
        }

    def test_kingdom_is_not_coerced(self):
        assert normalize_species({"kingdom": "plantae"})["kingdom"] == "plantae"
        assert normalize_species({"kingdom": Kingdom.FUNGI})["kingdom"] == "Fungi"

    @pytest.mark.parametrize(
        "raw",
        [
            {},
            DEFAULT_VALUES,
            {
                "scientific_name": "  Quercus robur ",
                "common_name": "   ",
                "kingdom": "Plantae",
                "total_population": "1.5",
                "image": " https://example.com/oak.png ",
                "description": "\n",
            },
            {"scientific_name": None, "total_population": "abc", "kingdom": "Mammalia"},
        ],
    )
    def test_normalization_is_idempotent(self, raw):
        once = normalize_species(raw)
        assert normalize_species(once) == once


class TestValidateSpecies:
    """Field rules and error reporting."""

    def test_minimal_record_passes(self):
        record = validate_species(_valid())

        assert isinstance(record, SpeciesRecord)
        assert record.scientific_name == "Cavia porcellus"
        assert record.kingdom is Kingdom.ANIMALIA
        assert record.common_name is None
        assert record.total_population is None

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_scientific_name_is_required(self, name):
        with pytest.raises(SpeciesValidationError) as exc_info:
            validate_species(_valid(scientific_name=name))

        assert exc_info.value.errors == {"scientific_name": "Scientific name is required."}

    def test_kingdom_outside_the_closed_set_fails(self):
        errors = check_species(_valid(kingdom="Mammalia"))

        assert isinstance(errors, dict)
        assert errors["kingdom"].startswith("Kingdom must be one of: Animalia, Plantae")

    def test_kingdom_match_is_case_sensitive(self):
        assert "kingdom" in check_species(_valid(kingdom="animalia"))

    @pytest.mark.parametrize(
        "population,message",
        [
            ("0", "Total population must be at least 1."),
            ("-5", "Total population must be at least 1."),
            ("1.5", "Total population must be a whole number."),
            (str(10**20), "Total population is too large."),
        ],
    )
    def test_invalid_populations_fail(self, population, message):
        assert check_species(_valid(total_population=population)) == {"total_population": message}

    @pytest.mark.parametrize(
        "population,expected",
        [("1", 1), ("300000", 300000), (None, None), (str(2**63 - 1), 2**63 - 1)],
    )
    def test_valid_populations_pass(self, population, expected):
        record = validate_species(_valid(total_population=population))
        assert record.total_population == expected

    def test_non_numeric_population_is_treated_as_empty(self):
        assert validate_species(_valid(total_population="many")).total_population is None

    def test_image_must_be_a_url(self):
        assert check_species(_valid(image="not-a-url")) == {"image": "Image must be a valid URL."}

    def test_image_url_is_kept_verbatim(self):
        record = validate_species(_valid(image="https://example.com/img.png"))
        assert record.image == "https://example.com/img.png"

    def test_empty_image_becomes_none_and_passes(self):
        assert validate_species(_valid(image="")).image is None

    def test_every_failing_field_is_reported(self):
        errors = check_species(
            {
                "scientific_name": " ",
                "kingdom": "Mammalia",
                "total_population": "0",
                "image": "nope",
            }
        )

        assert set(errors) == {"scientific_name", "kingdom", "total_population", "image"}

    def test_validated_record_dumps_the_six_fields(self):
        record = validate_species(_valid(common_name=" Guinea pig "))

        assert record.model_dump(mode="json") == {
            "scientific_name": "Cavia porcellus",
            "common_name": "Guinea pig",
            "kingdom": "Animalia",
            "total_population": None,
            "image": None,
            "description": None,
        }
