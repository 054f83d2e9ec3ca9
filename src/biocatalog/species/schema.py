"""Normalization and validation for species form input.

The same schema backs the add form, the edit form, and the inline validation
endpoint. Everything here is pure: raw form values go in, a validated
``SpeciesRecord`` or a field-to-message mapping comes out.

Normalization rules:
- Text fields are trimmed. Optional ones become ``None`` when empty; the
  required ``scientific_name`` stays ``""`` so validation can report it.
- ``total_population`` is parsed as a number. Unparseable or empty input
  becomes ``None``. Whole numbers become ``int``; fractional numbers are kept
  so validation can reject them.
- ``kingdom`` is passed through untouched. It must match a member exactly.
"""

import math
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import AnyUrl, BaseModel, ConfigDict, TypeAdapter, ValidationError, field_validator
from pydantic_core import PydanticCustomError


class Kingdom(str, Enum):
    """Taxonomic kingdoms accepted by the catalog."""

    ANIMALIA = "Animalia"
    PLANTAE = "Plantae"
    FUNGI = "Fungi"
    PROTISTA = "Protista"
    ARCHAEA = "Archaea"
    BACTERIA = "Bacteria"


KINGDOM_VALUES = tuple(kingdom.value for kingdom in Kingdom)

FIELD_NAMES = (
    "scientific_name",
    "common_name",
    "kingdom",
    "total_population",
    "image",
    "description",
)

DEFAULT_VALUES: dict[str, Any] = {
    "scientific_name": "",
    "common_name": None,
    "kingdom": Kingdom.ANIMALIA.value,
    "total_population": None,
    "image": None,
    "description": None,
}

_url_adapter = TypeAdapter(AnyUrl)

# Largest value an SQLite INTEGER column can hold
MAX_POPULATION = 2**63 - 1


class SpeciesValidationError(ValueError):
    """Raised when form input violates one or more field rules."""

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = errors
        super().__init__("; ".join(f"{field}: {message}" for field, message in errors.items()))


def normalize_text(value: Any, *, required: bool = False) -> str | None:
    """Trim a text field, mapping empty optional values to None."""
    if value is None:
        return "" if required else None
    text = str(value).strip()
    if not text and not required:
        return None
    return text


def normalize_population(value: Any) -> int | float | None:
    """Parse a population count without ever raising."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value) if value.is_integer() else value

    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return normalize_population(number)


def normalize_kingdom(value: Any) -> str | None:
    """Pass the kingdom selection through as a plain string."""
    if value is None:
        return None
    if isinstance(value, Kingdom):
        return value.value
    return value


def normalize_species(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize raw form values into canonical field values.

    Missing keys are treated as empty input. Applying this function to its own
    output returns the same mapping.
    """
    return {
        "scientific_name": normalize_text(raw.get("scientific_name"), required=True),
        "common_name": normalize_text(raw.get("common_name")),
        "kingdom": normalize_kingdom(raw.get("kingdom")),
        "total_population": normalize_population(raw.get("total_population")),
        "image": normalize_text(raw.get("image")),
        "description": normalize_text(raw.get("description")),
    }


class SpeciesRecord(BaseModel):
    """A species record that satisfies every field rule."""

    model_config = ConfigDict(frozen=True)

    scientific_name: str
    common_name: str | None = None
    kingdom: Kingdom
    total_population: int | None = None
    image: str | None = None
    description: str | None = None

    @field_validator("scientific_name", mode="before")
    @classmethod
    def validate_scientific_name(cls, value: Any) -> str:
        """Require a non-blank scientific name."""
        if not isinstance(value, str) or not value.strip():
            raise PydanticCustomError("required", "Scientific name is required.")
        return value.strip()

    @field_validator("common_name", "description", mode="before")
    @classmethod
    def validate_optional_text(cls, value: Any) -> str | None:
        """Accept any text or nothing."""
        if value is not None and not isinstance(value, str):
            raise PydanticCustomError("text", "Must be text.")
        return value

    @field_validator("kingdom", mode="before")
    @classmethod
    def validate_kingdom(cls, value: Any) -> Kingdom:
        """Only exact kingdom names are allowed."""
        if not isinstance(value, str) or value not in KINGDOM_VALUES:
            raise PydanticCustomError(
                "kingdom",
                "Kingdom must be one of: {choices}.",
                {"choices": ", ".join(KINGDOM_VALUES)},
            )
        return Kingdom(value)

    @field_validator("total_population", mode="before")
    @classmethod
    def validate_total_population(cls, value: Any) -> int | None:
        """Population, when given, is a whole number of at least one."""
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise PydanticCustomError("population", "Total population must be a number.")
        if isinstance(value, float):
            if not value.is_integer():
                raise PydanticCustomError(
                    "population", "Total population must be a whole number."
                )
            value = int(value)
        if value < 1:
            raise PydanticCustomError("population", "Total population must be at least 1.")
        if value > MAX_POPULATION:
            raise PydanticCustomError("population", "Total population is too large.")
        return value

    @field_validator("image", mode="before")
    @classmethod
    def validate_image(cls, value: Any) -> str | None:
        """Image, when given, is a syntactically valid URL."""
        if value is None:
            return None
        if not isinstance(value, str):
            raise PydanticCustomError("url", "Image must be a valid URL.")
        try:
            _url_adapter.validate_python(value)
        except ValidationError:
            raise PydanticCustomError("url", "Image must be a valid URL.") from None
        return value


def _collect_errors(error: ValidationError) -> dict[str, str]:
    """Map each failing field to its first message."""
    errors: dict[str, str] = {}
    for item in error.errors():
        field = str(item["loc"][0]) if item["loc"] else "__all__"
        errors.setdefault(field, item["msg"])
    return errors


def validate_species(raw: Mapping[str, Any]) -> SpeciesRecord:
    """Normalize and validate raw form values.

    Raises:
        SpeciesValidationError: With every failing field, not only the first.
    """
    normalized = normalize_species(raw)
    try:
        return SpeciesRecord.model_validate(normalized)
    except ValidationError as e:
        raise SpeciesValidationError(_collect_errors(e)) from None


def check_species(raw: Mapping[str, Any]) -> SpeciesRecord | dict[str, str]:
    """Return the validated record, or the field errors when invalid."""
    try:
        return validate_species(raw)
    except SpeciesValidationError as e:
        return e.errors
