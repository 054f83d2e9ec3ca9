"""Species records: validation, persistence models, forms, and reference lookup."""

from biocatalog.species.schema import (
    Kingdom,
    SpeciesRecord,
    SpeciesValidationError,
    check_species,
    normalize_species,
    validate_species,
)

__all__ = [
    "Kingdom",
    "SpeciesRecord",
    "SpeciesValidationError",
    "check_species",
    "normalize_species",
    "validate_species",
]
