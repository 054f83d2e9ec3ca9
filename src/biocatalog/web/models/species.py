"""Species API request and response models."""

from typing import Any

from pydantic import BaseModel, Field

from biocatalog.notifications import Notification
from biocatalog.species.display import SpeciesCard
from biocatalog.species.lookup import LookupResult


class SpeciesValidationResponse(BaseModel):
    """Result of validating raw form values."""

    valid: bool = Field(..., description="Whether every field rule holds")
    errors: dict[str, str] = Field(default_factory=dict, description="Message per failing field")
    values: dict[str, Any] = Field(default_factory=dict, description="Normalized field values")


class SpeciesLookupResponse(BaseModel):
    """Autofill data for a search term."""

    result: LookupResult | None = Field(None, description="Description and image, if found")
    notifications: list[Notification] = Field(
        default_factory=list, description="Messages to show the user"
    )


class SpeciesListResponse(BaseModel):
    """Every species, as cards for the current user."""

    species: list[SpeciesCard]
    count: int


class AuthStatusResponse(BaseModel):
    authenticated: bool
    user_id: str | None = None
    display_name: str | None = None
