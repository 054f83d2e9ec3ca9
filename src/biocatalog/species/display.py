"""Presentation helpers for species cards and detail pages."""

from pydantic import BaseModel

from biocatalog.species.models import Species
from biocatalog.species.schema import Kingdom


def description_preview(description: str | None, length: int = 150) -> str:
    """Shorten a description for a card, marking truncation with an ellipsis."""
    if not description:
        return ""
    return f"{description[:length].strip()}..."


def format_population(total_population: int | None) -> str:
    """Format a population count with thousands separators."""
    if total_population is None:
        return ""
    return f"{total_population:,}"


class SpeciesCard(BaseModel):
    """What a species list or detail page shows for one record."""

    id: int
    scientific_name: str
    common_name: str | None = None
    kingdom: str
    population: str = ""
    image: str | None = None
    description: str | None = None
    preview: str = ""
    is_owner: bool = False

    @classmethod
    def from_species(
        cls, species: Species, viewer_id: str | None = None, preview_length: int = 150
    ) -> "SpeciesCard":
        """Build a card for a stored record as seen by the given user."""
        if species.id is None:
            raise ValueError("Cannot build a card for a species that has not been saved")
        return cls(
            id=species.id,
            scientific_name=species.scientific_name,
            common_name=species.common_name,
            kingdom=Kingdom(species.kingdom).value,
            population=format_population(species.total_population),
            image=species.image,
            description=species.description,
            preview=description_preview(species.description, preview_length),
            is_owner=viewer_id is not None and species.author == viewer_id,
        )
