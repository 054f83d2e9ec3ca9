"""Read and delete operations on the species catalog."""

import logging

from biocatalog.database.store import DataStore, PersistenceError
from biocatalog.notifications import Notifier, Severity
from biocatalog.species.display import SpeciesCard
from biocatalog.species.models import Species

logger = logging.getLogger(__name__)


class SpeciesCatalog:
    """Lists species for display and deletes them on behalf of their owners."""

    def __init__(self, store: DataStore, preview_length: int = 150) -> None:
        self.store = store
        self.preview_length = preview_length

    async def list_species(self) -> list[Species]:
        """All species ordered by scientific name."""
        return await self.store.list(Species, "scientific_name")

    async def list_cards(self, viewer_id: str | None) -> list[SpeciesCard]:
        """Cards for every species as seen by one user."""
        return [self.card(species, viewer_id) for species in await self.list_species()]

    async def get(self, species_id: int) -> Species | None:
        return await self.store.get(Species, species_id)

    def card(self, species: Species, viewer_id: str | None) -> SpeciesCard:
        return SpeciesCard.from_species(species, viewer_id, self.preview_length)

    async def delete(self, species: Species, owner_id: str, notifier: Notifier) -> bool:
        """Delete a species the user owns; its comments go with it."""
        try:
            await self.store.delete(Species, species.id, author=owner_id)
        except PersistenceError as e:
            notifier.notify("Error deleting species", e.message, Severity.DESTRUCTIVE)
            return False

        logger.info("Species %s deleted by %s", species.id, owner_id)
        notifier.notify("Species deleted", f"Successfully deleted {species.scientific_name}.")
        return True
