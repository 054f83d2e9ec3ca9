"""Species add/edit form state and submission.

Each dialog owns one form session. The session moves through:

    CLOSED -> OPEN <-> INVALID -> SUBMITTING -> CLOSED (saved)
                                             -> FAILED (still open, input kept)

``SUBMITTING`` is only entered with a fully valid record, and only one
submission may be in flight per session.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from biocatalog.database.store import DataStore, PersistenceError
from biocatalog.notifications import Notifier, Severity
from biocatalog.species.lookup import ReferenceLookupError, WikipediaLookupService
from biocatalog.species.models import Species
from biocatalog.species.schema import (
    DEFAULT_VALUES,
    FIELD_NAMES,
    SpeciesRecord,
    check_species,
)

logger = logging.getLogger(__name__)


class FormStatus(str, Enum):
    """Lifecycle of a species form dialog."""

    CLOSED = "closed"
    OPEN = "open"
    INVALID = "invalid"
    SUBMITTING = "submitting"
    FAILED = "failed"


def record_values(record: SpeciesRecord) -> dict[str, Any]:
    """Form field values for a validated record."""
    return record.model_dump(mode="json")


class SpeciesFormSession(ABC):
    """Shared state machine for the add and edit dialogs."""

    success_title = ""
    failure_title = ""

    def __init__(
        self,
        store: DataStore,
        notifier: Notifier,
        values: Mapping[str, Any] | None = None,
        on_refresh: Callable[[], None] | None = None,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self.on_refresh = on_refresh
        self.default_values = dict(DEFAULT_VALUES if values is None else values)
        self.values: dict[str, Any] = dict(self.default_values)
        self.errors: dict[str, str] = {}
        self.status = FormStatus.CLOSED

    @property
    def is_open(self) -> bool:
        return self.status is not FormStatus.CLOSED

    def open(self) -> "SpeciesFormSession":
        """Show the dialog."""
        if self.status is FormStatus.CLOSED:
            self.status = FormStatus.OPEN
        return self

    def close(self) -> None:
        """Hide the dialog and drop any inline errors."""
        self.status = FormStatus.CLOSED
        self.errors = {}

    def reset(self, values: Mapping[str, Any] | None = None) -> None:
        """Replace every field value and clear errors."""
        self.default_values = dict(self.default_values if values is None else values)
        self.values = dict(self.default_values)
        self.errors = {}

    def update(self, values: Mapping[str, Any]) -> dict[str, str]:
        """Apply several field changes, then re-validate once."""
        for field, value in values.items():
            if field not in FIELD_NAMES:
                raise KeyError(f"Unknown species field: {field}")
            self.values[field] = value
        self.validate()
        return self.errors

    def set_value(self, field: str, value: Any) -> dict[str, str]:
        """Change one field and re-validate the whole form.

        Returns:
            The current field errors, empty when the form is valid
        """
        return self.update({field: value})

    def validate(self) -> SpeciesRecord | None:
        """Validate the current values and refresh inline errors."""
        result = check_species(self.values)
        if isinstance(result, SpeciesRecord):
            self.errors = {}
            record: SpeciesRecord | None = result
        else:
            self.errors = result
            record = None

        if self.status not in (FormStatus.CLOSED, FormStatus.SUBMITTING):
            self.status = FormStatus.OPEN if record is not None else FormStatus.INVALID
        return record

    async def autofill(self, query: str, lookup: WikipediaLookupService) -> bool:
        """Fill description and image from Wikipedia.

        Only those two fields are written, and they are not validated until submit.
        Any failure becomes a warning and leaves the form untouched.
        """
        try:
            result = await lookup.lookup(query)
        except ReferenceLookupError as e:
            self.notifier.notify(e.title, e.message, Severity.DESTRUCTIVE)
            return False

        self.values["description"] = result.description
        self.values["image"] = result.image_url
        self.notifier.notify(
            "Wikipedia data loaded successfully!", f'Data for "{result.title}" loaded.'
        )
        return True

    async def submit(self) -> SpeciesRecord | None:
        """Validate, persist, reset, and notify.

        Returns:
            The saved record, or None when validation or persistence failed
        """
        if self.status is FormStatus.CLOSED:
            raise RuntimeError("Cannot submit a closed form")
        if self.status is FormStatus.SUBMITTING:
            logger.warning("Ignoring duplicate submission for %s", type(self).__name__)
            self.notifier.notify(
                "Please wait.", "This form is already being saved.", Severity.DESTRUCTIVE
            )
            return None

        record = self.validate()
        if record is None:
            logger.debug("Species form rejected: %s", self.errors)
            return None

        self.status = FormStatus.SUBMITTING
        try:
            await self._persist(record)
        except PersistenceError as e:
            self.status = FormStatus.FAILED
            self.notifier.notify(self.failure_title, e.message, Severity.DESTRUCTIVE)
            return None
        except Exception:
            # Unexpected errors propagate, but the form must not stay in SUBMITTING
            self.status = FormStatus.FAILED
            logger.exception("Unexpected error saving %s", type(self).__name__)
            raise

        self.reset(self._values_after_save(record))
        self.close()
        if self.on_refresh is not None:
            self.on_refresh()
        self.notifier.notify(self.success_title, self._success_description(record))
        return record

    @abstractmethod
    async def _persist(self, record: SpeciesRecord) -> None:
        """Send a validated record to the data store."""

    @abstractmethod
    def _values_after_save(self, record: SpeciesRecord) -> dict[str, Any]:
        """Field values the form resets to after a successful save."""

    @abstractmethod
    def _success_description(self, record: SpeciesRecord) -> str:
        """Body of the success notification."""


class CreateSpeciesForm(SpeciesFormSession):
    """The "Add Species" dialog."""

    success_title = "New species added!"
    failure_title = "Something went wrong."

    def __init__(
        self,
        store: DataStore,
        notifier: Notifier,
        owner_id: str,
        values: Mapping[str, Any] | None = None,
        on_refresh: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(store, notifier, DEFAULT_VALUES, on_refresh)
        self.owner_id = owner_id
        self.created: Species | None = None
        if values is not None:
            self.values.update(values)

    async def _persist(self, record: SpeciesRecord) -> None:
        self.created = await self.store.create(
            Species, {**record.model_dump(), "author": self.owner_id}
        )
        logger.info("Species %s created by %s", record.scientific_name, self.owner_id)

    def _values_after_save(self, record: SpeciesRecord) -> dict[str, Any]:
        return dict(DEFAULT_VALUES)

    def _success_description(self, record: SpeciesRecord) -> str:
        return f"Successfully added {record.scientific_name}."


class EditSpeciesForm(SpeciesFormSession):
    """The "Edit Species" dialog for an existing record."""

    success_title = "Species updated"
    failure_title = "Error updating species"

    def __init__(
        self,
        store: DataStore,
        notifier: Notifier,
        species_id: int,
        values: Mapping[str, Any],
        owner_id: str | None = None,
        on_refresh: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(store, notifier, values, on_refresh)
        self.species_id = species_id
        self.owner_id = owner_id

    @classmethod
    def for_species(
        cls,
        store: DataStore,
        notifier: Notifier,
        species: Species,
        owner_id: str | None = None,
        on_refresh: Callable[[], None] | None = None,
    ) -> "EditSpeciesForm":
        """Build an edit form prefilled from a stored record."""
        if species.id is None:
            raise ValueError("Cannot edit a species that has not been saved")
        return cls(store, notifier, species.id, species.form_values(), owner_id, on_refresh)

    async def _persist(self, record: SpeciesRecord) -> None:
        match = {"author": self.owner_id} if self.owner_id is not None else {}
        await self.store.update(Species, self.species_id, record.model_dump(), **match)
        logger.info("Species %s updated", self.species_id)

    def _values_after_save(self, record: SpeciesRecord) -> dict[str, Any]:
        return record_values(record)

    def _success_description(self, record: SpeciesRecord) -> str:
        return f"Successfully updated {record.scientific_name}"
