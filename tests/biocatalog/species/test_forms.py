"""Tests for the species add/edit form sessions."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from biocatalog.database.store import DataStore, PersistenceError
from biocatalog.notifications import Severity
from biocatalog.species.forms import (
    CreateSpeciesForm,
    EditSpeciesForm,
    FormStatus,
    SpeciesFormSession,
)
from biocatalog.species.models import Species
from biocatalog.species.schema import DEFAULT_VALUES, Kingdom

EXISTING = {
    "scientific_name": "Ailuropoda melanoleuca",
    "common_name": "Giant panda",
    "kingdom": "Animalia",
    "total_population": 1864,
    "image": "https://example.com/panda.jpg",
    "description": "A bear native to South Central China.",
}


@pytest.fixture
def store():
    """DataStore double that records calls instead of touching a database."""
    mock_store = MagicMock(spec=DataStore)
    mock_store.create = AsyncMock(return_value=Species(id=1, author="owner-1", **EXISTING))
    mock_store.update = AsyncMock(return_value=Species(id=7, author="owner-1", **EXISTING))
    return mock_store


@pytest.fixture
def create_form(store, notifier):
    return CreateSpeciesForm(store, notifier, owner_id="owner-1")


@pytest.fixture
def edit_form(store, notifier):
    return EditSpeciesForm(store, notifier, species_id=7, values=EXISTING, owner_id="owner-1")


class TestFormState:
    """Opening, closing, and inline validation."""

    def test_new_form_is_closed_with_defaults(self, create_form):
        assert create_form.status is FormStatus.CLOSED
        assert create_form.values == DEFAULT_VALUES
        assert create_form.values["kingdom"] == "Animalia"
        assert create_form.errors == {}

    def test_open_and_close(self, create_form):
        create_form.open()
        assert create_form.status is FormStatus.OPEN
        assert create_form.is_open

        create_form.close()
        assert create_form.status is FormStatus.CLOSED

    def test_set_value_revalidates(self, create_form):
        create_form.open()

        errors = create_form.set_value("total_population", "0")

        assert errors["total_population"] == "Total population must be at least 1."
        assert errors["scientific_name"] == "Scientific name is required."
        assert create_form.status is FormStatus.INVALID

    def test_fixing_every_field_returns_to_open(self, create_form):
        create_form.open()
        create_form.set_value("scientific_name", "")
        assert create_form.status is FormStatus.INVALID

        errors = create_form.set_value("scientific_name", "Cavia porcellus")

        assert errors == {}
        assert create_form.status is FormStatus.OPEN

    def test_unknown_field_is_rejected(self, create_form):
        with pytest.raises(KeyError):
            create_form.set_value("genus", "Cavia")

    def test_base_session_cannot_be_instantiated(self, store, notifier):
        with pytest.raises(TypeError):
            SpeciesFormSession(store, notifier)

    def test_forms_do_not_share_state(self, store, notifier):
        first = CreateSpeciesForm(store, notifier, owner_id="owner-1")
        second = CreateSpeciesForm(store, notifier, owner_id="owner-1")

        first.set_value("scientific_name", "Cavia porcellus")

        assert second.values["scientific_name"] == ""
        assert DEFAULT_VALUES["scientific_name"] == ""


class TestCreateSubmission:
    """Submitting the "Add Species" form."""

    @pytest.mark.asyncio
    async def test_create_sends_normalized_fields_and_owner(self, create_form, store, notifier):
        refreshed = MagicMock()
        create_form.on_refresh = refreshed
        create_form.open()
        create_form.update({"scientific_name": "Quercus robur", "kingdom": "Plantae"})

        record = await create_form.submit()

        assert record is not None
        store.create.assert_awaited_once_with(
            Species,
            {
                "scientific_name": "Quercus robur",
                "common_name": None,
                "kingdom": Kingdom.PLANTAE,
                "total_population": None,
                "image": None,
                "description": None,
                "author": "owner-1",
            },
        )
        refreshed.assert_called_once_with()
        assert create_form.status is FormStatus.CLOSED
        assert create_form.values == DEFAULT_VALUES

        notification = notifier.notifications[-1]
        assert notification.title == "New species added!"
        assert notification.description == "Successfully added Quercus robur."
        assert notification.severity is Severity.DEFAULT

    @pytest.mark.asyncio
    async def test_invalid_form_never_reaches_the_store(self, create_form, store, notifier):
        create_form.open()
        create_form.update({"scientific_name": "   ", "image": "not-a-url"})

        assert await create_form.submit() is None

        store.create.assert_not_awaited()
        assert create_form.status is FormStatus.INVALID
        assert set(create_form.errors) == {"scientific_name", "image"}
        assert notifier.notifications == []

    @pytest.mark.asyncio
    async def test_persistence_failure_keeps_input(self, create_form, store, notifier):
        store.create.side_effect = PersistenceError("database is locked")
        create_form.open()
        create_form.update({"scientific_name": " Quercus robur ", "total_population": "12"})

        assert await create_form.submit() is None

        assert create_form.status is FormStatus.FAILED
        assert create_form.is_open
        assert create_form.values["scientific_name"] == " Quercus robur "
        assert create_form.values["total_population"] == "12"
        notification = notifier.notifications[-1]
        assert notification.title == "Something went wrong."
        assert notification.description == "database is locked"
        assert notification.severity is Severity.DESTRUCTIVE

    @pytest.mark.asyncio
    async def test_submitting_a_closed_form_is_an_error(self, create_form):
        with pytest.raises(RuntimeError):
            await create_form.submit()

    @pytest.mark.asyncio
    async def test_second_submit_while_in_flight_is_refused(self, create_form, store, notifier):
        release = asyncio.Event()

        async def slow_create(model, values):
            await release.wait()
            return Species(id=1, **values)

        store.create.side_effect = slow_create
        create_form.open()
        create_form.set_value("scientific_name", "Quercus robur")

        first = asyncio.create_task(create_form.submit())
        await asyncio.sleep(0)
        assert create_form.status is FormStatus.SUBMITTING

        assert await create_form.submit() is None
        assert notifier.notifications[-1].severity is Severity.DESTRUCTIVE

        release.set()
        assert await first is not None
        assert store.create.await_count == 1


    @pytest.mark.asyncio
    async def test_unexpected_store_error_does_not_wedge_the_form(
        self, create_form, store, notifier
    ):
        store.create.side_effect = RuntimeError("driver exploded")
        create_form.open()
        create_form.set_value("scientific_name", "Quercus robur")

        with pytest.raises(RuntimeError, match="driver exploded"):
            await create_form.submit()

        assert create_form.status is FormStatus.FAILED
        assert create_form.is_open

        store.create.side_effect = None
        assert await create_form.submit() is not None
        assert create_form.status is FormStatus.CLOSED

    @pytest.mark.asyncio
    async def test_population_beyond_the_column_limit_is_a_field_error(
        self, data_store, notifier, profile
    ):
        form = CreateSpeciesForm(
            data_store,
            notifier,
            owner_id=profile.id,
            values={
                "scientific_name": "Quercus robur",
                "kingdom": "Plantae",
                "total_population": str(10**20),
            },
        ).open()

        assert await form.submit() is None

        assert form.status is FormStatus.INVALID
        assert form.errors == {"total_population": "Total population is too large."}
        assert await data_store.list(Species, "scientific_name") == []

class TestEditSubmission:
    """Submitting the "Edit Species" form."""

    @pytest.mark.asyncio
    async def test_update_replaces_every_field(self, edit_form, store, notifier):
        edit_form.open()
        edit_form.update({"common_name": "  Panda ", "total_population": "2000"})

        record = await edit_form.submit()

        assert record is not None
        store.update.assert_awaited_once_with(
            Species,
            7,
            {
                "scientific_name": "Ailuropoda melanoleuca",
                "common_name": "Panda",
                "kingdom": Kingdom.ANIMALIA,
                "total_population": 2000,
                "image": "https://example.com/panda.jpg",
                "description": "A bear native to South Central China.",
            },
            author="owner-1",
        )
        assert edit_form.status is FormStatus.CLOSED
        assert edit_form.values["common_name"] == "Panda"
        assert edit_form.values["total_population"] == 2000
        assert notifier.notifications[-1].title == "Species updated"
        assert notifier.notifications[-1].description == "Successfully updated Ailuropoda melanoleuca"

    @pytest.mark.asyncio
    async def test_duplicate_key_failure_keeps_form_open(self, edit_form, store, notifier):
        store.update.side_effect = PersistenceError("duplicate key")
        edit_form.open()
        edit_form.set_value("scientific_name", "Ursus arctos")

        assert await edit_form.submit() is None

        assert edit_form.is_open
        assert edit_form.status is FormStatus.FAILED
        assert edit_form.values == {**EXISTING, "scientific_name": "Ursus arctos"}
        assert notifier.notifications[-1].title == "Error updating species"
        assert notifier.notifications[-1].description == "duplicate key"

    def test_for_species_prefills_from_the_stored_row(self, store, notifier):
        species = Species(id=3, author="owner-1", **{**EXISTING, "kingdom": Kingdom.ANIMALIA})

        form = EditSpeciesForm.for_species(store, notifier, species, owner_id="owner-1")

        assert form.species_id == 3
        assert form.values == EXISTING


    def test_for_species_requires_a_saved_row(self, store, notifier):
        species = Species(author="owner-1", **{**EXISTING, "kingdom": Kingdom.ANIMALIA})

        with pytest.raises(ValueError):
            EditSpeciesForm.for_species(store, notifier, species)

class TestAutofill:
    """Filling description and image from the lookup."""

    @pytest.mark.asyncio
    async def test_autofill_writes_only_description_and_image(
        self, create_form, lookup_service, notifier
    ):
        create_form.open()
        create_form.update({"scientific_name": "Quercus robur", "kingdom": "Plantae"})

        assert await create_form.autofill("Quercus robur", lookup_service) is True

        assert create_form.values["scientific_name"] == "Quercus robur"
        assert create_form.values["kingdom"] == "Plantae"
        assert create_form.values["description"].startswith("Quercus robur, the pedunculate oak")
        assert create_form.values["image"] == "https://upload.wikimedia.org/quercus_robur.jpg"
        assert notifier.notifications[-1].title == "Wikipedia data loaded successfully!"
        assert notifier.notifications[-1].description == 'Data for "Quercus robur" loaded.'

    @pytest.mark.asyncio
    async def test_no_match_leaves_every_field_untouched(
        self, edit_form, lookup_service, notifier, wikipedia_requests
    ):
        edit_form.open()
        before = dict(edit_form.values)

        assert await edit_form.autofill("Giant Panda", lookup_service) is False

        assert edit_form.values == before
        assert len(wikipedia_requests) == 1
        assert notifier.notifications[-1].title == "No matching article found."
        assert notifier.notifications[-1].severity is Severity.DESTRUCTIVE

    @pytest.mark.asyncio
    async def test_blank_search_warns_without_a_request(
        self, create_form, lookup_service, notifier, wikipedia_requests
    ):
        assert await create_form.autofill("  ", lookup_service) is False

        assert wikipedia_requests == []
        assert notifier.notifications[-1].title == "Please enter a search term."

    @pytest.mark.asyncio
    async def test_autofilled_values_are_validated_on_submit(
        self, create_form, store, lookup_service
    ):
        create_form.open()
        create_form.set_value("scientific_name", "Quercus robur")
        await create_form.autofill("Quercus robur", lookup_service)

        await create_form.submit()

        sent = store.create.await_args.args[1]
        assert sent["image"] == "https://upload.wikimedia.org/quercus_robur.jpg"
        assert sent["description"].endswith("flowering plant.")
