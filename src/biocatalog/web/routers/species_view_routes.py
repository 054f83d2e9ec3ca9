"""Species catalog pages: list, detail, add, edit, and delete."""

import logging
from typing import Annotated, Any

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette.datastructures import FormData

from biocatalog.config import CatalogConfig
from biocatalog.database.store import DataStore
from biocatalog.notifications import Severity
from biocatalog.species.catalog import SpeciesCatalog
from biocatalog.species.forms import CreateSpeciesForm, EditSpeciesForm, SpeciesFormSession
from biocatalog.species.lookup import WikipediaLookupService
from biocatalog.species.models import Species
from biocatalog.species.schema import FIELD_NAMES, KINGDOM_VALUES
from biocatalog.utils.auth import require_user
from biocatalog.web.core.container import Container
from biocatalog.web.core.rendering import current_user_id, get_notifier, render_page

logger = logging.getLogger(__name__)

router = APIRouter()

LOOKUP_ACTION = "lookup"


def _form_values(form: FormData) -> dict[str, Any]:
    """Raw species field values from a submitted form."""
    return {field: form.get(field) for field in FIELD_NAMES}


def _form_context(form: SpeciesFormSession, search: str = "") -> dict[str, Any]:
    return {
        "form_values": form.values,
        "form_errors": form.errors,
        "form_open": form.is_open,
        "search": search,
        "kingdoms": KINGDOM_VALUES,
    }


async def _get_species_or_404(catalog: SpeciesCatalog, species_id: int) -> Species:
    species = await catalog.get(species_id)
    if species is None:
        raise HTTPException(status_code=404, detail="Species not found")
    return species


async def _render_list(
    request: Request,
    templates: Jinja2Templates,
    config: CatalogConfig,
    catalog: SpeciesCatalog,
    form: SpeciesFormSession,
    search: str = "",
    status_code: int = 200,
) -> HTMLResponse:
    cards = await catalog.list_cards(current_user_id(request))
    return render_page(
        request,
        templates,
        config,
        "species/list.html.j2",
        page_name="Species List",
        active_page="species",
        status_code=status_code,
        cards=cards,
        **_form_context(form, search),
    )


def _render_edit(
    request: Request,
    templates: Jinja2Templates,
    config: CatalogConfig,
    species: Species,
    form: EditSpeciesForm,
    search: str = "",
    status_code: int = 200,
) -> HTMLResponse:
    return render_page(
        request,
        templates,
        config,
        "species/edit.html.j2",
        page_name="Edit Species",
        active_page="species",
        status_code=status_code,
        species=species,
        **_form_context(form, search),
    )


def _is_owner(request: Request, species: Species) -> bool:
    return species.author == current_user_id(request)


@router.get("/species", response_class=HTMLResponse)
@require_user
@inject
async def species_list(
    request: Request,
    templates: Annotated[Jinja2Templates, Depends(Provide[Container.templates])],
    config: Annotated[CatalogConfig, Depends(Provide[Container.config])],
    catalog: Annotated[SpeciesCatalog, Depends(Provide[Container.species_catalog])],
    store: Annotated[DataStore, Depends(Provide[Container.data_store])],
) -> HTMLResponse:
    """Show every species with the "Add Species" form closed."""
    form = CreateSpeciesForm(store, get_notifier(request), owner_id=current_user_id(request))
    return await _render_list(request, templates, config, catalog, form)


@router.post("/species", response_model=None)
@require_user
@inject
async def create_species(
    request: Request,
    templates: Annotated[Jinja2Templates, Depends(Provide[Container.templates])],
    config: Annotated[CatalogConfig, Depends(Provide[Container.config])],
    catalog: Annotated[SpeciesCatalog, Depends(Provide[Container.species_catalog])],
    store: Annotated[DataStore, Depends(Provide[Container.data_store])],
    lookup_service: Annotated[WikipediaLookupService, Depends(Provide[Container.lookup_service])],
) -> HTMLResponse | RedirectResponse:
    """Handle the "Add Species" form.

    The search button autofills the form and shows it again; the submit
    button validates and saves, re-rendering with errors on failure.
    """
    submitted = await request.form()
    search = str(submitted.get("search") or "")
    form = CreateSpeciesForm(
        store,
        get_notifier(request),
        owner_id=current_user_id(request),
        values=_form_values(submitted),
    ).open()

    if submitted.get("action") == LOOKUP_ACTION:
        await form.autofill(search, lookup_service)
        return await _render_list(request, templates, config, catalog, form, search)

    if await form.submit() is None:
        return await _render_list(
            request, templates, config, catalog, form, search, status_code=422
        )

    return RedirectResponse(url="/species", status_code=303)


@router.get("/species/{species_id}", response_class=HTMLResponse)
@require_user
@inject
async def species_detail(
    request: Request,
    species_id: int,
    templates: Annotated[Jinja2Templates, Depends(Provide[Container.templates])],
    config: Annotated[CatalogConfig, Depends(Provide[Container.config])],
    catalog: Annotated[SpeciesCatalog, Depends(Provide[Container.species_catalog])],
) -> HTMLResponse:
    """Show the full record for one species."""
    species = await _get_species_or_404(catalog, species_id)
    return render_page(
        request,
        templates,
        config,
        "species/detail.html.j2",
        page_name=species.scientific_name,
        active_page="species",
        card=catalog.card(species, current_user_id(request)),
    )


@router.get("/species/{species_id}/edit", response_model=None)
@require_user
@inject
async def edit_species_page(
    request: Request,
    species_id: int,
    templates: Annotated[Jinja2Templates, Depends(Provide[Container.templates])],
    config: Annotated[CatalogConfig, Depends(Provide[Container.config])],
    catalog: Annotated[SpeciesCatalog, Depends(Provide[Container.species_catalog])],
    store: Annotated[DataStore, Depends(Provide[Container.data_store])],
) -> HTMLResponse | RedirectResponse:
    """Show the edit form prefilled with the stored values."""
    species = await _get_species_or_404(catalog, species_id)
    notifier = get_notifier(request)
    if not _is_owner(request, species):
        notifier.notify(
            "Error updating species", "You can only edit species you added.", Severity.DESTRUCTIVE
        )
        return RedirectResponse(url="/species", status_code=303)

    form = EditSpeciesForm.for_species(store, notifier, species, current_user_id(request)).open()
    return _render_edit(request, templates, config, species, form)


@router.post("/species/{species_id}/edit", response_model=None)
@require_user
@inject
async def update_species(
    request: Request,
    species_id: int,
    templates: Annotated[Jinja2Templates, Depends(Provide[Container.templates])],
    config: Annotated[CatalogConfig, Depends(Provide[Container.config])],
    catalog: Annotated[SpeciesCatalog, Depends(Provide[Container.species_catalog])],
    store: Annotated[DataStore, Depends(Provide[Container.data_store])],
    lookup_service: Annotated[WikipediaLookupService, Depends(Provide[Container.lookup_service])],
) -> HTMLResponse | RedirectResponse:
    """Handle the "Edit Species" form."""
    species = await _get_species_or_404(catalog, species_id)
    notifier = get_notifier(request)
    if not _is_owner(request, species):
        notifier.notify(
            "Error updating species", "You can only edit species you added.", Severity.DESTRUCTIVE
        )
        return RedirectResponse(url="/species", status_code=303)

    submitted = await request.form()
    search = str(submitted.get("search") or "")
    form = EditSpeciesForm.for_species(store, notifier, species, current_user_id(request))
    form.values.update(_form_values(submitted))
    form.open()

    if submitted.get("action") == LOOKUP_ACTION:
        await form.autofill(search, lookup_service)
        return _render_edit(request, templates, config, species, form, search)

    if await form.submit() is None:
        return _render_edit(request, templates, config, species, form, search, status_code=422)

    return RedirectResponse(url=f"/species/{species_id}", status_code=303)


@router.get("/species/{species_id}/delete", response_model=None)
@require_user
@inject
async def delete_species_page(
    request: Request,
    species_id: int,
    templates: Annotated[Jinja2Templates, Depends(Provide[Container.templates])],
    config: Annotated[CatalogConfig, Depends(Provide[Container.config])],
    catalog: Annotated[SpeciesCatalog, Depends(Provide[Container.species_catalog])],
) -> HTMLResponse | RedirectResponse:
    """Ask for confirmation before deleting."""
    species = await _get_species_or_404(catalog, species_id)
    if not _is_owner(request, species):
        get_notifier(request).notify(
            "Error deleting species",
            "You can only delete species you added.",
            Severity.DESTRUCTIVE,
        )
        return RedirectResponse(url="/species", status_code=303)

    return render_page(
        request,
        templates,
        config,
        "species/delete.html.j2",
        page_name="Delete Species",
        active_page="species",
        species=species,
    )


@router.post("/species/{species_id}/delete")
@require_user
@inject
async def delete_species(
    request: Request,
    species_id: int,
    catalog: Annotated[SpeciesCatalog, Depends(Provide[Container.species_catalog])],
) -> RedirectResponse:
    """Delete a species the current user owns."""
    species = await _get_species_or_404(catalog, species_id)
    deleted = await catalog.delete(species, current_user_id(request), get_notifier(request))
    target = "/species" if deleted else f"/species/{species_id}"
    return RedirectResponse(url=target, status_code=303)
