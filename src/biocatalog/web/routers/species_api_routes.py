"""JSON endpoints backing the species form: inline validation, autofill, listing."""

import logging
from typing import Annotated, Any

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Body, Depends, Query, Request

from biocatalog.notifications import RecordingNotifier, Severity
from biocatalog.species.catalog import SpeciesCatalog
from biocatalog.species.lookup import ReferenceLookupError, WikipediaLookupService
from biocatalog.species.schema import SpeciesRecord, check_species, normalize_species
from biocatalog.utils.auth import require_user_api
from biocatalog.web.core.container import Container
from biocatalog.web.core.rendering import current_user_id
from biocatalog.web.models.species import (
    SpeciesListResponse,
    SpeciesLookupResponse,
    SpeciesValidationResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/species")


@router.post("/validate", response_model=SpeciesValidationResponse)
@require_user_api
async def validate_species_values(
    request: Request,
    values: Annotated[dict[str, Any], Body(description="Raw species form values")],
) -> SpeciesValidationResponse:
    """Validate form values as the user edits them.

    Answers 200 for signed-in users; ``valid`` and ``errors`` carry the
    outcome so the form can show messages next to each field.
    """
    result = check_species(values)
    if isinstance(result, SpeciesRecord):
        return SpeciesValidationResponse(valid=True, values=result.model_dump(mode="json"))
    return SpeciesValidationResponse(
        valid=False, errors=result, values=normalize_species(values)
    )


@router.get("/lookup", response_model=SpeciesLookupResponse)
@require_user_api
@inject
async def lookup_species(
    request: Request,
    lookup_service: Annotated[WikipediaLookupService, Depends(Provide[Container.lookup_service])],
    q: Annotated[str, Query(description="Search term, usually the scientific name")] = "",
) -> SpeciesLookupResponse:
    """Fetch a description and image for the autofill button."""
    notifier = RecordingNotifier()
    try:
        result = await lookup_service.lookup(q)
    except ReferenceLookupError as e:
        notifier.notify(e.title, e.message, Severity.DESTRUCTIVE)
        return SpeciesLookupResponse(notifications=notifier.notifications)

    notifier.notify("Wikipedia data loaded successfully!", f'Data for "{result.title}" loaded.')
    return SpeciesLookupResponse(result=result, notifications=notifier.notifications)


@router.get("", response_model=SpeciesListResponse)
@require_user_api
@inject
async def list_species(
    request: Request,
    catalog: Annotated[SpeciesCatalog, Depends(Provide[Container.species_catalog])],
) -> SpeciesListResponse:
    """List every species ordered by scientific name."""
    cards = await catalog.list_cards(current_user_id(request))
    return SpeciesListResponse(species=cards, count=len(cards))
