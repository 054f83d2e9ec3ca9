"""Profile directory page."""

import logging
from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from biocatalog.config import CatalogConfig
from biocatalog.database.store import DataStore, PersistenceError
from biocatalog.notifications import Severity
from biocatalog.profiles.models import Profile
from biocatalog.utils.auth import require_user
from biocatalog.web.core.container import Container
from biocatalog.web.core.rendering import current_user_id, get_notifier, render_page

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/profiles", response_class=HTMLResponse)
@require_user
@inject
async def profiles_list(
    request: Request,
    templates: Annotated[Jinja2Templates, Depends(Provide[Container.templates])],
    config: Annotated[CatalogConfig, Depends(Provide[Container.config])],
    store: Annotated[DataStore, Depends(Provide[Container.data_store])],
) -> HTMLResponse:
    """List every profile by display name, descending."""
    try:
        profiles = await store.list(Profile, "display_name", descending=True)
    except PersistenceError as e:
        logger.error("Error fetching profiles: %s", e.message)
        get_notifier(request).notify("Error fetching profiles.", e.message, Severity.DESTRUCTIVE)
        profiles = []

    return render_page(
        request,
        templates,
        config,
        "profiles/list.html.j2",
        page_name="Users List",
        active_page="profiles",
        profiles=profiles,
        viewer_id=current_user_id(request),
    )
