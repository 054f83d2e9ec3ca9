"""Comment thread pages for a species."""

from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from biocatalog.comments.service import CommentService
from biocatalog.config import CatalogConfig
from biocatalog.species.catalog import SpeciesCatalog
from biocatalog.utils.auth import require_user
from biocatalog.web.core.container import Container
from biocatalog.web.core.rendering import current_user_id, get_notifier, render_page
from biocatalog.web.forms import CommentForm

router = APIRouter()


@router.get("/species/{species_id}/comments", response_class=HTMLResponse)
@require_user
@inject
async def comments_page(
    request: Request,
    species_id: int,
    templates: Annotated[Jinja2Templates, Depends(Provide[Container.templates])],
    config: Annotated[CatalogConfig, Depends(Provide[Container.config])],
    catalog: Annotated[SpeciesCatalog, Depends(Provide[Container.species_catalog])],
    comment_service: Annotated[CommentService, Depends(Provide[Container.comment_service])],
) -> HTMLResponse:
    """Show a species' comments, newest first, with the add form."""
    species = await catalog.get(species_id)
    if species is None:
        raise HTTPException(status_code=404, detail="Species not found")

    comments = await comment_service.list_for_species(
        species_id, current_user_id(request), get_notifier(request)
    )
    return render_page(
        request,
        templates,
        config,
        "species/comments.html.j2",
        page_name="Comments",
        active_page="species",
        species=species,
        comments=comments,
        form=CommentForm(),
    )


@router.post("/species/{species_id}/comments")
@require_user
@inject
async def add_comment(
    request: Request,
    species_id: int,
    comment_service: Annotated[CommentService, Depends(Provide[Container.comment_service])],
) -> RedirectResponse:
    """Add a comment and return to the thread."""
    form = CommentForm(await request.form())
    await comment_service.add(
        species_id, current_user_id(request), form.comment.data, get_notifier(request)
    )
    return RedirectResponse(url=f"/species/{species_id}/comments", status_code=303)


@router.post("/species/{species_id}/comments/{comment_id}/delete")
@require_user
@inject
async def delete_comment(
    request: Request,
    species_id: int,
    comment_id: int,
    comment_service: Annotated[CommentService, Depends(Provide[Container.comment_service])],
) -> RedirectResponse:
    """Delete one of the current user's comments."""
    await comment_service.delete(comment_id, current_user_id(request), get_notifier(request))
    return RedirectResponse(url=f"/species/{species_id}/comments", status_code=303)
