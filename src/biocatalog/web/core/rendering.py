"""Helpers shared by the HTML view routes."""

from typing import Any

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from biocatalog.config import CatalogConfig
from biocatalog.notifications import SessionNotifier, consume_notifications


def get_notifier(request: Request) -> SessionNotifier:
    """Notifier that flashes messages onto the next rendered page."""
    return SessionNotifier(request.session)


def current_user_id(request: Request) -> str | None:
    """Profile id of the signed-in user, if any."""
    if not request.user.is_authenticated:
        return None
    return request.user.identity


def render_page(
    request: Request,
    templates: Jinja2Templates,
    config: CatalogConfig,
    template_name: str,
    *,
    page_name: str | None,
    active_page: str,
    status_code: int = 200,
    **context: Any,
) -> HTMLResponse:
    """Render a page with the context every template extends from base needs.

    Queued notifications are drained into the page.
    """
    return templates.TemplateResponse(
        request,
        template_name,
        {
            # Base template context requirements
            "config": config,
            "page_name": page_name,
            "active_page": active_page,
            "current_user": request.user if request.user.is_authenticated else None,
            "notifications": consume_notifications(request.session),
            # Page-specific context
            **context,
        },
        status_code=status_code,
    )
