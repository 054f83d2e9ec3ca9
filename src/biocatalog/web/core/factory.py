"""Application factory for creating FastAPI application with dependency injection."""

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from starlette.middleware.authentication import AuthenticationMiddleware
from starsessions import CookieStore, SessionMiddleware

from biocatalog.system.structlog_configurator import get_package_version
from biocatalog.utils.auth import SessionAuthBackend
from biocatalog.web.core.container import Container
from biocatalog.web.core.lifespan import lifespan
from biocatalog.web.core.rendering import render_page
from biocatalog.web.middleware.request_logging import StructuredRequestLoggingMiddleware
from biocatalog.web.routers import (
    auth_routes,
    comments_view_routes,
    health_api_routes,
    profiles_view_routes,
    species_api_routes,
    species_view_routes,
)


def create_app() -> FastAPI:
    """Create FastAPI application with dependency injection.

    This factory function creates a fully configured FastAPI application with:
    - Dependency injection container setup
    - Session, authentication, and request logging middleware
    - All routers properly configured with prefixes and tags
    - Lifespan management for service startup and shutdown

    Returns:
        FastAPI: The configured application instance.
    """
    container = Container()
    config = container.config()

    app = FastAPI(
        lifespan=lifespan,
        title="Species Catalog API",
        description="API for the species catalog and its data entry forms",
        version=get_package_version(),
    )
    app.container = container  # type: ignore[attr-defined]

    # Middleware added last runs first: sessions, then authentication, then logging
    app.add_middleware(StructuredRequestLoggingMiddleware)
    app.add_middleware(AuthenticationMiddleware, backend=SessionAuthBackend())
    app.add_middleware(
        SessionMiddleware,
        store=CookieStore(secret_key=config.session.secret_key),
        cookie_https_only=config.session.https_only,
        lifetime=config.session.lifetime,
    )

    # Wire dependencies for all router modules
    container.wire(
        modules=[
            "biocatalog.web.routers.auth_routes",
            "biocatalog.web.routers.comments_view_routes",
            "biocatalog.web.routers.health_api_routes",
            "biocatalog.web.routers.profiles_view_routes",
            "biocatalog.web.routers.species_api_routes",
            "biocatalog.web.routers.species_view_routes",
        ]
    )

    # === API Routes (included in documentation) ===
    app.include_router(health_api_routes.router, prefix="/api", tags=["Health Check API"])
    app.include_router(species_api_routes.router, prefix="/api", tags=["Species API"])

    # === View Routes (excluded from API documentation) ===
    # Auth routes carry /api/auth/status themselves, so they stay in the schema
    app.include_router(auth_routes.router, tags=["Authentication"])
    app.include_router(
        species_view_routes.router,
        tags=["Species Views"],
        include_in_schema=False,
    )
    app.include_router(
        comments_view_routes.router,
        tags=["Comment Views"],
        include_in_schema=False,
    )
    app.include_router(
        profiles_view_routes.router,
        tags=["Profile Views"],
        include_in_schema=False,
    )

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def read_root(request: Request) -> HTMLResponse:
        """Render the landing page."""
        return render_page(
            request,
            container.templates(),
            container.config(),
            "index.html.j2",
            page_name=None,
            active_page="home",
        )

    return app
