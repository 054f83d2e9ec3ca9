"""Dependency injection container for the species catalog application."""

from dependency_injector import containers, providers
from fastapi.templating import Jinja2Templates
from jinja2 import StrictUndefined

from biocatalog.comments.service import CommentService
from biocatalog.database.core import DatabaseService
from biocatalog.database.store import DataStore
from biocatalog.species.catalog import SpeciesCatalog
from biocatalog.species.lookup import WikipediaLookupService
from biocatalog.system.path_resolver import PathResolver
from biocatalog.utils.auth import AuthService
from biocatalog.web.core.config import get_config


def create_jinja2_templates(resolver: PathResolver) -> Jinja2Templates:
    """Create Jinja2Templates with dynamic path from resolver and strict undefined handling.

    Configures Jinja2 to raise errors on undefined variables, making missing
    template context obvious during development.
    """
    templates = Jinja2Templates(directory=str(resolver.get_templates_dir()))
    templates.env.undefined = StrictUndefined
    return templates


class Container(containers.DeclarativeContainer):
    """Application dependency injection container.

    Services are configured as singletons; per-request objects such as form
    sessions and notifiers are built inside the route handlers.
    """

    # Core infrastructure services - singletons
    path_resolver = providers.Singleton(PathResolver)

    # Configuration - singleton instance that uses our path_resolver
    config = providers.Singleton(
        get_config,
        path_resolver=path_resolver,
    )

    # Templates configuration - singleton
    templates = providers.Singleton(
        create_jinja2_templates,
        resolver=path_resolver,
    )

    # Database path provider
    database_path = providers.Factory(
        lambda resolver: resolver.get_database_path(),
        resolver=path_resolver,
    )

    database_service = providers.Singleton(
        DatabaseService,
        db_path=database_path,
    )

    data_store = providers.Singleton(
        DataStore,
        database_service=database_service,
    )

    auth_service = providers.Singleton(
        AuthService,
        store=data_store,
    )

    lookup_service = providers.Singleton(
        WikipediaLookupService,
        config=providers.Factory(lambda c: c.lookup, c=config),
    )

    species_catalog = providers.Singleton(
        SpeciesCatalog,
        store=data_store,
        preview_length=providers.Factory(lambda c: c.preview_length, c=config),
    )

    comment_service = providers.Singleton(
        CommentService,
        store=data_store,
    )
