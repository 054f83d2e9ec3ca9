from collections.abc import AsyncGenerator, Callable, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio
from dependency_injector import providers
from fastapi import FastAPI
from starlette.testclient import TestClient

from biocatalog.config import CatalogConfig, ConfigManager
from biocatalog.config.models import LookupConfig
from biocatalog.database.core import DatabaseService
from biocatalog.database.store import DataStore
from biocatalog.notifications import RecordingNotifier
from biocatalog.profiles.models import Profile
from biocatalog.species.lookup import WikipediaLookupService
from biocatalog.system.path_resolver import PathResolver
from biocatalog.web.core.container import Container
from biocatalog.web.core.factory import create_app

QUERCUS_SEARCH = {
    "batchcomplete": "",
    "query": {
        "searchinfo": {"totalhits": 2},
        "search": [
            {"ns": 0, "title": "Quercus robur", "pageid": 261227},
            {"ns": 0, "title": "Oak", "pageid": 22454},
        ],
    },
}

QUERCUS_SUMMARY = {
    "batchcomplete": "",
    "query": {
        "pages": {
            "261227": {
                "pageid": 261227,
                "ns": 0,
                "title": "Quercus robur",
                "extract": "Quercus robur, the pedunculate oak, is a species of flowering plant.",
                "thumbnail": {
                    "source": "https://upload.wikimedia.org/quercus_robur.jpg",
                    "width": 500,
                    "height": 375,
                },
            }
        }
    },
}

EMPTY_SEARCH = {"batchcomplete": "", "query": {"searchinfo": {"totalhits": 0}, "search": []}}


@pytest.fixture
def path_resolver(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> PathResolver:
    """Provide a PathResolver whose writable data lives in a temp directory.

    Templates and static files still resolve to the package so views render
    the real pages.
    """
    monkeypatch.setenv("BIOCATALOG_DATA", str(tmp_path / "data"))
    monkeypatch.delenv("BIOCATALOG_CONFIG", raising=False)
    monkeypatch.delenv("BIOCATALOG_APP", raising=False)
    return PathResolver()


@pytest.fixture
def test_config(path_resolver: PathResolver) -> CatalogConfig:
    """Default configuration, written to and loaded from the temp data directory."""
    return ConfigManager(path_resolver).load()


@pytest_asyncio.fixture
async def database_service(path_resolver: PathResolver) -> AsyncGenerator[DatabaseService, None]:
    """Initialized database service on a temp file; disposed after the test."""
    service = DatabaseService(path_resolver.get_database_path())
    await service.initialize()
    yield service
    await service.dispose()


@pytest.fixture
def data_store(database_service: DatabaseService) -> DataStore:
    return DataStore(database_service)


@pytest_asyncio.fixture
async def profile(data_store: DataStore) -> Profile:
    """A stored profile to own species and comments."""
    return await data_store.create(
        Profile,
        {"display_name": "Ada", "email": "ada@example.com", "password_hash": "not-a-real-hash"},
    )


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def wikipedia_requests() -> list[httpx.Request]:
    """Every request the mocked Wikipedia API receives."""
    return []


@pytest.fixture
def wikipedia_handler(
    wikipedia_requests: list[httpx.Request],
) -> Callable[[httpx.Request], httpx.Response]:
    """Answer search and summary requests like the MediaWiki API for Quercus robur."""

    def handler(request: httpx.Request) -> httpx.Response:
        wikipedia_requests.append(request)
        if request.url.params.get("list") == "search":
            if "robur" in request.url.params.get("srsearch", "").lower():
                return httpx.Response(200, json=QUERCUS_SEARCH)
            return httpx.Response(200, json=EMPTY_SEARCH)
        return httpx.Response(200, json=QUERCUS_SUMMARY)

    return handler


@pytest.fixture
def lookup_service(
    wikipedia_handler: Callable[[httpx.Request], httpx.Response],
) -> WikipediaLookupService:
    """Lookup service whose HTTP client never leaves the process."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(wikipedia_handler))
    return WikipediaLookupService(LookupConfig(), client=client)


@pytest.fixture
def app(
    path_resolver: PathResolver,
    test_config: CatalogConfig,
    lookup_service: WikipediaLookupService,
) -> Iterator[FastAPI]:
    """Create FastAPI app with isolated paths and a mocked Wikipedia.

    Providers are overridden on the Container class BEFORE app creation so the
    container instance built by create_app() picks them up.
    """
    Container.path_resolver.override(providers.Singleton(lambda: path_resolver))
    Container.database_path.override(providers.Factory(lambda: path_resolver.get_database_path()))
    Container.config.override(providers.Singleton(lambda: test_config))
    Container.lookup_service.override(providers.Singleton(lambda: lookup_service))

    yield create_app()

    Container.path_resolver.reset_override()
    Container.database_path.reset_override()
    Container.config.reset_override()
    Container.lookup_service.reset_override()


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Test client with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def species_form_data() -> dict[str, Any]:
    """A valid "Add Species" submission."""
    return {
        "scientific_name": "Quercus robur",
        "common_name": "English oak",
        "kingdom": "Plantae",
        "total_population": "1000000",
        "image": "https://upload.wikimedia.org/quercus_robur.jpg",
        "description": "A large deciduous tree native to most of Europe.",
        "action": "save",
    }


DEFAULT_PASSWORD = "correct horse battery"


@pytest.fixture
def register_sync_client() -> Callable[..., TestClient]:
    """Provide a function that signs a TestClient up as a new profile.

    Example:
        def test_something(client, register_sync_client):
            register_sync_client(client, email="grace@example.com", display_name="Grace")
    """

    def _register(
        client: TestClient,
        email: str = "ada@example.com",
        display_name: str = "Ada",
        password: str = DEFAULT_PASSWORD,
    ) -> TestClient:
        response = client.post(
            "/register",
            data={
                "display_name": display_name,
                "email": email,
                "biography": "",
                "password": password,
                "confirm": password,
            },
            follow_redirects=False,
        )
        assert response.status_code == 303  # Successful sign-up redirects
        return client

    return _register


@pytest.fixture
def authenticated_client(
    client: TestClient, register_sync_client: Callable[..., TestClient]
) -> TestClient:
    """A client signed in as ada@example.com."""
    return register_sync_client(client)
