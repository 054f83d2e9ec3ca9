"""Wikipedia lookup used to autofill species descriptions and images.

The lookup is two sequential MediaWiki API calls: a full-text search for the
query, then an intro extract and thumbnail for the first hit's title. It is
best-effort only; callers turn every failure into a warning.
"""

import logging
from typing import Any

import httpx
from pydantic import BaseModel

from biocatalog.config.models import LookupConfig

logger = logging.getLogger(__name__)


class LookupResult(BaseModel):
    """Best-effort reference data for one species."""

    title: str
    description: str = ""
    image_url: str = ""


class ReferenceLookupError(Exception):
    """Raised when a lookup cannot produce usable data.

    ``title`` and ``message`` are written for the end user.
    """

    def __init__(self, title: str, message: str | None = None) -> None:
        super().__init__(title if message is None else f"{title}: {message}")
        self.title = title
        self.message = message


class EmptyQueryError(ReferenceLookupError):
    """The search term was blank."""

    def __init__(self) -> None:
        super().__init__("Please enter a search term.")


class NoMatchError(ReferenceLookupError):
    """The search returned no articles."""

    def __init__(self) -> None:
        super().__init__("No matching article found.")


class LookupFailedError(ReferenceLookupError):
    """Network, protocol, or payload failure."""

    def __init__(self) -> None:
        super().__init__(
            "Error fetching data", "An error occurred while fetching Wikipedia data."
        )


class WikipediaLookupService:
    """Queries the MediaWiki action API."""

    def __init__(self, config: LookupConfig, client: httpx.AsyncClient | None = None) -> None:
        """Initialize the lookup service.

        Args:
            config: Endpoint, timeout, and thumbnail settings
            client: Optional preconfigured client; one is created per call otherwise
        """
        self.config = config
        self.client = client

    async def start(self) -> None:
        """Open a pooled HTTP client for the lifetime of the application."""
        if self.client is not None:
            return
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.timeout),
            headers={"User-Agent": self.config.user_agent},
        )
        logger.info("Wikipedia lookup client started for %s", self.config.api_url)

    async def stop(self) -> None:
        """Close the pooled HTTP client."""
        if self.client is None:
            return
        await self.client.aclose()
        self.client = None
        logger.info("Wikipedia lookup client stopped")

    async def search_titles(self, query: str) -> list[str]:
        """Return article titles matching a free-text query, best match first."""
        data = await self._get(
            {
                "action": "query",
                "format": "json",
                "list": "search",
                "srsearch": query,
                "utf8": "",
            }
        )
        results = (data.get("query") or {}).get("search") or []
        return [result["title"] for result in results if result.get("title")]

    async def fetch_summary(self, title: str) -> LookupResult | None:
        """Return the intro extract and thumbnail for an exact title.

        Returns:
            None when the response carries no page data
        """
        data = await self._get(
            {
                "action": "query",
                "format": "json",
                "prop": "extracts|pageimages",
                "exintro": 1,
                "explaintext": 1,
                "piprop": "thumbnail",
                "pithumbsize": self.config.thumbnail_size,
                "redirects": 1,
                "titles": title,
            }
        )
        pages = (data.get("query") or {}).get("pages") or {}
        if not pages:
            return None

        page = next(iter(pages.values()))
        if not isinstance(page, dict) or "missing" in page:
            return None

        thumbnail = page.get("thumbnail") or {}
        return LookupResult(
            title=page.get("title") or title,
            description=page.get("extract") or "",
            image_url=thumbnail.get("source") or "",
        )

    async def lookup(self, query: str) -> LookupResult:
        """Search for a query and summarize the first matching article.

        Raises:
            EmptyQueryError: If the query is blank; no request is made
            NoMatchError: If the search has no results; the summary is not requested
            LookupFailedError: On network errors, bad responses, or missing page data
        """
        query = (query or "").strip()
        if not query:
            raise EmptyQueryError()

        try:
            titles = await self.search_titles(query)
            if not titles:
                raise NoMatchError()

            result = await self.fetch_summary(titles[0])
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error("Wikipedia lookup for %r failed: %s", query, e)
            raise LookupFailedError() from e

        if result is None:
            logger.warning("Wikipedia returned no page data for %r", titles[0])
            raise LookupFailedError()

        logger.info("Wikipedia lookup for %r matched %r", query, result.title)
        return result

    async def _get(self, params: dict[str, Any]) -> dict[str, Any]:
        """Issue one GET against the API and decode the JSON body."""
        if self.client is not None:
            return await self._request(self.client, params)

        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.timeout),
            headers={"User-Agent": self.config.user_agent},
        ) as client:
            return await self._request(client, params)

    async def _request(self, client: httpx.AsyncClient, params: dict[str, Any]) -> dict[str, Any]:
        response = await client.get(self.config.api_url, params=params)
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("Unexpected response payload")
        return data
