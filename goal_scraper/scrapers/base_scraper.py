from abc import ABC, abstractmethod
from typing import Optional

from loguru import logger
from pydantic import BaseModel

from goal_scraper.models.enums import FetchBackend

# Chars of markup kept on a StructureError to help fix selectors
DIAGNOSTIC_SNIPPET_LENGTH = 2000


class ScraperError(Exception):
    """Custom exception for scraper-related errors."""

    pass


class FetchError(ScraperError):
    """Exception raised when the page can't be reached (timeout, network, navigation)."""

    pass


class StructureError(ScraperError):
    """Exception raised when the page lacks the expected goal listing."""

    def __init__(self, message: str, title: str = "", snippet: str = ""):
        super().__init__(message)
        self.title = title
        self.snippet = snippet[:DIAGNOSTIC_SNIPPET_LENGTH]


class PageSnapshot(BaseModel):
    """Rendered markup of one page."""

    url: str
    html: str
    title: str = ""


class BaseFetcher(ABC):
    """Abstract base class for page fetchers.

    A fetcher is created for one run and used as an async context manager so
    its resources are released on every exit path.
    """

    backend: FetchBackend

    @abstractmethod
    async def fetch(self, url: str, timeout_ms: int) -> PageSnapshot:
        """Fetch the rendered markup of a page.

        Args:
            url: Listing page to load.
            timeout_ms: Upper bound for reaching the page.

        Returns:
            The page snapshot.

        Raises:
            FetchError: The page could not be loaded in time.
            StructureError: The page loaded without a goal listing table.
        """
        pass

    async def close(self) -> None:
        """Releases the fetcher's resources."""
        pass

    async def __aenter__(self) -> "BaseFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
        logger.debug(f"Closed {self.backend.value} fetcher")


def create_fetcher(settings, debug: bool = False, backend: Optional[FetchBackend] = None) -> BaseFetcher:
    """Builds a fresh fetcher for the configured (or overridden) backend."""
    backend = backend or settings.fetch_backend
    if backend == FetchBackend.HTTP:
        from .http_fetcher import HttpFetcher

        return HttpFetcher(settings)
    from .browser_fetcher import BrowserFetcher

    return BrowserFetcher(settings, debug=debug)
