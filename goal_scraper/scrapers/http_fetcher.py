# goal_scraper/scrapers/http_fetcher.py

from typing import Optional

import httpx
from bs4 import BeautifulSoup
from loguru import logger

from goal_scraper.models.enums import FetchBackend
from .base_scraper import BaseFetcher, FetchError, PageSnapshot, StructureError

BASE_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "DNT": "1",
    "Connection": "keep-alive",
}


class HttpFetcher(BaseFetcher):
    """Fetcher for pages whose goal table is present in the served markup."""

    backend: FetchBackend = FetchBackend.HTTP

    def __init__(self, settings, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self.client = client or httpx.AsyncClient(
            follow_redirects=True,
            headers={**BASE_HEADERS, "User-Agent": settings.user_agent},
        )

    async def fetch(self, url: str, timeout_ms: int) -> PageSnapshot:
        logger.info(f"Requesting {url}")
        try:
            response = await self.client.get(url, timeout=timeout_ms / 1000)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise FetchError(f"Timed out after {timeout_ms} ms loading {url}") from e
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"HTTP error {e.response.status_code} loading {url}"
            ) from e
        except httpx.RequestError as e:
            raise FetchError(f"Request to {url} failed: {e}") from e

        html = response.text
        soup = BeautifulSoup(html, "html.parser")
        title = soup.title.get_text(strip=True) if soup.title else ""

        for selector in self.settings.selectors.table_selectors:
            if soup.select_one(selector) is not None:
                logger.info(f"Found table with selector: {selector}")
                return PageSnapshot(url=str(response.url), html=html, title=title)

        logger.error(f"Page title: {title}")
        logger.error(f"First 2000 chars of HTML: {html[:2000]}")
        raise StructureError("Could not find goals table", title=title, snippet=html)

    async def close(self) -> None:
        """Closes the underlying HTTP client."""
        await self.client.aclose()
