"""Storytel catalog client.

Two endpoints: a free-text search returning book stubs, and a per-book
detail lookup returning the book/abook/ebook facets. Both identify
themselves with a fixed User-Agent and take the request locale as a
query parameter.
"""

import httpx
from loguru import logger

from ..errors import UpstreamError
from ..models import BOOK_URL, SEARCH_URL

log = logger.bind(stage="api")


class StorytelClient:
    """Thin httpx wrapper around the Storytel search and detail endpoints.

    Raises UpstreamError for transport failures, non-2xx responses and
    bodies that are not JSON. No retries.
    """

    def __init__(
        self,
        search_url: str = SEARCH_URL,
        book_url: str = BOOK_URL,
        user_agent: str = "Storytel",
        timeout: float = 30.0,
    ) -> None:
        self.search_url = search_url
        self.book_url = book_url
        self.user_agent = user_agent
        self.timeout = timeout

    def search(self, term: str, locale: str) -> dict:
        """Search the catalog. `term` is already '+'-joined."""
        log.debug(f"Storytel search: term={term!r} locale={locale}")
        return self._get(self.search_url, {"request_locale": locale, "q": term})

    def fetch_detail(self, book_id: str, locale: str) -> dict:
        """Fetch the detail record for one catalog ID."""
        log.debug(f"Storytel detail: book_id={book_id!r} locale={locale}")
        return self._get(self.book_url, {"bookId": book_id, "request_locale": locale})

    def _get(self, url: str, params: dict) -> dict:
        try:
            resp = httpx.get(
                url,
                params=params,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                f"HTTP {e.response.status_code} from {url}",
                url=url,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Request to {url} failed: {e}", url=url) from e

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError(f"Invalid JSON from {url}", url=url) from e

        if not isinstance(data, dict):
            raise UpstreamError(f"Unexpected payload type from {url}", url=url)
        return data
