"""Search coordination: cache lookup, catalog search, detail fan-out, formatting.

StorytelProvider.search() never raises. Upstream failures degrade to fewer
(or zero) matches and are reported through SearchResult.failures.
"""

import copy
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

from loguru import logger

from .api.storytel import StorytelClient
from .cache import TTLCache
from .config import ProviderConfig
from .errors import ConfigError
from .formatter import format_book_metadata
from .models import FailureKind, SearchFailure, SearchResult

log = logger.bind(stage="provider")


class CatalogClient(Protocol):
    def search(self, term: str, locale: str) -> dict: ...

    def fetch_detail(self, book_id: str, locale: str) -> dict: ...


def build_search_term(query: str) -> tuple[str, str]:
    """Return (clean_query, encoded_term) for a free-text query.

    Everything from the first colon on is treated as subtitle noise;
    whitespace runs in the remainder become '+'.
    """
    clean_query = query.split(":", 1)[0].strip()
    return clean_query, re.sub(r"\s+", "+", clean_query)


def cache_key(term: str, author: str, locale: str) -> str:
    return f"{term}-{author}-{locale}"


def _stub_book_id(stub: object) -> object | None:
    """Catalog ID of a search stub, or None when the stub has no usable shape."""
    if not isinstance(stub, dict):
        return None
    book = stub.get("book")
    if not isinstance(book, dict):
        return None
    return book.get("id")


class StorytelProvider:
    """Searches Storytel and returns canonical metadata records.

    Attributes:
        client: Catalog client (search + fetch_detail)
        cache: TTL cache shared by every search made through this provider
        config: Provider configuration
    """

    def __init__(
        self,
        client: CatalogClient | None = None,
        cache: TTLCache | None = None,
        config: ProviderConfig | None = None,
        locale: str | None = None,
    ) -> None:
        self.config = config or ProviderConfig()
        self.client = client or StorytelClient(
            search_url=self.config.search_url,
            book_url=self.config.book_url,
            user_agent=self.config.user_agent,
            timeout=self.config.http_timeout,
        )
        self.cache = cache if cache is not None else TTLCache(ttl=self.config.cache_ttl)
        self._locale = locale or self.config.locale

    @property
    def locale(self) -> str:
        return self._locale

    def set_locale(self, locale: str) -> None:
        """Change the locale used by subsequent searches."""
        if not locale or not locale.strip():
            raise ConfigError("Locale must be a non-empty string")
        self._locale = locale.strip()
        log.debug(f"Locale set to {self._locale}")

    def search(
        self,
        query: str,
        author: str = "",
        locale: str | None = None,
    ) -> SearchResult:
        """Search the catalog and format every usable result.

        Args:
            query: Free-text title query (text after a colon is ignored)
            author: Author hint; only part of the cache key
            locale: Overrides the provider locale for this call only

        Returns:
            SearchResult with matches in upstream order and one
            SearchFailure per dropped item
        """
        locale = locale or self._locale
        clean_query, term = build_search_term(query)
        key = cache_key(term, author, locale)

        log.info(f"Original query: {query!r}")
        log.debug(f"Cleaned query: {clean_query!r}")

        cached = self.cache.get(key)
        if cached is not None:
            log.debug(f"Cache hit: {key!r}")
            return SearchResult(matches=copy.deepcopy(cached.matches))

        log.info(f"Searching for {clean_query!r} by {author!r} in locale {locale}")
        try:
            data = self.client.search(term, locale)
        except Exception as e:
            log.warning(f"Storytel search failed: {e}")
            return SearchResult(failures=[SearchFailure(FailureKind.SEARCH, str(e))])

        books = data.get("books") if isinstance(data, dict) else None
        if not books or not isinstance(books, list):
            log.info("No books found")
            return SearchResult()

        log.info(f"Found {len(books)} books in search results")

        failures: list[SearchFailure] = []
        book_ids: list[str] = []
        for stub in books:
            book_id = _stub_book_id(stub)
            if not book_id:
                failures.append(
                    SearchFailure(FailureKind.MISSING_ID, "Search result has no book id"),
                )
                continue
            book_ids.append(str(book_id))

        outcomes = self._fetch_all(book_ids, locale)

        matches: list[dict] = []
        for outcome in outcomes:
            if isinstance(outcome, SearchFailure):
                failures.append(outcome)
            else:
                matches.append(outcome)

        log.info(f"Processed {len(matches)} valid matches")
        if failures:
            log.debug(f"Dropped {len(failures)} results: {[str(f.kind) for f in failures]}")

        # Cached matches are copied in and out
        self.cache.set(key, SearchResult(matches=copy.deepcopy(matches)))
        return SearchResult(matches=matches, failures=failures)

    def _fetch_all(self, book_ids: list[str], locale: str) -> list[dict | SearchFailure]:
        """Fetch and format every book concurrently; results keep input order."""
        if not book_ids:
            return []

        max_workers = self.config.max_detail_workers or len(book_ids)
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(
                executor.map(lambda book_id: self._fetch_one(book_id, locale), book_ids),
            )

    def _fetch_one(self, book_id: str, locale: str) -> dict | SearchFailure:
        try:
            detail = self.client.fetch_detail(book_id, locale)
        except Exception as e:
            log.warning(f"Error fetching book details for ID {book_id}: {e}")
            return SearchFailure(FailureKind.DETAIL, str(e), book_id=book_id)

        try:
            metadata = format_book_metadata(detail, locale)
        except Exception as e:
            log.warning(f"Malformed detail payload for ID {book_id}: {e}")
            return SearchFailure(FailureKind.INVALID, f"Malformed payload: {e}", book_id=book_id)

        if metadata is None:
            return SearchFailure(
                FailureKind.INVALID,
                "Missing book facet or edition",
                book_id=book_id,
            )
        return metadata
