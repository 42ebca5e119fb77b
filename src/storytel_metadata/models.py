"""Core enums, constants, and result types for the Storytel metadata provider.

Enums:
    FailureKind -- Why a search or a single catalog item was dropped
                   (search, missing_id, detail, invalid).

Dataclasses:
    SearchFailure -- One dropped item (or the whole search) with its reason.
    SearchResult  -- Matches plus the failures collected while building them.
"""

from dataclasses import dataclass, field
from enum import StrEnum

STORYTEL_HOST = "https://storytel.com"
SEARCH_URL = "https://www.storytel.com/api/search.action"
BOOK_URL = "https://www.storytel.com/api/getBookInfoForContent.action"

DEFAULT_LOCALE = "en"
DEFAULT_CACHE_TTL = 600

# Key order of a formatted record (edition fields follow the book fields)
METADATA_FIELDS: tuple[str, ...] = (
    "title",
    "subtitle",
    "author",
    "language",
    "genres",
    "tags",
    "series",
    "cover",
    "duration",
    "narrator",
    "description",
    "publisher",
    "publishedYear",
    "isbn",
)


class FailureKind(StrEnum):
    SEARCH = "search"
    MISSING_ID = "missing_id"
    DETAIL = "detail"
    INVALID = "invalid"


@dataclass
class SearchFailure:
    """A dropped search or catalog item. book_id is None for search-level failures."""

    kind: FailureKind
    message: str
    book_id: str | None = None

    def to_dict(self) -> dict:
        return {"kind": str(self.kind), "message": self.message, "book_id": self.book_id}


@dataclass
class SearchResult:
    """Formatted matches for one query, plus per-item diagnostics.

    to_dict() returns the {"matches": [...]} shape callers expect; failures
    are only exposed to callers that ask for them.
    """

    matches: list[dict] = field(default_factory=list)
    failures: list[SearchFailure] = field(default_factory=list)

    def to_dict(self, include_failures: bool = False) -> dict:
        data: dict = {"matches": self.matches}
        if include_failures:
            data["failures"] = [f.to_dict() for f in self.failures]
        return data
