"""Assemble canonical metadata records from Storytel detail payloads.

A detail payload nests its facets under "slb": "book" (work-level data),
"abook" (audio edition) and "ebook" (ebook edition). Records without a
book facet, or without any edition, are rejected by returning None.
"""

from loguru import logger

from .cleaner import ensure_string, split_genre, upgrade_cover_url
from .models import DEFAULT_LOCALE, METADATA_FIELDS
from .titles import decompose_title

log = logger.bind(stage="formatter")


def _series_info(book: dict) -> dict | None:
    """Primary series of a book, only when both name and order are declared."""
    series = book.get("series") or []
    order = book.get("seriesOrder")
    if not series or not order:
        return None
    return {
        "series": ensure_string(series[0].get("name")),
        "sequence": ensure_string(order),
    }


def _duration_minutes(length: object) -> int | None:
    """Audio length in ms -> whole minutes. Numeric strings are accepted."""
    if not length:
        return None
    try:
        return int(float(length)) // 60000
    except (TypeError, ValueError, OverflowError):
        log.debug(f"Unparseable audio length: {length!r}")
        return None


def _edition_fields(edition: dict, audio: bool) -> dict:
    release_date = edition.get("releaseDateFormat")
    fields: dict = {}
    if audio:
        fields["duration"] = _duration_minutes(edition.get("length"))
        fields["narrator"] = edition.get("narratorAsString") or None
    fields["description"] = ensure_string(edition.get("description"))
    fields["publisher"] = ensure_string((edition.get("publisher") or {}).get("name"))
    fields["publishedYear"] = str(release_date)[:4] if release_date is not None else None
    fields["isbn"] = ensure_string(edition.get("isbn"))
    return fields


def format_book_metadata(detail: dict, locale: str = DEFAULT_LOCALE) -> dict | None:
    """Build one canonical metadata dict from a detail payload.

    Returns None when the payload has no book facet or neither an audio nor
    an ebook edition. The audio edition wins when both are present. Keys
    whose value is None are left out of the result.
    """
    slb = detail.get("slb") or {}
    book = slb.get("book")
    if not book:
        log.debug("Detail payload has no book facet")
        return None

    abook = slb.get("abook")
    ebook = slb.get("ebook")
    if not abook and not ebook:
        log.debug(f"Book {book.get('id')!r} has neither audio nor ebook edition")
        return None

    series_info = _series_info(book)
    if series_info:
        parts = decompose_title(
            book.get("name"),
            series_name=(book["series"][0].get("name") or ""),
            sequence=ensure_string(book["seriesOrder"]),
        )
    else:
        parts = decompose_title(book.get("name"))

    category = book.get("category") or {}
    genres = split_genre(ensure_string(category.get("title")))
    language = (book.get("language") or {}).get("isoValue") or locale

    metadata: dict = {
        "title": ensure_string(parts.title),
        "subtitle": parts.subtitle,
        "author": ensure_string(book.get("authorsAsString")),
        "language": ensure_string(language),
        "genres": genres or None,
        "tags": list(genres) or None,
        "series": [series_info] if series_info else None,
        "cover": upgrade_cover_url(book.get("largeCover")),
    }

    if abook:
        metadata.update(_edition_fields(abook, audio=True))
    else:
        metadata.update(_edition_fields(ebook, audio=False))

    return {
        key: metadata[key]
        for key in METADATA_FIELDS
        if metadata.get(key) is not None
    }
