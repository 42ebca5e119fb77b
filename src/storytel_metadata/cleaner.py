"""Rule-based cleanup of Storytel catalog strings.

Storytel titles carry German and English episode/volume/series markers
("Die drei ???, Folge 12: ...", "Name - Krimi-Reihe 3", "(Ungekürzt)").
The rules below strip them in a fixed order: the more specific prefixes
run before the generic numbered ones.
"""

import re
from collections.abc import Iterable

from loguru import logger

from .models import STORYTEL_HOST

log = logger.bind(stage="cleaner")

TITLE_PREFIX_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^.*?,\s*Folge\s*\d+:\s*", re.IGNORECASE),
    re.compile(r"^.*?,\s*Band\s*\d+:\s*", re.IGNORECASE),
    re.compile(r"^.*?\s+-\s+\d+:\s*", re.IGNORECASE),
    re.compile(r"^.*?\s+\d+:\s*", re.IGNORECASE),
    re.compile(r"^.*?,\s*Teil\s*\d+:\s*", re.IGNORECASE),
    re.compile(r"^.*?,\s*Volume\s*\d+:\s*", re.IGNORECASE),
)

TITLE_SUFFIX_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\s*\((Ungekürzt|Gekürzt)\)\s*$", re.IGNORECASE),
    re.compile(r",\s*Teil\s+\d+$", re.IGNORECASE),
    re.compile(r"-\s*.*?(?:Reihe|Serie)\s+\d+$", re.IGNORECASE),
)

_AGE_RANGE = re.compile(r"\d+\s*(bis|-)\s*\d+\s*(Jahre|Year|Age)", re.IGNORECASE)


def ensure_string(value: object) -> str:
    """Coerce a payload value to a trimmed string ("" for None)."""
    if value is None:
        return ""
    return str(value).strip()


def apply_title_rules(text: str) -> str:
    """Run every prefix rule, then every suffix rule, once each (no trim)."""
    for pattern in TITLE_PREFIX_PATTERNS:
        text = pattern.sub("", text, count=1)
    for pattern in TITLE_SUFFIX_PATTERNS:
        text = pattern.sub("", text, count=1)
    return text


def clean(text: str) -> str:
    """Strip episode/volume/series noise and abridgement markers from text.

    A single pass can expose a new matchable prefix (e.g. "A 1: B 2: C"),
    so the rules are repeated until the string stops changing. This keeps
    clean() idempotent.
    """
    current = text.strip()
    while True:
        cleaned = apply_title_rules(current).strip()
        if cleaned == current:
            return cleaned
        current = cleaned


def clean_title(title: str | None, series_name: str | None = None) -> str:
    """Clean a title and drop a leading "<series> 3:" style prefix.

    Example: clean_title("Sherlock 2: The Hound", "Sherlock") -> "The Hound"
    """
    if not title:
        return ""

    cleaned = clean(title)
    if series_name:
        series_prefix = re.compile(
            rf"^{re.escape(series_name)}[\s,-]*\d*:?\s*", re.IGNORECASE,
        )
        cleaned = series_prefix.sub("", cleaned, count=1)

    if cleaned != title:
        log.debug(f"clean_title: {title!r} -> {cleaned!r}")
    return cleaned.strip()


def clean_categories(categories: Iterable[str] | None) -> list[str]:
    """Drop age-range categories ("8 bis 10 Jahre", "3-5 Years"), keep order."""
    if not categories or not isinstance(categories, (list, tuple)):
        return []
    return [cat for cat in categories if not _AGE_RANGE.search(cat)]


def split_genre(genre: str | None) -> list[str]:
    """Split a slash-delimited category title into trimmed genre names.

    Empty segments are kept ("Krimi//Thriller" -> ["Krimi", "", "Thriller"]).
    """
    if not genre:
        return []
    return [g.strip() for g in genre.split("/")]


def upgrade_cover_url(path: str | None) -> str | None:
    """Turn a relative 320x320 cover path into an absolute 640x640 URL."""
    if not path:
        return None
    return f"{STORYTEL_HOST}{path.replace('320x320', '640x640', 1)}"
