"""Split a raw Storytel title into a display title and subtitle.

Series-aware extraction runs first: when the book declares a series, the
subtitle becomes "<series>, <sequence>" and the series name is cut out of
the title. Only titles without a series fall back to a colon split.
"""

import re
from typing import NamedTuple

from loguru import logger

from .cleaner import apply_title_rules

log = logger.bind(stage="titles")


class TitleParts(NamedTuple):
    title: str
    subtitle: str | None


def decompose_title(
    raw_title: str | None,
    series_name: str | None = None,
    sequence: str | None = None,
) -> TitleParts:
    """Decompose a catalog title into (title, subtitle).

    Examples:
        ("Mystery, Folge 3: The Dark House")          -> ("The Dark House", None)
        ("Night Watch: A Novel of Discworld")         -> ("Night Watch", "A Novel of Discworld")
        ("The Chronicles - Chronicles 2", "Chronicles", "2")
                                                      -> ("The Chronicles", "Chronicles, 2")
    """
    if not raw_title:
        return TitleParts("", None)

    title = apply_title_rules(raw_title)
    subtitle: str | None = None

    if series_name and sequence:
        subtitle = f"{series_name}, {sequence}"

        if series_name in title:
            before_series = re.match(
                rf"^(.+?)[-,]\s*{re.escape(series_name)}", title,
            )
            if before_series:
                title = before_series.group(1).strip()

        title = apply_title_rules(title)
    elif ":" in title:
        head, _, tail = title.partition(":")
        title = head.strip()
        subtitle = tail.strip()

    title = title.strip()
    if subtitle is not None:
        subtitle = subtitle.strip()

    if title != raw_title or subtitle:
        log.debug(f"decompose_title: {raw_title!r} -> title={title!r} subtitle={subtitle!r}")

    return TitleParts(title, subtitle)
