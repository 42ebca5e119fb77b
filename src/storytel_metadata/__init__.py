"""Storytel metadata provider -- search Storytel and normalize book metadata.

Core modules:
    cleaner   -- Ordered regex rules stripping episode/volume/series noise
                 and abridgement markers from catalog strings
    titles    -- Title/subtitle decomposition (series-aware, then colon split)
    formatter -- Canonical metadata records from detail payloads
    provider  -- Search coordination: cache, search, concurrent detail fetches
    cache     -- Thread-safe fixed-TTL cache with an injectable clock
    config    -- Configuration via pydantic-settings (STORYTEL_* env vars)
    cli       -- Click CLI entry point

Subpackages:
    api -- Storytel HTTP client
"""

from .models import SearchFailure, SearchResult
from .provider import StorytelProvider

__all__ = ["SearchFailure", "SearchResult", "StorytelProvider"]
