"""External API clients for catalog lookups.

Submodules:
    storytel -- Storytel search and book-detail client
"""
