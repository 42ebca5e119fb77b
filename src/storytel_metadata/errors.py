"""Exception hierarchy for the Storytel metadata provider."""


class StorytelError(Exception):
    """Base exception for all provider errors."""


class ConfigError(StorytelError):
    """Invalid or missing configuration."""


class UpstreamError(StorytelError):
    """A request to the Storytel API failed (transport, HTTP status, or body)."""

    def __init__(
        self,
        message: str,
        url: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
