"""CLI entry point for the Storytel metadata provider."""

import json
from pathlib import Path

import click
from loguru import logger

from .config import ProviderConfig
from .errors import ConfigError
from .provider import StorytelProvider

log = logger.bind(stage="cli")


@click.command()
@click.argument("query")
@click.option("-a", "--author", default="", help="Author hint for the search.")
@click.option(
    "-l", "--locale", default=None, help="Catalog locale (e.g. en, de, sv)."
)
@click.option(
    "--failures", is_flag=True, help="Include dropped results in the output."
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True),
    default=None,
    help="Path to .env file.",
)
def main(
    query: str,
    author: str,
    locale: str | None,
    failures: bool,
    verbose: bool,
    config_file: str | None,
) -> None:
    """Search Storytel and print normalized book metadata as JSON."""
    # Pass CLI flags as kwargs to avoid env pollution
    config_kwargs: dict[str, str] = {}
    if verbose:
        config_kwargs["log_level"] = "DEBUG"

    env_file = Path(config_file) if config_file else None
    if env_file is not None:
        config = ProviderConfig(_env_file=env_file, **config_kwargs)  # type: ignore[arg-type]
    else:
        config = ProviderConfig(**config_kwargs)  # type: ignore[arg-type]
    config.setup_logging()

    provider = StorytelProvider(config=config)
    if locale is not None:
        try:
            provider.set_locale(locale)
        except ConfigError as e:
            raise click.UsageError(str(e)) from e

    log.debug(f"Starting search: query={query!r} author={author!r} locale={provider.locale}")
    result = provider.search(query, author=author)

    click.echo(
        json.dumps(result.to_dict(include_failures=failures), ensure_ascii=False, indent=2)
    )
