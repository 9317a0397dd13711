"""CLI interface for Learnstage.

Command-line tool for serving and statically building the learning site.
"""

import asyncio
import logging
import sys
from pathlib import Path

import click
import httpx

from learnstage.builder import BuildError, BuildResult, StaticSiteBuilder
from learnstage.config import Config
from learnstage.content import create_source
from learnstage.core.collections import COLLECTIONS, Collection, get_collection
from learnstage.core.renderer import DocumentRenderer
from learnstage.core.types import URLPath

CONFIG_OPTION_HELP = "Path to configuration file (default: auto-discover learnstage.toml)"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
def cli() -> None:
    """Learnstage - content-managed learning site."""


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help=CONFIG_OPTION_HELP,
)
@click.option(
    "--content-dir",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Local content root (overrides config, selects the local source)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
def serve(
    config_path: Path | None,
    content_dir: Path | None,
    host: str | None,
    port: int | None,
    verbose: bool,
) -> None:
    """Start the content server."""
    from learnstage.server import run_server

    _configure_logging(verbose)
    config = Config.load(config_path).with_overrides(
        host=host, port=port, content_dir=content_dir
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    if config.content.source == "graphql" and config.content.graphql is not None:
        click.echo(f"Content API: {config.content.graphql.url}")
    else:
        click.echo(f"Content directory: {config.content.content_dir}")

    run_server(config)


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help=CONFIG_OPTION_HELP,
)
@click.option(
    "--content-dir",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Local content root (overrides config, selects the local source)",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Output directory (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
def build(
    config_path: Path | None,
    content_dir: Path | None,
    output_dir: Path | None,
    verbose: bool,
) -> None:
    """Pre-generate every document page as JSON."""
    _configure_logging(verbose)
    config = Config.load(config_path).with_overrides(
        content_dir=content_dir, output_dir=output_dir
    )

    click.echo(f"Building into {config.build.output_dir}...")
    try:
        result = asyncio.run(_build(config))
    except BuildError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    for name, paths in result.routes.items():
        click.echo(f"  {name}: {len(paths)} pages")
    click.echo(
        click.style(f"\nBuilt {result.total} pages successfully!", fg="green", bold=True),
    )


@cli.command()
@click.argument("collection_name", metavar="COLLECTION")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help=CONFIG_OPTION_HELP,
)
@click.option(
    "--content-dir",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Local content root (overrides config, selects the local source)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
def routes(
    collection_name: str,
    config_path: Path | None,
    content_dir: Path | None,
    verbose: bool,
) -> None:
    """List the route path of every document in COLLECTION."""
    try:
        collection = get_collection(collection_name)
    except KeyError:
        names = ", ".join(c.name for c in COLLECTIONS)
        raise click.BadParameter(
            f"unknown collection {collection_name!r} (choose from {names})",
            param_hint="COLLECTION",
        ) from None

    _configure_logging(verbose)
    config = Config.load(config_path).with_overrides(content_dir=content_dir)

    for path in asyncio.run(_routes(config, collection)):
        click.echo(path)


async def _build(config: Config) -> BuildResult:
    async with httpx.AsyncClient() as client:
        builder = StaticSiteBuilder(
            create_source(config.content, client),
            DocumentRenderer(),
            config.build.output_dir,
        )
        return await builder.build()


async def _routes(config: Config, collection: Collection) -> list[URLPath]:
    async with httpx.AsyncClient() as client:
        builder = StaticSiteBuilder(
            create_source(config.content, client),
            DocumentRenderer(),
            config.build.output_dir,
        )
        return await builder.enumerate_routes(collection)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
