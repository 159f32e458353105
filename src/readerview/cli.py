"""Command-line interface for readerview."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

import click
import structlog
from rich.console import Console
from rich.table import Table

from readerview import __version__
from readerview.config import Settings, find_config_file
from readerview.exceptions import InvalidUrlError
from readerview.extractor.readerable import is_probably_readerable
from readerview.observability import configure_logging
from readerview.readability import Readability

console = Console()
error_console = Console(stderr=True)
logger = structlog.get_logger(__name__)


def load_settings(config_path: Optional[Path]) -> Settings:
    """Settings from ``--config``, else ``readerview.yaml`` in the working directory, else defaults."""
    path = config_path or find_config_file()
    if path is not None:
        return Settings.from_yaml(path)
    return Settings()


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (overrides the configuration file)",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: Optional[str]) -> None:
    """readerview - extract the readable article from HTML pages."""
    ctx.ensure_object(dict)
    settings = load_settings(Path(config) if config else None)
    if log_level:
        settings.monitoring.log_level = log_level
    configure_logging(settings.monitoring)
    ctx.obj["settings"] = settings


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("--url", default=None, help="Base URL used to absolutize links and images")
@click.option("--char-threshold", type=click.IntRange(min=0), default=None, help="Minimum article length")
@click.option("--keep-classes", is_flag=True, help="Keep class attributes in the output HTML")
@click.option("--no-json-ld", is_flag=True, help="Ignore JSON-LD metadata")
@click.option("--debug", is_flag=True, help="Log why extraction failed (implies --log-level DEBUG)")
@click.option(
    "--format",
    "output_format",
    default="json",
    type=click.Choice(["json", "text", "html"]),
    help="Output format",
)
@click.pass_context
def parse(
    ctx: click.Context,
    source: TextIO,
    url: Optional[str],
    char_threshold: Optional[int],
    keep_classes: bool,
    no_json_ld: bool,
    debug: bool,
    output_format: str,
) -> None:
    """Extract the article from SOURCE (a file path, or - for stdin)."""
    settings: Settings = ctx.obj["settings"]

    overrides: Dict[str, Any] = {}
    if char_threshold is not None:
        overrides["char_threshold"] = char_threshold
    if keep_classes:
        overrides["keep_classes"] = True
    if no_json_ld:
        overrides["disable_json_ld"] = True
    if debug:
        overrides["debug"] = True
        settings.monitoring.log_level = "DEBUG"
        configure_logging(settings.monitoring)
    options = settings.extraction.model_copy(update=overrides)

    if url:
        structlog.contextvars.bind_contextvars(document_url=url)

    try:
        reader = Readability(source.read(), url=url, options=options)
    except InvalidUrlError as e:
        raise click.BadParameter(e.reason, param_hint="--url") from e

    article = reader.parse()
    if article is None:
        logger.info("No readable content found", component="cli", source=source.name)
        error_console.print("[red]No readable content found[/red]")
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps(article.to_dict(), indent=2, ensure_ascii=False))
    elif output_format == "html":
        click.echo(article.content)
    else:
        header = "\n".join(value for value in (article.title, article.byline) if value)
        if header:
            click.echo(header)
            click.echo()
        click.echo((article.text_content or "").strip())


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.pass_context
def check(ctx: click.Context, source: TextIO) -> None:
    """Report whether SOURCE probably contains an article."""
    settings: Settings = ctx.obj["settings"]
    readerable = is_probably_readerable(source.read(), settings.readerable)

    table = Table(title="Readerable Check")
    table.add_column("Source", style="cyan")
    table.add_column("Readerable")
    table.add_row(source.name, "[green]yes[/green]" if readerable else "[red]no[/red]")
    console.print(table)

    if not readerable:
        sys.exit(1)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
