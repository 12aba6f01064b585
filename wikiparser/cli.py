"""CLI entry point for wikiparser."""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import IO, Any

import click

from wikiparser.config import CONFIG_DIR, CONFIG_TEMPLATE, ConfigError, config_path_for, load_config
from wikiparser.errors import MalformedLineError, SerializationError
from wikiparser.parse import parse
from wikiparser.records import KINDS, ContentRecord
from wikiparser.serialize import to_json


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _effective_config(
    project_root: str,
    config_file: str | None,
    strict: bool | None,
    workers: int | None,
) -> dict[str, Any]:
    """Load config and apply command-line overrides (flags win)."""
    try:
        config = load_config(
            Path(project_root),
            Path(config_file) if config_file else None,
        )
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if strict is not None:
        config["on_malformed"] = "error" if strict else "paragraph"
    if workers is not None:
        config["workers"] = workers
    return config


def _parse_source(source: IO[str], config: dict[str, Any]) -> list[ContentRecord]:
    try:
        return parse(
            source.read(),
            link_root=config["link_root"],
            on_malformed=config["on_malformed"],
            workers=config["workers"],
        )
    except MalformedLineError as exc:
        raise click.ClickException(str(exc)) from exc


def _common_options(func):
    """Options shared by commands that read and parse a document."""
    func = click.option(
        "--verbose", "-v", is_flag=True, default=False,
        help="Log progress to stderr.",
    )(func)
    func = click.option(
        "--workers",
        type=click.IntRange(min=1),
        default=None,
        help="Thread pool size for line parsing (overrides config).",
    )(func)
    func = click.option(
        "--strict/--lenient",
        default=None,
        help="Fail on malformed headings/links, or keep them as paragraphs (overrides config).",
    )(func)
    func = click.option(
        "--config", "config_file",
        type=click.Path(exists=True, dir_okay=False, resolve_path=True),
        default=None,
        help="Config file (default: <project-root>/.wikiparser/config.yaml if present).",
    )(func)
    func = click.option(
        "--project-root",
        type=click.Path(exists=True, file_okay=False, resolve_path=True),
        default=".",
        help="Project root directory (default: cwd).",
    )(func)
    func = click.argument("source", type=click.File("r"), default="-")(func)
    return func


@click.group()
def cli() -> None:
    """wikiparser: convert wiki markup into JSON content records."""


@cli.command()
@click.option(
    "--project-root",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    default=".",
    help="Project root directory (default: cwd).",
)
def init(project_root: str) -> None:
    """Initialize .wikiparser/ directory with a default config."""
    root = Path(project_root)
    config_dir = root / CONFIG_DIR

    if config_dir.exists():
        click.echo(f"{CONFIG_DIR}/ already exists at {config_dir}")
        raise SystemExit(1)

    config_dir.mkdir(parents=True)
    path = config_path_for(root)
    path.write_text(CONFIG_TEMPLATE)
    click.echo(f"Created {path}")

    # Load through the standard path to validate the template
    load_config(root)


@cli.command("parse")
@_common_options
@click.option(
    "--indent",
    type=click.IntRange(min=0),
    default=None,
    help="JSON indent (overrides config).",
)
@click.option(
    "--compact", is_flag=True, default=False,
    help="Emit JSON on a single line.",
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write JSON here instead of stdout.",
)
def parse_cmd(
    source: IO[str],
    project_root: str,
    config_file: str | None,
    strict: bool | None,
    workers: int | None,
    verbose: bool,
    indent: int | None,
    compact: bool,
    output: str | None,
) -> None:
    """Parse SOURCE (file or '-' for stdin) and print JSON records."""
    _setup_logging(verbose)
    log = logging.getLogger("wikiparser.cli")

    config = _effective_config(project_root, config_file, strict, workers)
    records = _parse_source(source, config)

    out_cfg = config["output"]
    if compact:
        json_indent = None
    elif indent is not None:
        json_indent = indent
    else:
        json_indent = out_cfg["indent"]

    try:
        payload = to_json(records, indent=json_indent, ensure_ascii=out_cfg["ensure_ascii"])
    except SerializationError as exc:
        raise click.ClickException(str(exc)) from exc

    if output:
        Path(output).write_text(payload + "\n", encoding="utf-8")
        log.info("Wrote %d records to %s", len(records), output)
    else:
        click.echo(payload)


@cli.command()
@_common_options
def stats(
    source: IO[str],
    project_root: str,
    config_file: str | None,
    strict: bool | None,
    workers: int | None,
    verbose: bool,
) -> None:
    """Print how many records of each kind SOURCE produces."""
    _setup_logging(verbose)

    config = _effective_config(project_root, config_file, strict, workers)
    records = _parse_source(source, config)
    counts = Counter(r.kind for r in records)

    click.echo(f"Records: {len(records)}")
    for kind in KINDS:
        click.echo(f"  {kind}: {counts.get(kind, 0)}")
