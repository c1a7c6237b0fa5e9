"""
wownow: CLI entry point.

The command follows this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging (stderr).
  3. Re-validate ``--base-url`` / ``--timeout`` against ``TactConfig``.
  4. Resolve the product selection.
  5. Fetch one snapshot via ``fetch_snapshot()``.
  6. Print the snapshot JSON to stdout, or ``[ERROR] ...`` to stderr with
     exit code 1.

Install and run::

    pip install -e .
    wownow
    wownow --no-pretty
    wownow --product wow --product wow_classic
    wownow --no-live-only
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from wownow import __version__

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="wownow",
    help="Get the current versions of World of Warcraft.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from pydantic import ValidationError

    from wownow.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except (ValidationError, ValueError) as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config) -> None:
    """Set up logging from config."""
    from wownow.utils.logging import configure_logging
    configure_logging(config.logging)


def _tact_with_overrides(config, base_url: Optional[str], timeout: Optional[float]):
    """Apply ``--base-url`` / ``--timeout`` to ``config.tact``, re-validating."""
    from pydantic import ValidationError

    from wownow.config import TactConfig

    overrides: dict = {}
    if base_url is not None:
        overrides["base_url"] = base_url
    if timeout is not None:
        overrides["timeout_seconds"] = timeout
    if not overrides:
        return config.tact

    try:
        return TactConfig(**{**config.tact.model_dump(), **overrides})
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid option: {exc}", err=True)
        raise typer.Exit(code=1)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"wownow {__version__}")
        raise typer.Exit()


# ── Command ───────────────────────────────────────────────────────────────────

@app.command()
def main(
    products: Optional[list[str]] = typer.Option(
        None,
        "--product",
        "-p",
        help="Product id to query (repeatable). Defaults to the configured products.",
    ),
    live_only: bool = typer.Option(
        True,
        "--live-only/--no-live-only",
        help=(
            "Only return products that are traditionally live: wow, wow_classic "
            "and wow_classic_era. With --no-live-only every product in the "
            "service summary is queried."
        ),
    ),
    pretty: bool = typer.Option(
        True,
        "--pretty/--no-pretty",
        help="Pretty print the JSON output.",
    ),
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        help="Version service root (default from config).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Per-request timeout in seconds (default from config).",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Print the current version and build of each product, per region, as JSON.

    Exits with code 1 if any product cannot be fetched or parsed; no partial
    output is written in that case.
    """
    from wownow.output import render_snapshot
    from wownow.tact.aggregator import fetch_snapshot
    from wownow.tact.errors import AggregationError

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    tact = _tact_with_overrides(config, base_url, timeout)

    if products:
        selected: Optional[list[str]] = list(products)
    elif live_only:
        selected = list(tact.products)
    else:
        selected = None

    try:
        snapshot = fetch_snapshot(
            selected,
            live_only=live_only,
            base_url=tact.base_url,
            timeout=tact.timeout_seconds,
        )
    except AggregationError as exc:
        if config.debug:
            logger.exception("Snapshot failed")
        typer.echo(
            f"[ERROR] {exc.kind} error for product '{exc.product}': {exc.cause}",
            err=True,
        )
        raise typer.Exit(code=1)
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(render_snapshot(snapshot, pretty=pretty))


if __name__ == "__main__":
    app()
