"""Click CLI group: search and tools commands."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any

import click

from searxng_plugin.logging import configure_logging
from searxng_plugin.plugins.loader import load_plugins, shutdown_plugins
from searxng_plugin.tools.registry import ToolRegistry
from searxng_plugin.tools.searxng_search import TOOL_NAME


def _build_registry(
    base_url: str | None = None,
    timeout_ms: int | None = None,
    default_count: int | None = None,
) -> ToolRegistry:
    searxng_config: dict[str, Any] = {}
    if base_url is not None:
        searxng_config["baseUrl"] = base_url
    if timeout_ms is not None:
        searxng_config["timeoutMs"] = timeout_ms
    if default_count is not None:
        searxng_config["defaultCount"] = default_count
    registry = ToolRegistry()
    load_plugins(registry, {"searxng": searxng_config})
    return registry


@click.group()
@click.option("--log-level", type=str, default=None, help="Override LOG_LEVEL.")
def cli(log_level: str | None) -> None:
    """SearXNG search plugin CLI."""
    configure_logging(log_level)


@cli.command()
@click.argument("query")
@click.option("--count", type=click.IntRange(1, 20), default=None, help="Number of results.")
@click.option("--categories", type=str, default=None, help="Comma-separated categories.")
@click.option("--language", type=str, default=None, help="Language code (e.g. en, de).")
@click.option(
    "--time-range",
    type=click.Choice(["day", "week", "month", "year"]),
    default=None,
)
@click.option("--base-url", type=str, default=None, help="Override SEARXNG_URL.")
@click.option("--timeout-ms", type=int, default=None)
@click.option("--default-count", type=int, default=None)
def search(
    query: str,
    count: int | None,
    categories: str | None,
    language: str | None,
    time_range: str | None,
    base_url: str | None,
    timeout_ms: int | None,
    default_count: int | None,
) -> None:
    """Run one search and print the JSON envelope."""
    registry = _build_registry(base_url, timeout_ms, default_count)
    args: dict[str, Any] = {"query": query}
    for key, value in (
        ("count", count),
        ("categories", categories),
        ("language", language),
        ("time_range", time_range),
    ):
        if value is not None:
            args[key] = value
    try:
        output = asyncio.run(registry.call(TOOL_NAME, args))
    finally:
        shutdown_plugins()
    text = output["content"][0]["text"]
    click.echo(text)
    if "error" in json.loads(text):
        sys.exit(1)


@cli.command()
def tools() -> None:
    """Print registered tool descriptors as JSON."""
    registry = _build_registry()
    shutdown_plugins()
    click.echo(json.dumps(registry.schemas(), indent=2))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
