"""CLI command for previewing sources."""

import asyncio
import json
import sys

import click

from dashpipe.api import preview_source
from dashpipe.core.exceptions import DashPipeError
from dashpipe.core.logging import configure_logging
from dashpipe.core.parallel import AsyncParallelExecutor


@click.command()
@click.argument("source_paths", nargs=-1, required=True, type=click.Path(exists=True))
@click.option(
    "--limit",
    default=10,
    show_default=True,
    type=click.IntRange(min=1),
    help="Rows to fetch per source",
)
@click.option(
    "--concurrency",
    default=4,
    show_default=True,
    type=click.IntRange(min=1),
    help="Sources fetched at once",
)
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Log level (default: WARNING)",
)
@click.option("--json-logs", is_flag=True, help="Use JSON format for logs")
def preview(
    source_paths: tuple[str, ...],
    limit: int,
    concurrency: int,
    log_level: str,
    json_logs: bool,
):
    """Preview the first rows of one or more source configs.

    With several configs, sources are fetched concurrently and the output is
    an object keyed by config path.

    Examples:

        dashpipe preview sales.yaml
        dashpipe preview sales.yaml users.yaml --limit 5
    """
    configure_logging(level=log_level, json_format=json_logs)

    async def preview_one(path: str):
        return await preview_source(path, limit=limit)

    executor = AsyncParallelExecutor(concurrency)

    try:
        results = asyncio.run(executor.map(preview_one, source_paths))
    except DashPipeError as e:
        click.echo(f"Preview failed: {e.__cause__ or e}", err=True)
        sys.exit(1)

    if len(source_paths) == 1:
        output = results[0]
    else:
        output = dict(zip(source_paths, results))
    click.echo(json.dumps(output, indent=2, ensure_ascii=False))
