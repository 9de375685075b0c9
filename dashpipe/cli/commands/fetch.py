"""CLI command for fetching all rows of a source."""

import asyncio
import json
import sys
from typing import Optional

import click

from dashpipe.api import fetch_source
from dashpipe.core.exceptions import ConfigError, SourceFetchError
from dashpipe.core.logging import configure_logging
from dashpipe.core.rows import row_count


@click.command()
@click.argument("source_path", type=click.Path(exists=True))
@click.option("--limit", type=click.IntRange(min=1), help="Maximum rows to fetch")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    help="Write rows to this file instead of stdout",
)
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Log level (default: INFO)",
)
@click.option("--json-logs", is_flag=True, help="Use JSON format for logs")
def fetch(
    source_path: str,
    limit: Optional[int],
    output: Optional[str],
    log_level: str,
    json_logs: bool,
):
    """Fetch rows from a source config and print them as JSON.

    Examples:

        dashpipe fetch orders.yaml
        dashpipe fetch orders.yaml --limit 100 -o orders.json
    """
    configure_logging(level=log_level, json_format=json_logs)

    try:
        data = asyncio.run(fetch_source(source_path, limit=limit))
    except ConfigError as e:
        click.echo(f"Config error: {e}", err=True)
        sys.exit(1)
    except SourceFetchError as e:
        click.echo(f"Fetch error: {e}", err=True)
        sys.exit(1)

    text = json.dumps(data, indent=2, ensure_ascii=False)
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text)
        click.echo(f"Wrote {row_count(data)} rows to {output}", err=True)
    else:
        click.echo(text)
