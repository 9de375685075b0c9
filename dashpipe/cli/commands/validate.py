"""CLI command for validating sources."""

import asyncio
import json
import sys

import click

from dashpipe.api import validate_source
from dashpipe.core.logging import configure_logging


@click.command()
@click.argument("source_path", type=click.Path(exists=True))
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Log level (default: WARNING)",
)
@click.option("--json-logs", is_flag=True, help="Use JSON format for logs")
def validate(source_path: str, log_level: str, json_logs: bool):
    """Validate a source config with a small trial fetch.

    Checks:
    - YAML syntax
    - Source config schema and secret references
    - That the source answers and yields rows

    Prints the inferred schema and sample rows. Exits with status 1 when the
    source is invalid; the reason is logged as a warning.

    Examples:

        dashpipe validate orders.yaml
    """
    configure_logging(level=log_level, json_format=json_logs)

    result = asyncio.run(validate_source(source_path))

    click.echo(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2))
    if not result.is_valid:
        click.echo(f"✗ {result.message}", err=True)
        sys.exit(1)
    click.echo(f"✓ {result.message}", err=True)
