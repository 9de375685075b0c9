"""CLI command for transforming a row file."""

import json
import sys
from typing import Optional

import click

from dashpipe.api import transform_rows
from dashpipe.core.exceptions import ConfigError, TransformError
from dashpipe.core.logging import configure_logging
from dashpipe.models.loader import load_config_file


@click.command()
@click.argument("data_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Transform config (YAML or JSON); without it rows pass through unchanged",
)
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Log level (default: WARNING)",
)
@click.option("--json-logs", is_flag=True, help="Use JSON format for logs")
def transform(
    data_path: str,
    config_path: Optional[str],
    log_level: str,
    json_logs: bool,
):
    """Apply a transform config to a JSON file of rows.

    Stages run in a fixed order: filter, sort, aggregate, group, paginate.

    Examples:

        dashpipe transform rows.json -c top_products.yaml
    """
    configure_logging(level=log_level, json_format=json_logs)

    try:
        with open(data_path, "r", encoding="utf-8") as f:
            rows = json.load(f)
        transform_config = load_config_file(config_path) if config_path else None
        result = transform_rows(rows, transform_config)
    except json.JSONDecodeError as e:
        click.echo(f"Invalid JSON in {data_path}: {e}", err=True)
        sys.exit(1)
    except ConfigError as e:
        click.echo(f"Config error: {e}", err=True)
        sys.exit(1)
    except TransformError as e:
        click.echo(f"Transform error: {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(result, indent=2, ensure_ascii=False))
