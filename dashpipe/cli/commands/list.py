"""CLI commands for listing registered connectors and transform stages."""

import click

from dashpipe.connectors import list_connector_types
from dashpipe.transforms import STAGE_ORDER, list_stage_types


@click.command("list-connectors")
def list_connectors():
    """List available source connectors.

    Each source kind (the ``type`` field of a source config) has one
    connector.
    """
    click.echo("Available Connectors:")
    for connector_type in list_connector_types():
        click.echo(f"  - {connector_type}")


@click.command("list-stages")
def list_stages():
    """List transform stages in the order they are applied."""
    registered = set(list_stage_types())
    click.echo("Transform Stages:")
    for position, stage_type in enumerate(STAGE_ORDER, start=1):
        if stage_type in registered:
            click.echo(f"  {position}. {stage_type}")
