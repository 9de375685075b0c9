"""Main CLI entry point for dashpipe."""

import click

from dashpipe import __version__
from dashpipe.cli.commands.fetch import fetch
from dashpipe.cli.commands.list import list_connectors, list_stages
from dashpipe.cli.commands.preview import preview
from dashpipe.cli.commands.serve import serve
from dashpipe.cli.commands.transform import transform
from dashpipe.cli.commands.validate import validate


@click.group()
@click.version_option(version=__version__)
def main():
    """dashpipe - Fetch, profile and reshape tabular data for dashboards."""
    pass


# Register commands
main.add_command(preview)
main.add_command(fetch)
main.add_command(validate)
main.add_command(transform)
main.add_command(list_connectors)
main.add_command(list_stages)
main.add_command(serve)


if __name__ == "__main__":
    main()
