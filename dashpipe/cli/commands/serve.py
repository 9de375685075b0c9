"""CLI command for running the HTTP server."""

from typing import Optional

import click
import uvicorn

from dashpipe.core.logging import configure_logging
from dashpipe.core.settings import get_settings
from dashpipe.server import create_app


@click.command()
@click.option("--host", help="Bind address (default: DASHPIPE_HOST or 0.0.0.0)")
@click.option("--port", type=int, help="Bind port (default: DASHPIPE_PORT or 8000)")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Log level (default: DASHPIPE_LOG_LEVEL or INFO)",
)
@click.option("--json-logs", is_flag=True, help="Use JSON format for logs")
def serve(
    host: Optional[str],
    port: Optional[int],
    log_level: Optional[str],
    json_logs: bool,
):
    """Run the dashpipe HTTP server.

    Set DASHPIPE_AUTH_SECRET to the key bearer tokens are signed with;
    without it every authenticated endpoint answers 401.

    Examples:

        dashpipe serve
        dashpipe serve --port 9000 --log-level DEBUG
    """
    settings = get_settings()
    level = log_level or settings.log_level
    configure_logging(level=level, json_format=json_logs or settings.json_logs)

    if settings.auth_secret is None:
        click.echo("Warning: DASHPIPE_AUTH_SECRET is not set; all requests will be rejected", err=True)

    uvicorn.run(
        create_app(settings),
        host=host or settings.host,
        port=port or settings.port,
        log_level=level.lower(),
    )
