import asyncio
import logging
import os
import sys
from pathlib import Path

import click

from .config import ConfigurationError, load_config, load_environment_variables
from .constants import EnvironmentVariables
from .logging_config import configure_logging
from .server import serve


@click.command()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Additional .env file to load the access token from",
)
def main(verbose: int, env_file: Path | None) -> None:
    """MCP GitHub Server - GitHub repository operations for MCP"""
    log_level = os.environ.get(EnvironmentVariables.LOG_LEVEL, "WARNING")
    if verbose == 1:
        log_level = "INFO"
    elif verbose >= 2:
        log_level = "DEBUG"
    configure_logging(log_level)

    load_environment_variables(env_file)

    try:
        config = load_config()
    except ConfigurationError as e:
        logging.getLogger(__name__).critical(str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    asyncio.run(serve(config))


if __name__ == "__main__":
    main()
