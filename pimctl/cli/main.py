"""
pimctl command-line entry point.

Usage:
    pimctl                         # same as "show status"
    pimctl -d show pim routes
    pimctl sh pim nei              # words may be abbreviated
    pimctl restart
"""

import click
import structlog

from pimctl.cli.commands import Options, print_usage, run_command
from pimctl.core.config import get_app_config, get_settings
from pimctl.core.logging import get_logger, setup_logging


def _is_option(token: str) -> bool:
    """A lone "-" is a command word, anything else with a leading dash an option."""
    return token.startswith("-") and token != "-"


@click.command(
    add_help_option=False,
    context_settings={"ignore_unknown_options": True},
)
@click.option(
    "--detail", "-d",
    is_flag=True,
    help="Detailed output, where applicable.",
)
@click.option(
    "--plain", "-p",
    is_flag=True,
    help="Skip table headings in daemon output.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
@click.option(
    "--help", "-h", "-?", "show_help",
    is_flag=True,
    help="This help text.",
)
@click.argument("tokens", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def main(
    ctx: click.Context,
    detail: bool,
    plain: bool,
    verbose: bool,
    debug: bool,
    show_help: bool,
    tokens: tuple[str, ...],
) -> None:
    """Control client for the pimd multicast routing daemon."""
    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = None

    try:
        get_settings()
        setup_logging(level=log_level)
        get_app_config()
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        ctx.exit(1)

    structlog.contextvars.bind_contextvars(source="cli")

    logger = get_logger(__name__)
    logger.debug("CLI invoked", tokens=list(tokens), detail=detail, heading=not plain)

    if show_help or any(_is_option(token) for token in tokens):
        print_usage()
        ctx.exit(0)

    options = Options(detail=detail, heading=not plain)
    ctx.exit(run_command(tokens, options))
