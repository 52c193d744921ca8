"""
Command Table and Local Commands.

The static command table, the two commands answered without the daemon
(help, version), and dispatch of resolved commands.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import click
from rich.console import Console
from rich.table import Table

from pimctl import __version__
from pimctl.cli.client import IpcClient, perform_request
from pimctl.cli.protocol import Operation
from pimctl.cli.resolver import CommandNode, LocalAction, resolve
from pimctl.core.config import get_app_config
from pimctl.core.exceptions import CommandNotFoundError
from pimctl.core.logging import get_logger

logger = get_logger(__name__)

OPTIONS_HELP = [
    ("-d, --detail", "Detailed output, where applicable"),
    ("-p, --plain", "Skip table headings in daemon output"),
    ("-v, --verbose", "Log progress to stderr"),
    ("--debug", "Log protocol details to stderr"),
    ("-h, --help", "This help text"),
]

COMMANDS_HELP = [
    ("help", "This help text"),
    ("kill", "Kill running daemon, like SIGTERM"),
    ("restart", "Restart daemon and reload .conf file, like SIGHUP"),
    ("version", "Show pimctl version"),
    ("show status", "Show pimd status, default"),
    ("show igmp groups", "Show IGMP group memberships"),
    ("show igmp interface", "Show IGMP interface status"),
    ("show pim interface", "Show PIM interface table"),
    ("show pim neighbor", "Show PIM neighbor table"),
    ("show pim routes", "Show PIM routing table"),
    ("show pim rp", "Show PIM Rendezvous-Point (RP) set"),
    ("show pim crp", "Show PIM Candidate Rendezvous-Point (CRP) from BSR"),
    ("show pim compat", "Show PIM status, compat mode, previously `pimd -r`"),
]


@dataclass(frozen=True)
class Options:
    """Global flags parsed before resolution."""

    detail: bool = False
    heading: bool = True


def _section(rows: list[tuple[str, str]]) -> Table:
    grid = Table.grid(padding=(0, 2))
    grid.add_column(min_width=24, no_wrap=True)
    grid.add_column()
    for name, text in rows:
        grid.add_row(f"  {name}", text)
    return grid


def print_usage() -> None:
    """Print the usage text to stderr."""
    console = Console(stderr=True, highlight=False, markup=False)
    console.print("Usage: pimctl [OPTIONS] [COMMAND]\n")
    console.print("Options:")
    console.print(_section(OPTIONS_HELP))
    console.print("\nCommands:")
    console.print(_section(COMMANDS_HELP))


def help_command(argument: str) -> int:
    print_usage()
    return 0


def version_command(argument: str) -> int:
    click.echo(f"v{__version__}")
    return 0


COMMAND_TABLE: tuple[CommandNode, ...] = (
    CommandNode("help", action=help_command),
    CommandNode("kill", operation=Operation.KILL),
    CommandNode("restart", operation=Operation.RESTART),
    CommandNode("version", action=version_command),
    CommandNode("show", children=(
        CommandNode("status", operation=Operation.STATUS),
        CommandNode("igmp", children=(
            CommandNode("groups", operation=Operation.IGMP_GROUPS),
            CommandNode("interface", operation=Operation.IGMP_INTERFACE),
            CommandNode("iface", operation=Operation.IGMP_INTERFACE),
        )),
        CommandNode("pim", children=(
            CommandNode("interface", operation=Operation.PIM_INTERFACE),
            CommandNode("iface", operation=Operation.PIM_INTERFACE),
            CommandNode("neighbor", operation=Operation.PIM_NEIGHBOR),
            CommandNode("routes", operation=Operation.PIM_ROUTES),
            CommandNode("rp", operation=Operation.PIM_RP),
            CommandNode("crp", operation=Operation.PIM_CRP),
            CommandNode("compat", operation=Operation.PIM_COMPAT),
        )),
    )),
)


def run_command(
    tokens: Sequence[str],
    options: Options,
    client: IpcClient | None = None,
) -> int:
    """
    Resolve command tokens and run the result.

    No tokens means "show status".

    Returns:
        Exit status for the process.
    """
    if not tokens:
        logger.debug("No command given, defaulting to show status")
        return perform_request(Operation.STATUS, options.detail, client)

    limit = get_app_config().application.ipc.argument_limit
    try:
        resolution = resolve(tokens, COMMAND_TABLE, options.detail, limit)
    except CommandNotFoundError as e:
        logger.info("Command not resolved", tokens=list(e.tokens))
        print_usage()
        return 1

    if isinstance(resolution, LocalAction):
        return resolution.run()

    logger.debug("Command resolved", operation=resolution.operation, detail=resolution.detail)
    return perform_request(resolution.operation, resolution.detail, client)
