"""
Command Resolution.

Walks a static table of command words to turn argv tokens into either a
local action or an operation code for the daemon.

Matching is case-insensitive and compares only up to the length of the
shorter string, so "sh pim ro" reaches "show pim routes". Entries are
tried in declaration order and the first match wins: with siblings
"routes" and "rp", the token "r" always means "routes".
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from pimctl.core.exceptions import CommandNotFoundError

DEFAULT_ARGUMENT_LIMIT = 80


@dataclass(frozen=True)
class CommandNode:
    """
    One entry in the command table.

    A node with children is a namespace and has no effect of its own.
    Otherwise it runs its local action, or sends its operation code.
    """

    name: str
    children: tuple["CommandNode", ...] = ()
    action: Callable[[str], int] | None = None
    operation: int = 0


@dataclass(frozen=True)
class LocalAction:
    """Resolved to a client-side action and its joined argument text."""

    action: Callable[[str], int]
    argument: str = ""

    def run(self) -> int:
        return self.action(self.argument)


@dataclass(frozen=True)
class RemoteOperation:
    """Resolved to an operation for the daemon."""

    operation: int
    detail: bool = False


Resolution = LocalAction | RemoteOperation


def name_matches(name: str, token: str) -> bool:
    """Compare two words case-insensitively over the shorter length."""
    n = min(len(name), len(token))
    return name[:n].lower() == token[:n].lower()


def join_arguments(tokens: Sequence[str], limit: int = DEFAULT_ARGUMENT_LIMIT) -> str:
    """
    Join tokens with single spaces into a buffer of fixed capacity.

    The capacity includes a terminator, so the result holds at most
    limit - 1 characters. Longer text is truncated.
    """
    return " ".join(tokens)[:max(limit - 1, 0)]


def resolve(
    tokens: Sequence[str],
    table: Sequence[CommandNode],
    detail: bool = False,
    argument_limit: int = DEFAULT_ARGUMENT_LIMIT,
) -> Resolution:
    """
    Resolve command tokens against a command table.

    Args:
        tokens: Remaining command words, first word first
        table: Entries at the current level, in declaration order
        detail: Verbose flag forwarded with a daemon operation
        argument_limit: Capacity of the local action argument buffer

    Returns:
        LocalAction or RemoteOperation

    Raises:
        CommandNotFoundError: If no entry matches, or the tokens stop at a namespace
    """
    full = tuple(tokens)
    level: Sequence[CommandNode] = table
    position = 0

    while position < len(full):
        token = full[position]
        node = next((entry for entry in level if name_matches(entry.name, token)), None)
        if node is None:
            break
        position += 1

        if node.children:
            level = node.children
            continue

        if node.action is not None:
            return LocalAction(node.action, join_arguments(full[position:], argument_limit))

        return RemoteOperation(node.operation, detail)

    raise CommandNotFoundError(full)
