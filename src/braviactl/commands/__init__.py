"""Command batch resolution and dispatch.

Public API:
    CommandDispatcher -- Runs ordered batches against a session
    resolve_command / resolve_commands -- Pure string-to-descriptor resolution
    DIRECT_OPERATIONS -- Registry of operations callable as name(args)
"""

from braviactl.commands.dispatcher import CommandDispatcher
from braviactl.commands.resolver import (
    DEFAULT_DIRECT_COMMANDS,
    DIRECT_OPERATIONS,
    resolve_command,
    resolve_commands,
    split_command_list,
)

__all__ = [
    "CommandDispatcher",
    "DEFAULT_DIRECT_COMMANDS",
    "DIRECT_OPERATIONS",
    "resolve_command",
    "resolve_commands",
    "split_command_list",
]
