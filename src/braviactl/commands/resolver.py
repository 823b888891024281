"""Resolution of free-text command strings into command descriptors.

Resolution is pure: it reads the session's cached capability tables and
the direct-command allow-list, and never touches the network. Lookup
order for each string:

1. exact name match in the remote-controller catalog -> RemoteCommand
2. ``name(arg1,arg2,...)`` with an allow-listed name -> DirectCommand
3. anything else -> UnresolvedCommand
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from braviactl.domain.models import (
    CapabilityTables,
    CommandDescriptor,
    DirectCommand,
    RemoteCommand,
    UnresolvedCommand,
)

_FUNCTION_CALL_RE = re.compile(r"^(\b[^()]+)\((.*)\)$")


@dataclass(frozen=True)
class DirectOperation:
    """A session coroutine method exposed to command batches."""

    method: str
    arity: int


DIRECT_OPERATIONS: dict[str, DirectOperation] = {
    "setInputSource": DirectOperation(method="set_input_source", arity=1),
    "getPowerStatus": DirectOperation(method="get_power_status", arity=0),
}

DEFAULT_DIRECT_COMMANDS: tuple[str, ...] = ("setInputSource", "getPowerStatus")


def parse_function_call(raw: str) -> tuple[str, list[str]] | None:
    """Split ``name(a,b)`` into ``("name", ["a", "b"])``.

    Arguments are split on commas and otherwise left untouched. An empty
    argument list yields ``[]``. Returns None when ``raw`` is not call syntax.
    """
    match = _FUNCTION_CALL_RE.match(raw)
    if not match:
        return None
    name, inner = match.group(1), match.group(2)
    args = inner.split(",") if inner else []
    return name, args


def resolve_command(
    raw: str,
    tables: CapabilityTables,
    allowed: Iterable[str] = DEFAULT_DIRECT_COMMANDS,
) -> CommandDescriptor:
    """Resolve one command string against the cached tables."""
    code = tables.find_remote_code(raw)
    if code is not None:
        return RemoteCommand(raw=raw, name=code.name, code=code.value)

    call = parse_function_call(raw)
    if call is not None:
        name, args = call
        if name in allowed and name in DIRECT_OPERATIONS:
            return DirectCommand(raw=raw, name=name, args=args)

    return UnresolvedCommand(raw=raw)


def resolve_commands(
    raws: Sequence[str],
    tables: CapabilityTables,
    allowed: Iterable[str] = DEFAULT_DIRECT_COMMANDS,
) -> list[CommandDescriptor]:
    allowed = frozenset(allowed)
    return [resolve_command(raw, tables, allowed) for raw in raws]


def split_command_list(values: Iterable[str]) -> list[str]:
    """Flatten comma-separated command lists, leaving call syntax intact.

    ``["VolumeUp,Mute", "setInputSource(HDMI 1)"]`` becomes
    ``["VolumeUp", "Mute", "setInputSource(HDMI 1)"]``. Commas inside
    parentheses belong to the call's arguments.
    """
    result: list[str] = []
    for value in values:
        depth = 0
        current = ""
        for char in value:
            if char == "(":
                depth += 1
            elif char == ")" and depth:
                depth -= 1
            if char == "," and depth == 0:
                if current:
                    result.append(current)
                current = ""
                continue
            current += char
        if current:
            result.append(current)
    return result
