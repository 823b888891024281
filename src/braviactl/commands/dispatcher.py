"""Sequential execution of command batches against a session.

A batch is resolved up front into descriptors, then run strictly in
order: a later command may rely on device state changed by an earlier
one (power on, then switch input). Failures are recorded on the
individual outcome and never abort the batch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from braviactl.commands.resolver import (
    DEFAULT_DIRECT_COMMANDS,
    DIRECT_OPERATIONS,
    resolve_commands,
)
from braviactl.domain.errors import BraviaError
from braviactl.domain.models import (
    CommandDescriptor,
    CommandOutcome,
    DirectCommand,
    OutcomeStatus,
    RemoteCode,
    RemoteCommand,
    UnresolvedCommand,
)

if TYPE_CHECKING:
    from braviactl.session.device import BraviaSession

logger = logging.getLogger(__name__)


class CommandDispatcher:
    """Runs ordered command batches against one session.

    Example usage::

        dispatcher = CommandDispatcher()
        outcomes = await dispatcher.execute(
            session, ["PowerOn", "setInputSource(DisplayPort)", "VolumeUp"]
        )
    """

    def __init__(self, allowed: Iterable[str] = DEFAULT_DIRECT_COMMANDS) -> None:
        self._allowed = frozenset(allowed)

    @property
    def allowed(self) -> frozenset[str]:
        return self._allowed

    async def execute(
        self, session: BraviaSession, commands: Sequence[str]
    ) -> list[CommandOutcome]:
        """Resolve and run ``commands`` in order, one outcome per command."""
        descriptors = resolve_commands(commands, session.capabilities, self._allowed)
        outcomes: list[CommandOutcome] = []
        for descriptor in descriptors:
            outcome = await self._run(session, descriptor)
            logger.info("%s -> %s", outcome.command, outcome.status.value)
            outcomes.append(outcome)
        return outcomes

    async def _run(self, session: BraviaSession, descriptor: CommandDescriptor) -> CommandOutcome:
        if isinstance(descriptor, DirectCommand):
            return await self._run_direct(session, descriptor)
        if isinstance(descriptor, RemoteCommand):
            code = RemoteCode(name=descriptor.name, value=descriptor.code)
            await session.send_remote_code(code)
            return CommandOutcome(
                command=descriptor.raw, kind="remote", status=OutcomeStatus.SENT
            )
        if isinstance(descriptor, UnresolvedCommand):
            return CommandOutcome(
                command=descriptor.raw,
                kind="unresolved",
                status=OutcomeStatus.UNAVAILABLE,
                error=f"Command {descriptor.raw!r} is not available for your device.",
            )
        raise TypeError(f"Unhandled command descriptor: {descriptor!r}")

    async def _run_direct(self, session: BraviaSession, command: DirectCommand) -> CommandOutcome:
        operation = DIRECT_OPERATIONS[command.name]
        if len(command.args) < operation.arity:
            return CommandOutcome(
                command=command.raw,
                kind="direct",
                status=OutcomeStatus.FAILED,
                error=(
                    f"{command.name} needs {operation.arity} argument(s), "
                    f"got {len(command.args)}"
                ),
            )

        if len(command.args) > operation.arity:
            logger.debug(
                "Ignoring extra arguments to %s: %s", command.name, command.args[operation.arity:]
            )

        handler = getattr(session, operation.method)
        try:
            result = await handler(*command.args[: operation.arity])
        except BraviaError as e:
            logger.warning("Command %s failed: %s", command.raw, e)
            return CommandOutcome(
                command=command.raw,
                kind="direct",
                status=OutcomeStatus.FAILED,
                error=str(e),
            )
        return CommandOutcome(
            command=command.raw,
            kind="direct",
            status=OutcomeStatus.SUCCEEDED,
            result=_as_result(result),
        )


def _as_result(value: Any) -> dict[str, Any] | None:
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, dict):
        return value
    return None
