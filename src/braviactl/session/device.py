"""Per-device session: capability tables and device operations.

A session owns everything known about one TV for the lifetime of the
process: its address, the request-id counter, and the capability tables
fetched by :meth:`BraviaSession.connect`. Nothing is persisted.

Sessions are not safe for concurrent use. Run one operation chain at a
time per session; two overlapping batches, or a batch overlapping a
connect, interleave request ids and may read half-updated tables.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from typing import Any

from pydantic import ValidationError

from braviactl.commands.dispatcher import CommandDispatcher
from braviactl.commands.resolver import DEFAULT_DIRECT_COMMANDS
from braviactl.domain.errors import (
    ConnectError,
    InvalidInputSourceError,
    ProtocolError,
    SessionStateError,
    TransportError,
    UnknownCommandError,
)
from braviactl.domain.models import (
    CapabilityTables,
    CommandOutcome,
    InputSource,
    PowerStatus,
    RemoteCode,
    RemoteControllerInfo,
    SessionState,
    validate_address,
)
from braviactl.transport.base import (
    AV_CONTENT_ENDPOINT,
    SYSTEM_ENDPOINT,
    DeviceTransport,
    build_json_envelope,
)

logger = logging.getLogger(__name__)


class BraviaSession:
    """Capability cache and command surface for one BRAVIA set.

    Usage::

        async with BraviaSession("192.168.1.20", psk="0000") as tv:
            await tv.connect()
            await tv.set_input_source("DisplayPort")
            outcomes = await tv.execute(["VolumeUp", "VolumeUp"])
    """

    def __init__(
        self,
        address: str,
        psk: str | None = None,
        *,
        timeout: float = 5.0,
        transport: DeviceTransport | None = None,
        direct_commands: Iterable[str] = DEFAULT_DIRECT_COMMANDS,
    ) -> None:
        self._address = validate_address(address)
        if transport is None:
            from braviactl.transport.http_backend import HttpTransport

            transport = HttpTransport(self._address, psk=psk, timeout=timeout)
        self._transport = transport
        self._dispatcher = CommandDispatcher(allowed=direct_commands)
        self._request_id = 0
        self._capabilities = CapabilityTables()
        self._state = SessionState.UNINITIALIZED

    @property
    def address(self) -> str:
        return self._address

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def request_id(self) -> int:
        """The id used by the most recent request, 0 before the first."""
        return self._request_id

    @property
    def capabilities(self) -> CapabilityTables:
        return self._capabilities

    def next_request_id(self) -> int:
        """Consume and return the next request id. Ids are never reused."""
        self._request_id += 1
        return self._request_id

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> CapabilityTables:
        """Fetch input sources, system info and the remote-code catalog.

        The three fetches run concurrently and are all awaited. Each one
        that succeeds overwrites its table; a failed connect leaves those
        writes in place.

        Raises:
            ConnectError: If any fetch failed; wraps the first failure.
            SessionStateError: If the session already failed or is
                connecting.
        """
        if self._state is SessionState.FAILED:
            raise SessionStateError("Session failed to connect; create a new session to retry")
        if self._state is SessionState.CONNECTING:
            raise SessionStateError("Session is already connecting")

        self._state = SessionState.CONNECTING
        logger.info("Connecting to %s", self._address)

        results = await asyncio.gather(
            self._fetch_input_sources(),
            self._fetch_system_info(),
            self._fetch_controller_info(),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        for failure in failures:
            if not isinstance(failure, Exception):
                self._state = SessionState.FAILED
                raise failure
        if failures:
            self._state = SessionState.FAILED
            logger.error("Connect to %s failed: %s", self._address, failures[0])
            raise ConnectError(failures[0]) from failures[0]

        self._state = SessionState.READY
        logger.info(
            "Connected to %s: %d input(s), %d remote command(s)",
            self._address,
            len(self._capabilities.input_sources),
            len(self._capabilities.controller_info.commands),
        )
        return self._capabilities

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> BraviaSession:
        await self._transport.open()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Device operations
    # ------------------------------------------------------------------

    async def get_power_status(self) -> PowerStatus:
        """Query whether the set is on."""
        result = await self._call(SYSTEM_ENDPOINT, "getPowerStatus")
        if not _has_length(result, 1) or not isinstance(result[0], dict):
            raise ProtocolError("Invalid power status result", endpoint=SYSTEM_ENDPOINT)
        status = str(result[0].get("status", ""))
        return PowerStatus(status=status, is_power_on=status == "active")

    async def set_input_source(self, label: str) -> None:
        """Switch to the cached input source labelled ``label``.

        The cached table is not re-fetched.

        Raises:
            InvalidInputSourceError: If no cached source has that label.
        """
        source = self._capabilities.find_input_source(label)
        if source is None:
            raise InvalidInputSourceError(label)
        await self._call(AV_CONTENT_ENDPOINT, "setPlayContent", [{"uri": source.uri}])
        logger.info("Switched input to %s (%s)", label, source.uri)

    async def send_remote_command(self, name: str) -> None:
        """Press the remote-control button ``name``.

        The device often acknowledges with a body that cannot be parsed,
        so transport errors here are logged and not raised.

        Raises:
            UnknownCommandError: If ``name`` is not in the cached catalog.
        """
        code = self._capabilities.find_remote_code(name)
        if code is None:
            raise UnknownCommandError(name)
        await self.send_remote_code(code)

    async def send_remote_code(self, code: RemoteCode) -> None:
        """Send an already looked-up IRCC code; transport errors are logged."""
        await self._ensure_open()
        self.next_request_id()
        try:
            await self._transport.post_ircc(code.value)
        except TransportError as e:
            logger.debug("IRCC %s not acknowledged: %s", code.name, e)

    async def execute(self, commands: Sequence[str]) -> list[CommandOutcome]:
        """Run a command batch in order; see :class:`CommandDispatcher`."""
        return await self._dispatcher.execute(self, commands)

    # ------------------------------------------------------------------
    # Capability fetches
    # ------------------------------------------------------------------

    async def _fetch_input_sources(self) -> None:
        result = await self._call(AV_CONTENT_ENDPOINT, "getCurrentExternalInputsStatus")
        if not _has_length(result, 1) or not isinstance(result[0], list):
            raise ProtocolError("Invalid input source result", endpoint=AV_CONTENT_ENDPOINT)
        try:
            sources = [InputSource.model_validate(item) for item in result[0]]
        except ValidationError as e:
            raise ProtocolError("Invalid input source result", endpoint=AV_CONTENT_ENDPOINT) from e
        self._capabilities.input_sources = sources

    async def _fetch_system_info(self) -> None:
        result = await self._call(SYSTEM_ENDPOINT, "getSystemInformation")
        if not _has_length(result, 1) or not isinstance(result[0], dict):
            raise ProtocolError("Invalid system information result", endpoint=SYSTEM_ENDPOINT)
        self._capabilities.system_info = result[0]

    async def _fetch_controller_info(self) -> None:
        result = await self._call(SYSTEM_ENDPOINT, "getRemoteControllerInfo")
        if (
            not _has_length(result, 2)
            or not isinstance(result[0], dict)
            or not isinstance(result[1], list)
        ):
            raise ProtocolError("Invalid remote controller info result", endpoint=SYSTEM_ENDPOINT)
        try:
            commands = [RemoteCode.model_validate(item) for item in result[1]]
        except ValidationError as e:
            raise ProtocolError(
                "Invalid remote controller info result", endpoint=SYSTEM_ENDPOINT
            ) from e
        self._capabilities.controller_info = RemoteControllerInfo(type=result[0], commands=commands)

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    async def _call(self, endpoint: str, method: str, params: list[Any] | None = None) -> Any:
        """Send one JSON-RPC request and return its ``result`` member."""
        await self._ensure_open()
        envelope = build_json_envelope(method, self.next_request_id(), params)
        logger.debug("-> %s %s id=%d", endpoint, method, envelope["id"])
        body = await self._transport.post_json(endpoint, envelope)
        return body.get("result")

    async def _ensure_open(self) -> None:
        if not self._transport.is_open:
            await self._transport.open()


def _has_length(result: Any, length: int) -> bool:
    return isinstance(result, list) and len(result) == length
