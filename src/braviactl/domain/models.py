"""Core domain models for the braviactl system.

These models represent the data flowing between the components: the
capability tables a TV reports at connect time, devices found by
discovery, the resolved command descriptors a batch is made of, and the
per-command outcomes the dispatcher records.
"""

from __future__ import annotations

import enum
import re
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from braviactl.domain.errors import InvalidAddressError

_IP_ADDRESS_RE = re.compile(
    r"^(([0-9]|[1-9][0-9]|1[0-9]{2}|2[0-4][0-9]|25[0-5])\.){3}"
    r"([0-9]|[1-9][0-9]|1[0-9]{2}|2[0-4][0-9]|25[0-5])$"
)


def validate_address(address: str) -> str:
    """Return ``address`` unchanged if it is a dotted-quad IPv4 string.

    Raises:
        InvalidAddressError: If any octet is out of range, has a leading
            zero, or the string is not four dot-separated octets.
    """
    if not isinstance(address, str) or not _IP_ADDRESS_RE.match(address):
        raise InvalidAddressError(str(address))
    return address


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class SessionState(str, enum.Enum):
    """Lifecycle of a device session."""

    UNINITIALIZED = "uninitialized"
    CONNECTING = "connecting"
    READY = "ready"
    FAILED = "failed"  # terminal; build a new session to retry


class OutcomeStatus(str, enum.Enum):
    """How a single command of a batch ended."""

    SUCCEEDED = "succeeded"
    SENT = "sent"  # remote button code, delivery not confirmed
    FAILED = "failed"
    UNAVAILABLE = "unavailable"


# ---------------------------------------------------------------------------
# Capability tables
# ---------------------------------------------------------------------------


class InputSource(BaseModel):
    """An external input reported by ``getCurrentExternalInputsStatus``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    uri: str = Field(description="Content URI, e.g. 'extInput:hdmi?port=1'")
    title: str = Field(default="", description="Device-assigned input name")
    label: str | None = Field(default=None, description="User-assigned label, if any")
    connection: bool | None = Field(default=None)
    icon: str | None = Field(default=None)
    status: str | None = Field(default=None)


class RemoteCode(BaseModel):
    """One entry of the remote-controller catalog."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(description="Button name, e.g. 'VolumeUp'")
    value: str = Field(description="Opaque IRCC code sent verbatim to the device")


class RemoteControllerInfo(BaseModel):
    """Result of ``getRemoteControllerInfo``: metadata plus the code list."""

    type: dict[str, Any] = Field(default_factory=dict)
    commands: list[RemoteCode] = Field(default_factory=list)


class CapabilityTables(BaseModel):
    """Cached snapshot of what a device reported at connect time."""

    input_sources: list[InputSource] = Field(default_factory=list)
    system_info: dict[str, Any] = Field(default_factory=dict)
    controller_info: RemoteControllerInfo = Field(default_factory=RemoteControllerInfo)

    def find_input_source(self, label: str) -> InputSource | None:
        """First input source whose label equals ``label`` exactly."""
        return next((s for s in self.input_sources if s.label == label), None)

    def find_remote_code(self, name: str) -> RemoteCode | None:
        """First catalog entry named ``name``."""
        return next((c for c in self.controller_info.commands if c.name == name), None)


class PowerStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str
    is_power_on: bool


class DiscoveredDevice(BaseModel):
    """A device that answered the multicast search.

    Every field is optional: a header that did not match its pattern is
    simply left out.
    """

    model_config = ConfigDict(frozen=True)

    ip: str | None = None
    uuid: str | None = None
    model: str | None = None


# ---------------------------------------------------------------------------
# Command descriptors (discriminated union)
# ---------------------------------------------------------------------------


class DirectCommand(BaseModel):
    """A call to one of the allow-listed session operations."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["direct"] = "direct"
    raw: str = Field(description="The command string as the caller wrote it")
    name: str = Field(description="Allow-listed operation name, e.g. 'setInputSource'")
    args: list[str] = Field(default_factory=list, description="Unvalidated string arguments")


class RemoteCommand(BaseModel):
    """A remote-control button found in the device's catalog."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["remote"] = "remote"
    raw: str
    name: str
    code: str = Field(description="IRCC code from the catalog")


class UnresolvedCommand(BaseModel):
    """A command string that matched neither the catalog nor the allow-list."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unresolved"] = "unresolved"
    raw: str


CommandDescriptor = Annotated[
    Union[DirectCommand, RemoteCommand, UnresolvedCommand],
    Field(discriminator="kind"),
]


class CommandOutcome(BaseModel):
    """What happened to one command of a batch."""

    model_config = ConfigDict(frozen=True)

    command: str = Field(description="The raw command string")
    kind: Literal["direct", "remote", "unresolved"]
    status: OutcomeStatus
    result: dict[str, Any] | None = Field(default=None)
    error: str | None = Field(default=None)

    @property
    def ok(self) -> bool:
        return self.status in (OutcomeStatus.SUCCEEDED, OutcomeStatus.SENT)
