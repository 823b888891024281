"""Domain models and errors for braviactl.

This package contains the capability tables, command descriptors,
outcomes and the exception hierarchy shared by every other module. All
models use Pydantic v2 for validation and serialization.
"""

from braviactl.domain.errors import (
    BraviaError,
    ConnectError,
    DiscoveryError,
    InvalidAddressError,
    InvalidInputSourceError,
    NetworkError,
    NoDevicesFoundError,
    ProtocolError,
    SessionStateError,
    TransportError,
    UnknownCommandError,
)
from braviactl.domain.models import (
    CapabilityTables,
    CommandDescriptor,
    CommandOutcome,
    DirectCommand,
    DiscoveredDevice,
    InputSource,
    OutcomeStatus,
    PowerStatus,
    RemoteCode,
    RemoteCommand,
    RemoteControllerInfo,
    SessionState,
    UnresolvedCommand,
    validate_address,
)

__all__ = [
    "BraviaError",
    "CapabilityTables",
    "CommandDescriptor",
    "CommandOutcome",
    "ConnectError",
    "DirectCommand",
    "DiscoveredDevice",
    "DiscoveryError",
    "InputSource",
    "InvalidAddressError",
    "InvalidInputSourceError",
    "NetworkError",
    "NoDevicesFoundError",
    "OutcomeStatus",
    "PowerStatus",
    "ProtocolError",
    "RemoteCode",
    "RemoteCommand",
    "RemoteControllerInfo",
    "SessionState",
    "SessionStateError",
    "TransportError",
    "UnknownCommandError",
    "UnresolvedCommand",
    "validate_address",
]
