"""Exception hierarchy for braviactl.

Every error raised by the library derives from :class:`BraviaError`, so
callers that only care about "the TV did not do what I asked" can catch
a single type. Nothing in the library retries on its own.
"""

from __future__ import annotations


class BraviaError(Exception):
    """Base error for braviactl."""


class InvalidAddressError(BraviaError, ValueError):
    """Raised when a device address is not a dotted-quad IPv4 string."""

    def __init__(self, address: str) -> None:
        super().__init__(f"IP address format incorrect: {address!r}")
        self.address = address


class TransportError(BraviaError):
    """Raised when a request to the device cannot be completed."""

    def __init__(self, message: str, endpoint: str = "") -> None:
        super().__init__(message)
        self.endpoint = endpoint


class NetworkError(TransportError):
    """Timeout, refused connection or unreachable host."""


class ProtocolError(TransportError):
    """The device answered with an unexpected status or response shape."""


class DiscoveryError(BraviaError):
    """Raised when the multicast search cannot be performed."""


class NoDevicesFoundError(DiscoveryError):
    """Raised when a discovery run observed no devices before its timeout."""


class SessionStateError(BraviaError):
    """Raised when a session operation is invalid in the current state."""


class ConnectError(BraviaError):
    """Raised when fetching the capability tables fails.

    The first failing sub-fetch is available as ``cause`` (and as the
    exception's ``__cause__``).
    """

    def __init__(self, cause: BaseException) -> None:
        super().__init__(
            f"Failed to connect device: {cause}. "
            "Please ensure your device is switched on and try again."
        )
        self.cause = cause


class InvalidInputSourceError(BraviaError):
    """Raised when no cached input source carries the requested label."""

    def __init__(self, label: str) -> None:
        super().__init__(f"Invalid input source label: {label!r}")
        self.label = label


class UnknownCommandError(BraviaError):
    """Raised when a remote command is not in the device's catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Command {name!r} is not available for your device.")
        self.name = name
