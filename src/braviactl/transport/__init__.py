"""Device transport module for braviactl.

Delivers JSON-RPC and IRCC requests to a device. The abstract interface
lets sessions run against the HTTP backend or a test double.

Public API:
    DeviceTransport -- Abstract base class
    HttpTransport -- httpx backend
"""

from braviactl.transport.base import (
    AV_CONTENT_ENDPOINT,
    IRCC_ENDPOINT,
    SYSTEM_ENDPOINT,
    DeviceTransport,
    build_ircc_envelope,
    build_json_envelope,
)

__all__ = [
    "AV_CONTENT_ENDPOINT",
    "IRCC_ENDPOINT",
    "SYSTEM_ENDPOINT",
    "DeviceTransport",
    "HttpTransport",
    "build_ircc_envelope",
    "build_json_envelope",
]


def __getattr__(name: str) -> type:
    """Lazy import for the backend that requires httpx."""
    if name == "HttpTransport":
        from braviactl.transport.http_backend import HttpTransport
        return HttpTransport
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
