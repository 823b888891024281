"""Abstract base class for device transports.

A transport knows how to deliver the two payload shapes a BRAVIA set
understands: JSON-RPC style envelopes for the ScalarWebAPI endpoints and
the SOAP envelope of the IRCC button-code endpoint. Sessions only talk to
this interface, so tests can substitute a mock without touching HTTP.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any
from xml.sax.saxutils import escape

logger = logging.getLogger(__name__)

SYSTEM_ENDPOINT = "/sony/system"
AV_CONTENT_ENDPOINT = "/sony/avContent"
IRCC_ENDPOINT = "/sony/IRCC"

JSON_RPC_VERSION = "1.0"

IRCC_SOAP_ACTION = '"urn:schemas-sony-com:service:IRCC:1#X_SendIRCC"'

_IRCC_TEMPLATE = """<?xml version="1.0"?>
<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" s:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">
  <s:Body>
    <u:X_SendIRCC xmlns:u="urn:schemas-sony-com:service:IRCC:1">
      <IRCCCode>{code}</IRCCCode>
    </u:X_SendIRCC>
  </s:Body>
</s:Envelope>"""


def build_json_envelope(
    method: str, request_id: int, params: list[Any] | None = None
) -> dict[str, Any]:
    """Build the request body for a ScalarWebAPI call."""
    return {
        "method": method,
        "id": request_id,
        "params": params if params is not None else [],
        "version": JSON_RPC_VERSION,
    }


def build_ircc_envelope(code: str) -> str:
    """Build the SOAP body that presses one remote-control button."""
    return _IRCC_TEMPLATE.format(code=escape(code))


class DeviceTransport(ABC):
    """Abstract interface for sending requests to a device.

    Example usage::

        async with HttpTransport("192.168.1.20", psk="0000") as transport:
            body = await transport.post_json(
                SYSTEM_ENDPOINT, build_json_envelope("getPowerStatus", 1)
            )
    """

    @abstractmethod
    async def open(self) -> None:
        """Acquire the underlying connection resources."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release connection resources. Safe to call multiple times."""
        ...

    @property
    @abstractmethod
    def is_open(self) -> bool:
        ...

    @abstractmethod
    async def post_json(self, endpoint: str, envelope: dict[str, Any]) -> dict[str, Any]:
        """POST a JSON envelope and return the parsed response body.

        A body that is not valid JSON resolves to ``{}``.

        Raises:
            NetworkError: On timeout or connection failure.
            ProtocolError: On a non-2xx status, a non-object body or an
                ``error`` member in the response.
        """
        ...

    @abstractmethod
    async def post_ircc(self, code: str) -> None:
        """POST an IRCC button code.

        Raises:
            NetworkError: On timeout or connection failure.
            ProtocolError: On a non-2xx status.
        """
        ...

    async def __aenter__(self) -> DeviceTransport:
        await self.open()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        await self.close()
