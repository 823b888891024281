"""HTTP device transport.

Sends ScalarWebAPI and IRCC requests to a BRAVIA set with httpx.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from braviactl.domain.errors import NetworkError, ProtocolError, TransportError
from braviactl.transport.base import (
    IRCC_ENDPOINT,
    IRCC_SOAP_ACTION,
    DeviceTransport,
    build_ircc_envelope,
)

logger = logging.getLogger(__name__)

PSK_HEADER = "X-Auth-PSK"
DEFAULT_TIMEOUT = 5.0


class HttpTransport(DeviceTransport):
    """Talks to the device's HTTP control API."""

    def __init__(
        self,
        address: str,
        psk: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = f"http://{address}"
        self._psk = psk or None
        self._timeout = timeout
        self._http_transport = http_transport
        self._client: httpx.AsyncClient | None = None

    @property
    def is_open(self) -> bool:
        return self._client is not None

    async def open(self) -> None:
        """Create the HTTP client. The device is not contacted here."""
        if self._client is not None:
            return
        headers = {}
        if self._psk:
            headers[PSK_HEADER] = self._psk
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers=headers,
            transport=self._http_transport,
        )
        logger.debug("Opened HTTP client for %s", self._base_url)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.debug("Closed HTTP client for %s", self._base_url)

    async def post_json(self, endpoint: str, envelope: dict[str, Any]) -> dict[str, Any]:
        resp = await self._post(endpoint, json=envelope)
        try:
            body = resp.json()
        except ValueError:
            # Several endpoints answer with an empty or non-JSON body.
            logger.debug("Unparseable body from %s treated as empty result", endpoint)
            return {}

        if not isinstance(body, dict):
            raise ProtocolError(
                f"Malformed response envelope from {endpoint}: {type(body).__name__}",
                endpoint=endpoint,
            )
        if "error" in body:
            raise ProtocolError(
                f"Device error from {endpoint} ({envelope.get('method')}): {body['error']}",
                endpoint=endpoint,
            )
        return body

    async def post_ircc(self, code: str) -> None:
        await self._post(
            IRCC_ENDPOINT,
            content=build_ircc_envelope(code).encode("utf-8"),
            headers={
                "Content-Type": "text/xml; charset=UTF-8",
                "SOAPACTION": IRCC_SOAP_ACTION,
            },
        )

    async def _post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Send a POST request to the device."""
        if self._client is None:
            raise TransportError("Transport is not open", endpoint=path)
        try:
            resp = await self._client.post(path, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProtocolError(
                f"HTTP {e.response.status_code} from {path}", endpoint=path
            ) from e
        except httpx.ProtocolError as e:
            raise ProtocolError(f"Malformed HTTP response from {path}: {e}", endpoint=path) from e
        except httpx.TransportError as e:
            raise NetworkError(f"HTTP request to {path} failed: {e}", endpoint=path) from e
        except httpx.HTTPError as e:
            # Undecodable bodies, redirect loops
            raise ProtocolError(f"Bad HTTP response from {path}: {e}", endpoint=path) from e
        logger.debug("POST %s -> %d", path, resp.status_code)
        return resp
