"""SSDP discovery of BRAVIA sets.

Sends an M-SEARCH for the ScalarWebAPI service type through
``async_upnp_client`` and collects the replies that arrive within the
search window. A typical reply carries::

    LOCATION: http://192.168.1.20:52323/dmr.xml
    ST: urn:schemas-sony-com:service:ScalarWebAPI:1
    USN: uuid:00000000-0000-1010-8000-aabbccddeeff::urn:schemas-sony-com:service:ScalarWebAPI:1
    X-AV-Server-Info: av=5.0; cn="Sony Corporation"; mn="BRAVIA KDL-50W800B"; mv="2.0";
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from async_upnp_client.search import async_search

from braviactl.domain.errors import DiscoveryError, NoDevicesFoundError
from braviactl.domain.models import DiscoveredDevice

logger = logging.getLogger(__name__)

SCALAR_WEB_API_SERVICE = "urn:schemas-sony-com:service:ScalarWebAPI:1"
DEFAULT_TIMEOUT = 3

_LOCATION_RE = re.compile(r"^https?://([0-9.]+)(?::\d+)?(?:/|\s|$)", re.IGNORECASE)
_USN_RE = re.compile(r"^uuid:([^:\s]+)", re.IGNORECASE)
_MODEL_RE = re.compile(r"\bmn=\"([^\"]+)\"")


def parse_advertisement(headers: Mapping[str, Any]) -> DiscoveredDevice:
    """Extract ip, uuid and model from the headers of one SSDP reply.

    Header names are matched case-insensitively. Fields whose header is
    missing or does not match are left as None.
    """
    lowered = {str(k).lower(): v for k, v in headers.items() if isinstance(v, str)}
    location = _LOCATION_RE.match(lowered.get("location", "").strip())
    usn = _USN_RE.match(lowered.get("usn", "").strip())
    model = _MODEL_RE.search(lowered.get("x-av-server-info", ""))
    return DiscoveredDevice(
        ip=location.group(1) if location else None,
        uuid=usn.group(1) if usn else None,
        model=model.group(1) if model else None,
    )


def dedupe_devices(devices: list[DiscoveredDevice]) -> list[DiscoveredDevice]:
    """Keep the first device per uuid, falling back to ip when uuid is absent.

    Devices carrying neither are dropped.
    """
    seen: set[str] = set()
    result: list[DiscoveredDevice] = []
    for device in devices:
        if device.uuid:
            key = f"uuid:{device.uuid}"
        elif device.ip:
            key = f"ip:{device.ip}"
        else:
            continue
        if key in seen:
            continue
        seen.add(key)
        result.append(device)
    return result


class SsdpDiscovery:
    """Finds devices advertising a service type on the local network.

    Usage::

        devices = await SsdpDiscovery().discover(timeout=3)
    """

    def __init__(self, search_target: str = SCALAR_WEB_API_SERVICE) -> None:
        self._search_target = search_target

    async def discover(self, timeout: int = DEFAULT_TIMEOUT) -> list[DiscoveredDevice]:
        """Search for devices for ``timeout`` seconds.

        Raises:
            NoDevicesFoundError: If nothing answered within the window.
            DiscoveryError: If the search could not be sent.
        """
        found: list[DiscoveredDevice] = []

        async def on_response(headers: Mapping[str, Any]) -> None:
            device = parse_advertisement(headers)
            logger.debug("SSDP reply from %s (%s)", device.ip, device.model)
            found.append(device)

        try:
            await async_search(
                search_target=self._search_target,
                timeout=timeout,
                async_callback=on_response,
            )
        except OSError as e:
            raise DiscoveryError(f"SSDP search failed: {e}") from e

        devices = dedupe_devices(found)
        if not devices:
            raise NoDevicesFoundError(
                f"No devices advertising {self._search_target} found within {timeout}s"
            )
        logger.info("Discovered %d device(s)", len(devices))
        return devices


async def discover(timeout: int = DEFAULT_TIMEOUT) -> list[DiscoveredDevice]:
    """Discover BRAVIA sets with the default search settings."""
    return await SsdpDiscovery().discover(timeout)
