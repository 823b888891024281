"""Shared test fixtures for the braviactl test suite.

Provides a fake BRAVIA set that answers ScalarWebAPI and IRCC requests
through ``httpx.MockTransport``, sample capability tables, and sessions
wired to the fake device.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio

from braviactl.domain.models import (
    CapabilityTables,
    InputSource,
    RemoteCode,
    RemoteControllerInfo,
)
from braviactl.session.device import BraviaSession
from braviactl.transport.http_backend import HttpTransport

DEVICE_IP = "192.168.1.20"
DEVICE_PSK = "0000"

VOLUME_UP_CODE = "AAAAAQAAAAEAAAASAw=="


# ---------------------------------------------------------------------------
# Device response payloads
# ---------------------------------------------------------------------------


INPUT_SOURCES_RESULT: list[Any] = [
    [
        {
            "uri": "extInput:hdmi?port=1",
            "title": "HDMI 1",
            "label": "DisplayPort",
            "connection": True,
            "icon": "meta:hdmi",
            "status": "true",
        },
        {
            "uri": "extInput:hdmi?port=2",
            "title": "HDMI 2",
            "label": "",
            "connection": False,
            "icon": "meta:hdmi",
        },
        {
            "uri": "extInput:component?port=1",
            "title": "Component",
            "connection": False,
            "icon": "meta:component",
        },
    ]
]

SYSTEM_INFO_RESULT: list[Any] = [
    {
        "product": "TV",
        "region": "XEU",
        "language": "eng",
        "model": "KDL-50W800B",
        "serial": "1234567",
        "macAddr": "ac:9b:0a:19:ce:de",
        "name": "BRAVIA",
        "generation": "2.4.0",
    }
]

CONTROLLER_INFO_RESULT: list[Any] = [
    {"bundled": True, "type": "RM-J1100"},
    [
        {"name": "PowerOff", "value": "AAAAAQAAAAEAAAAvAw=="},
        {"name": "VolumeUp", "value": VOLUME_UP_CODE},
        {"name": "VolumeDown", "value": "AAAAAQAAAAEAAAATAw=="},
        {"name": "Mute", "value": "AAAAAQAAAAEAAAAUAw=="},
    ],
]

Handler = Callable[[httpx.Request], httpx.Response]


class FakeBravia:
    """Answers requests like a BRAVIA set and records every request.

    ``results`` maps a JSON-RPC method name to its ``result`` payload.
    ``overrides`` maps a method name (or ``"IRCC"``) to a handler that
    replaces the default answer, e.g. to return an error or raise.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.results: dict[str, Any] = {
            "getCurrentExternalInputsStatus": INPUT_SOURCES_RESULT,
            "getSystemInformation": SYSTEM_INFO_RESULT,
            "getRemoteControllerInfo": CONTROLLER_INFO_RESULT,
            "getPowerStatus": [{"status": "active"}],
            "setPlayContent": [],
        }
        self.overrides: dict[str, Handler] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/sony/IRCC":
            handler = self.overrides.get("IRCC")
            if handler is not None:
                return handler(request)
            return httpx.Response(200, content=b"")

        body = json.loads(request.content)
        method = body["method"]
        handler = self.overrides.get(method)
        if handler is not None:
            return handler(request)
        if method not in self.results:
            return httpx.Response(200, json={"error": [12, "No Such Method"], "id": body["id"]})
        return httpx.Response(200, json={"result": self.results[method], "id": body["id"]})

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def json_bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests if r.url.path != "/sony/IRCC"]

    def clear(self) -> None:
        self.requests.clear()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_tv() -> FakeBravia:
    """A fake device with default answers for every capability fetch."""
    return FakeBravia()


@pytest.fixture
def http_transport(fake_tv: FakeBravia) -> HttpTransport:
    """An HttpTransport whose requests are served by ``fake_tv``."""
    return HttpTransport(DEVICE_IP, psk=DEVICE_PSK, http_transport=httpx.MockTransport(fake_tv))


@pytest_asyncio.fixture
async def session(http_transport: HttpTransport):
    """A session talking to ``fake_tv``; not yet connected."""
    tv = BraviaSession(DEVICE_IP, psk=DEVICE_PSK, transport=http_transport)
    yield tv
    await tv.close()


@pytest_asyncio.fixture
async def connected_session(session: BraviaSession, fake_tv: FakeBravia):
    """A connected session with the fake device's request log cleared."""
    await session.connect()
    fake_tv.clear()
    return session


@pytest.fixture
def sample_tables() -> CapabilityTables:
    """Capability tables matching the fake device's answers."""
    return CapabilityTables(
        input_sources=[InputSource.model_validate(s) for s in INPUT_SOURCES_RESULT[0]],
        system_info=dict(SYSTEM_INFO_RESULT[0]),
        controller_info=RemoteControllerInfo(
            type=CONTROLLER_INFO_RESULT[0],
            commands=[RemoteCode.model_validate(c) for c in CONTROLLER_INFO_RESULT[1]],
        ),
    )
