"""Tests for request envelope builders."""

from __future__ import annotations

from braviactl.transport.base import build_ircc_envelope, build_json_envelope


class TestJsonEnvelope:
    def test_shape(self) -> None:
        assert build_json_envelope("getPowerStatus", 7) == {
            "method": "getPowerStatus",
            "id": 7,
            "params": [],
            "version": "1.0",
        }

    def test_params_passed_through(self) -> None:
        envelope = build_json_envelope("setPlayContent", 3, [{"uri": "extInput:hdmi?port=1"}])
        assert envelope["params"] == [{"uri": "extInput:hdmi?port=1"}]


class TestIrccEnvelope:
    def test_contains_code(self) -> None:
        body = build_ircc_envelope("AAAAAQAAAAEAAAASAw==")
        assert "<IRCCCode>AAAAAQAAAAEAAAASAw==</IRCCCode>" in body
        assert 'xmlns:u="urn:schemas-sony-com:service:IRCC:1"' in body
        assert body.startswith('<?xml version="1.0"?>')

    def test_code_is_escaped(self) -> None:
        body = build_ircc_envelope("a<b&c")
        assert "<IRCCCode>a&lt;b&amp;c</IRCCCode>" in body
