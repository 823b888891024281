"""Tests for command string resolution."""

from __future__ import annotations

import pytest

from braviactl.commands.resolver import (
    DIRECT_OPERATIONS,
    parse_function_call,
    resolve_command,
    resolve_commands,
    split_command_list,
)
from braviactl.domain.models import (
    CapabilityTables,
    DirectCommand,
    RemoteCode,
    RemoteCommand,
    RemoteControllerInfo,
    UnresolvedCommand,
)
from conftest import VOLUME_UP_CODE


class TestParseFunctionCall:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("setInputSource(DisplayPort)", ("setInputSource", ["DisplayPort"])),
            ("setInputSource(HDMI 1)", ("setInputSource", ["HDMI 1"])),
            ("getPowerStatus()", ("getPowerStatus", [])),
            ("f(a,b,c)", ("f", ["a", "b", "c"])),
            ("f(a, b)", ("f", ["a", " b"])),
        ],
    )
    def test_call_syntax(self, raw: str, expected: tuple[str, list[str]]) -> None:
        assert parse_function_call(raw) == expected

    @pytest.mark.parametrize("raw", ["VolumeUp", "f(", "(x)", "f(x) trailing"])
    def test_not_call_syntax(self, raw: str) -> None:
        assert parse_function_call(raw) is None


class TestResolveCommand:
    def test_remote_catalog_match(self, sample_tables: CapabilityTables) -> None:
        descriptor = resolve_command("VolumeUp", sample_tables)
        assert descriptor == RemoteCommand(raw="VolumeUp", name="VolumeUp", code=VOLUME_UP_CODE)

    def test_direct_command(self, sample_tables: CapabilityTables) -> None:
        descriptor = resolve_command("setInputSource(DisplayPort)", sample_tables)
        assert descriptor == DirectCommand(
            raw="setInputSource(DisplayPort)", name="setInputSource", args=["DisplayPort"]
        )

    def test_direct_command_without_args(self, sample_tables: CapabilityTables) -> None:
        descriptor = resolve_command("getPowerStatus()", sample_tables)
        assert isinstance(descriptor, DirectCommand)
        assert descriptor.args == []

    def test_arguments_are_not_validated(self, sample_tables: CapabilityTables) -> None:
        descriptor = resolve_command("setInputSource(No Such Input,extra)", sample_tables)
        assert isinstance(descriptor, DirectCommand)
        assert descriptor.args == ["No Such Input", "extra"]

    @pytest.mark.parametrize("raw", ["bogus()", "Netflix", "volumeup", ""])
    def test_unresolved(self, sample_tables: CapabilityTables, raw: str) -> None:
        assert resolve_command(raw, sample_tables) == UnresolvedCommand(raw=raw)

    def test_allow_list_is_respected(self, sample_tables: CapabilityTables) -> None:
        descriptor = resolve_command("getPowerStatus()", sample_tables, allowed=["setInputSource"])
        assert isinstance(descriptor, UnresolvedCommand)

    def test_allow_list_cannot_add_unregistered_operations(self, sample_tables: CapabilityTables) -> None:
        descriptor = resolve_command("reboot()", sample_tables, allowed=["reboot"])
        assert isinstance(descriptor, UnresolvedCommand)

    def test_catalog_takes_precedence_over_call_syntax(self) -> None:
        tables = CapabilityTables(
            controller_info=RemoteControllerInfo(
                commands=[RemoteCode(name="getPowerStatus()", value="CODE")]
            )
        )
        assert isinstance(resolve_command("getPowerStatus()", tables), RemoteCommand)

    def test_registry_covers_defaults(self) -> None:
        assert set(DIRECT_OPERATIONS) == {"setInputSource", "getPowerStatus"}


class TestResolveCommands:
    def test_preserves_order(self, sample_tables: CapabilityTables) -> None:
        descriptors = resolve_commands(
            ["Mute", "bogus", "setInputSource(DisplayPort)", "VolumeUp"], sample_tables
        )
        assert [d.kind for d in descriptors] == ["remote", "unresolved", "direct", "remote"]

    def test_empty(self, sample_tables: CapabilityTables) -> None:
        assert resolve_commands([], sample_tables) == []


class TestSplitCommandList:
    def test_splits_commas(self) -> None:
        assert split_command_list(["VolumeUp,Mute", "PowerOff"]) == ["VolumeUp", "Mute", "PowerOff"]

    def test_keeps_commas_inside_calls(self) -> None:
        assert split_command_list(["f(a,b),Mute"]) == ["f(a,b)", "Mute"]

    def test_drops_empty_items(self) -> None:
        assert split_command_list(["VolumeUp,,", ""]) == ["VolumeUp"]
