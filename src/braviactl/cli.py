"""Command-line interface for braviactl.

Provides the entry point for discovering sets on the network, listing a
set's capabilities, querying power status and running command batches.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="braviactl",
        description="Control Sony BRAVIA televisions on the local network",
        epilog='Example: braviactl -s 192.168.0.111 -k 8888 exec "VolumeUp"',
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/braviactl.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "-s", "--host",
        type=str,
        default=None,
        help="TV IP address (overrides config)",
    )
    parser.add_argument(
        "-k", "--psk",
        type=str,
        default=None,
        help="Pre-shared key (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    discover_parser = subparsers.add_parser("discover", help="Search the network for TVs")
    discover_parser.add_argument(
        "--timeout", type=int, default=None,
        help="Seconds to listen for replies",
    )

    subparsers.add_parser("info", help="List input sources, remote commands and device info")
    subparsers.add_parser("power", help="Show power status")

    exec_parser = subparsers.add_parser("exec", help="Run commands in order")
    exec_parser.add_argument(
        "commands", nargs="+",
        help="Remote command names or calls like 'setInputSource(HDMI 1)'; "
             "comma-separated lists are accepted",
    )

    return parser.parse_args(argv)


def _build_session(settings, args):
    from braviactl.session.device import BraviaSession

    host = args.host or settings.device.host
    if not host:
        raise SystemExit("server ip is missing (use --host or set device.host)")
    psk = args.psk or settings.psk.get_secret_value() or None
    return BraviaSession(
        host,
        psk=psk,
        timeout=settings.device.timeout,
        direct_commands=settings.commands.direct_commands,
    )


async def _discover(settings, args) -> None:
    from braviactl.discovery.ssdp import SsdpDiscovery

    discovery = SsdpDiscovery(search_target=settings.discovery.search_target)
    devices = await discovery.discover(args.timeout or settings.discovery.timeout)
    for device in devices:
        print(f"{device.ip or '?':15}  {device.model or '<unknown model>':30}  {device.uuid or ''}")


async def _info(tv) -> None:
    async with tv:
        tables = await tv.connect()

    inputs = [f"{s.label or '<NONAME>'}({s.title})" for s in tables.input_sources]
    commands = [c.name for c in tables.controller_info.commands]

    print("Available Input Source:")
    print(",\n".join(inputs))
    print()
    print("Available Commands:")
    print(", ".join(commands))
    print()
    print("Device Info")
    print(json.dumps(tables.system_info, indent=2))


async def _power(tv) -> None:
    async with tv:
        status = await tv.get_power_status()
    print(f"Power: {'on' if status.is_power_on else 'standby'} ({status.status})")


async def _exec(tv, commands: list[str]) -> None:
    async with tv:
        await tv.connect()
        outcomes = await tv.execute(commands)

    for outcome in outcomes:
        line = f"{outcome.command}: {outcome.status.value}"
        if outcome.error:
            line += f" ({outcome.error})"
        elif outcome.result:
            line += f" {json.dumps(outcome.result)}"
        print(line)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the braviactl CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from braviactl.config.settings import load_settings
    from braviactl.domain.errors import BraviaError
    from braviactl.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    try:
        if args.command == "discover":
            logger.info("Searching for devices")
            asyncio.run(_discover(settings, args))

        elif args.command == "info":
            asyncio.run(_info(_build_session(settings, args)))

        elif args.command == "power":
            asyncio.run(_power(_build_session(settings, args)))

        elif args.command == "exec":
            from braviactl.commands.resolver import split_command_list

            commands = split_command_list(args.commands)
            logger.info("Executing %d command(s)", len(commands))
            asyncio.run(_exec(_build_session(settings, args), commands))
    except BraviaError as e:
        logger.error("%s", e)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
