"""Command-line entry point for mpdctrl."""

import argparse
import asyncio
import logging
import sys
from typing import Any

from mpdctrl.api.mpd import MpdClient, MpdConnectionError, MpdError, Playlist, Track
from mpdctrl.core.config import ConfigManager, MpdSettings
from mpdctrl.core.status_poller import StatusChange

logger = logging.getLogger(__name__)


def build_parser(settings: MpdSettings) -> argparse.ArgumentParser:
    """Build the argument parser, with defaults from saved settings."""
    parser = argparse.ArgumentParser(
        prog="mpdctrl",
        description="mpdctrl: MPD command-line client",
    )
    parser.add_argument(
        "--host", default=settings.host, help=f"MPD host or socket path (default: {settings.host})",
    )
    parser.add_argument(
        "--port", type=int, default=settings.port, help=f"TCP port (default: {settings.port})",
    )
    parser.add_argument(
        "--password", default=settings.password, help="MPD password",
    )
    parser.add_argument(
        "--save", action="store_true", help="remember host, port and password",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="enable debug logging",
    )
    parser.add_argument(
        "--watch", action="store_true", help="print status changes until interrupted",
    )
    parser.add_argument(
        "command", nargs="?", default=None, help="raw MPD command (default: status)",
    )
    parser.add_argument(
        "args", nargs="*", help="command arguments",
    )
    return parser


def format_value(value: Any) -> str:
    """Render a parsed reply value for the terminal."""
    if isinstance(value, Track):
        return f"{value.artist or '-'} - {value.title or value.file} [{value.length}]"
    if isinstance(value, Playlist):
        return value.name
    if isinstance(value, dict):
        return "\n".join(f"{key}: {item}" for key, item in value.items())
    if isinstance(value, list):
        return "\n".join(format_value(item) for item in value)
    return str(value)


def print_change(change: StatusChange) -> None:
    """Print one status change as ``field: values``."""
    values = " ".join(format_value(value) for value in change.values)
    print(f"{change.field}: {values}", flush=True)


async def run(options: argparse.Namespace, settings: MpdSettings) -> int:
    """Connect, run the requested action and disconnect.

    Returns:
        Exit code (0 for success).
    """
    async with MpdClient(options.host, options.port, options.password, settings.timeout) as client:
        logger.debug("Connected to MPD %s", client.version)
        if options.command:
            result = await client.send_command(options.command, *options.args)
        else:
            result = await client.status()
        print(format_value(result))

        if options.watch:
            poller = client.poller
            poller.interval = settings.poll_interval
            changes = poller.listen()
            poller.start()
            async for change in changes:
                print_change(change)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the mpdctrl CLI.

    Returns:
        Exit code (0 for success).
    """
    config = ConfigManager()
    settings = config.load()
    options = build_parser(settings).parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if options.save:
        config.save(
            MpdSettings(
                host=options.host,
                port=options.port,
                password=options.password,
                timeout=settings.timeout,
                poll_interval=settings.poll_interval,
                reconnect_delay=settings.reconnect_delay,
            )
        )
        config.sync()

    try:
        return asyncio.run(run(options, settings))
    except KeyboardInterrupt:
        return 0
    except (MpdError, MpdConnectionError) as e:
        logger.error("%s", e)
        print(f"mpdctrl: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
