"""MPD protocol encoding utilities.

MPD uses a simple line-based text protocol:
- Commands are sent as plain text lines: ``name arg1 arg2 ...``
- Responses are key-value pairs: "key: value"
- Responses end with "OK" or "ACK [error@position] {command} message"
- Command lists wrap several commands between begin/end markers and
  separate each command's reply with "list_OK"

Reference: https://mpd.readthedocs.io/en/stable/protocol.html
"""

import re
from collections.abc import Mapping
from typing import Any

from mpdctrl.api.mpd.errors import MpdConnectionError, MpdError, ServerError, error_for_code
from mpdctrl.api.mpd.types import Playlist, Range, Track

GREETING_PREFIX = "OK MPD "
OK = "OK"
LIST_OK = "list_OK"
COMMAND_LIST_BEGIN = "command_list_ok_begin"
COMMAND_LIST_END = "command_list_end"

# Pattern for ACK responses: ACK [error@command_listNum] {current_command} message_text
ACK_PATTERN = re.compile(r"^ACK \[(?P<code>\d+)@(?P<pos>\d+)\] \{(?P<command>[^}]*)\} (?P<message>.*)$")

_NEEDS_QUOTES = re.compile(r"['\"\s\\]")


def escape_arg(arg: Any) -> str | None:
    """Escape an argument for MPD command.

    MPD requires arguments with spaces or special chars to be quoted.
    Inside quotes, backslash and double-quote must be escaped.

    Args:
        arg: The argument to escape (converted with ``str``).

    Returns:
        Escaped argument, quoted if necessary, or None for None.
    """
    if arg is None:
        return None
    text = str(arg)
    if text and not _NEEDS_QUOTES.search(text):
        return text

    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _encode_range(start: int, end: int | None, exclusive: bool) -> str:
    if end is None or end == -1:
        return f"{start}:"
    return f"{start}:{end if exclusive else end + 1}"


def encode_arg(arg: Any) -> str | None:
    """Encode one command argument according to its type.

    Returns:
        The wire form, or None if the argument should be left out.
    """
    if arg is None:
        return None
    if isinstance(arg, bool):
        return "1" if arg else "0"
    if isinstance(arg, Range):
        return _encode_range(arg.start, arg.end, arg.exclusive)
    if isinstance(arg, range):
        # Python ranges already exclude their stop
        return _encode_range(arg.start, arg.stop, exclusive=True)
    if isinstance(arg, Track):
        return escape_arg(arg.file)
    if isinstance(arg, Playlist):
        return escape_arg(arg.name)
    if isinstance(arg, Mapping):
        # Search query: tag "value" tag "value" ...
        query = "".join(f"{tag} {escape_arg(value)} " for tag, value in arg.items())
        return query.strip()
    return escape_arg(arg)


def format_command(command: str, *args: Any) -> str:
    """Format an MPD command with arguments.

    Args:
        command: The MPD command name.
        *args: Command arguments of any supported kind.

    Returns:
        Formatted command string (without newline).
    """
    encoded = [part for part in (encode_arg(arg) for arg in args) if part is not None]
    return " ".join([command, *encoded]).strip()


def format_command_list(lines: list[str]) -> str:
    """Wrap already-formatted command lines in command-list markers.

    Returns:
        The full request, newline-terminated.
    """
    return "\n".join([COMMAND_LIST_BEGIN, *lines, COMMAND_LIST_END]) + "\n"


def parse_greeting(line: str) -> str:
    """Extract the protocol version from the connect greeting.

    Raises:
        MpdConnectionError: If the line is not an MPD greeting.
    """
    line = line.rstrip("\n")
    if not line.startswith(GREETING_PREFIX):
        raise MpdConnectionError(f"Invalid MPD greeting: {line!r}")
    return line[len(GREETING_PREFIX) :]


def is_ack(line: str) -> bool:
    """Return True if ``line`` is an ACK error line."""
    return line.startswith("ACK")


def parse_ack(line: str) -> MpdError:
    """Build the typed error for an ACK line.

    Args:
        line: The ACK line (with or without trailing newline).

    Returns:
        An instance of the MpdError subclass mapped from the code.
    """
    line = line.rstrip("\n")
    match = ACK_PATTERN.match(line)
    if not match:
        return ServerError(0, "", line)
    code = int(match.group("code"))
    error_class = error_for_code(code)
    return error_class(
        code,
        match.group("command"),
        match.group("message"),
        position=int(match.group("pos")) + 1,
    )
