"""MPD response parsing.

A successful reply body is a run of ``key: value`` lines. Turning it
into Python values takes three decisions, all keyed on the command that
produced the reply:

1. Where one record ends and the next begins (``make_chunks``). The
   first key of the body is taken as the record marker, and every later
   line starting with that key opens a new record. This holds for the
   shapes MPD sends (``file:`` for songs, ``playlist:`` for stored
   playlists, ``outputid:`` for outputs...) and is deliberately not
   generalised.
2. Whether each record is a dict or a bare value. Single-line records
   collapse to their value unless the command builds tracks,
   playlists or a fixed-shape record (``status``).
3. Whether a one-element result is returned bare or as a list
   (``RETURN_ARRAY``).
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from mpdctrl.api.mpd.coerce import parse_line
from mpdctrl.api.mpd.protocol import LIST_OK
from mpdctrl.api.mpd.types import Playlist, Track

if TYPE_CHECKING:
    from mpdctrl.api.mpd.client import MpdClient
    from mpdctrl.api.mpd.errors import MpdError

# Commands that always return a list, even for zero or one element
RETURN_ARRAY = frozenset(
    {
        "channels",
        "outputs",
        "readmessages",
        "list",
        "listallinfo",
        "find",
        "search",
        "listplaylists",
        "listplaylist",
        "playlistfind",
        "playlistsearch",
        "plchanges",
        "tagtypes",
        "commands",
        "notcommands",
        "urlhandlers",
        "decoders",
        "listplaylistinfo",
        "playlistinfo",
    }
)

# Commands whose records become Track instances
TRACK_COMMANDS = frozenset(
    {
        "listallinfo",
        "playlistinfo",
        "find",
        "findadd",
        "search",
        "searchadd",
        "playlistfind",
        "playlistsearch",
        "plchanges",
        "listplaylistinfo",
    }
)

# Commands whose records become Playlist instances
PLAYLIST_COMMANDS = frozenset({"listplaylists"})

# Commands whose single record must stay a dict even with one field
RECORD_COMMANDS = frozenset({"status", "stats", "currentsong", "readcomments"})

# Playlist names must stay text ("007" is not 7)
_PLAYLIST_RAW_KEYS = frozenset({"playlist"})

_FIRST_KEY = re.compile(r"\A(.+?):\s?")
_REMOTE_URL = re.compile(r"^https?://", re.IGNORECASE)
_LISTALLINFO_NOISE = re.compile(
    r"^(?:directory|playlist): .*?\n(?:last-modified: .*?\n)?",
    re.IGNORECASE | re.MULTILINE,
)
_LIST_OK_LINE = f"{LIST_OK}\n"


def build_record(text: str, raw_keys: frozenset[str] = frozenset()) -> dict[str, Any]:
    """Build one record from ``key: value`` lines.

    A key seen more than once turns into a list of all its values, in
    order. ``listed`` remembers which keys were converted so that
    tuple-valued fields (``time``, ``audio``) are never mistaken for an
    accumulated list.
    """
    record: dict[str, Any] = {}
    listed: set[str] = set()

    for line in text.splitlines():
        if not line:
            continue
        key, value = parse_line(line, raw_keys)
        if key not in record:
            record[key] = value
            continue
        if key not in listed:
            record[key] = [record[key]]
            listed.add(key)
        record[key].append(value)

    return record


def make_chunks(body: str) -> list[str]:
    """Split a reply body into one raw chunk per record."""
    match = _FIRST_KEY.match(body)
    if not match:
        return [body.strip()] if body.strip() else []
    first_key = re.escape(match.group(1))
    chunks = re.split(rf"\n(?={first_key}:)", body, flags=re.IGNORECASE)
    return [chunk.strip() for chunk in chunks if chunk.strip()]


def _make_track(record: dict[str, Any], client: MpdClient | None) -> Track:
    file = record.get("file")
    if isinstance(file, str) and _REMOTE_URL.match(file):
        # Streams carry no usable duration metadata
        return Track(file=file, time=(0, None), client=client)
    return Track.from_record(record, client)


def build_response(command: str, body: str, client: MpdClient | None = None) -> Any:
    """Parse a non-empty reply body into records, tracks or values.

    Args:
        command: Name of the command that produced ``body``.
        body: Reply text without the final OK line.
        client: Client bound to any Track or Playlist objects created.

    Returns:
        A single element, or a list when there are several elements or
        the command is in ``RETURN_ARRAY``.
    """
    chunks = make_chunks(body)

    make_track = command in TRACK_COMMANDS
    make_playlist = command in PLAYLIST_COMMANDS
    make_record = (
        make_track
        or make_playlist
        or command in RECORD_COMMANDS
        or any("\n" in chunk for chunk in chunks)
    )
    raw_keys = _PLAYLIST_RAW_KEYS if make_playlist else frozenset()

    items: list[Any] = []
    for chunk in chunks:
        if make_record:
            items.append(build_record(chunk, raw_keys))
        else:
            items.append(parse_line(chunk, raw_keys)[1])

    if make_track:
        items = [_make_track(record, client) for record in items]
    elif make_playlist:
        items = [Playlist.from_record(record, client) for record in items]

    if len(items) == 1 and command not in RETURN_ARRAY:
        return items[0]
    return items


def parse_response(command: str, body: str, client: MpdClient | None = None) -> Any:
    """Parse a reply body according to the command that produced it.

    Args:
        command: Name of the command.
        body: Reply text without the final OK line.
        client: Client bound to any Track or Playlist objects created.

    Returns:
        ``True`` for an empty reply (``[]`` for list commands), otherwise
        whatever ``build_response`` produces.
    """
    if command == "listall":
        # Flat mapping of every directory and file, never chunked
        return build_record(body)
    if command == "listallinfo":
        # Directory and playlist entries would break the chunk heuristic
        body = _LISTALLINFO_NOISE.sub("", body)

    if not body.strip():
        return [] if command in RETURN_ARRAY else True

    return build_response(command, body, client)


def parse_command_list(
    commands: list[str],
    body: str,
    error: MpdError | None = None,
    client: MpdClient | None = None,
) -> list[Any]:
    """Split a command-list reply into per-command results.

    Args:
        commands: Names of the queued commands, in order.
        body: Reply text, each command's output followed by "list_OK".
        error: The ACK that ended the reply early, if any.
        client: Client bound to any Track or Playlist objects created.

    Returns:
        One parsed result per command with non-empty output. When
        ``error`` is given it is appended after the results of the
        commands that completed; later commands were never run and
        have no entry.
    """
    segments = body.split(_LIST_OK_LINE)
    if error is not None:
        # Output after the last list_OK belongs to the failing command
        segments = segments[:-1]

    names = iter(commands)
    results: list[Any] = []
    for segment in segments:
        command = next(names, "")
        if segment:
            results.append(parse_response(command, segment, client))

    if error is not None:
        results.append(error)
    return results
