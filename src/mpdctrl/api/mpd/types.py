"""MPD protocol data types.

This module defines the domain objects built from MPD responses
(tracks and stored playlists), the range argument type, and the
result type used internally by command dispatch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from mpdctrl.api.mpd.errors import MpdConnectionError, MpdError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from mpdctrl.api.mpd.client import MpdClient

TagValue = str | list[str] | None

_CORE_FIELDS = ("file", "title", "artist", "album", "albumartist", "time")


@dataclass(frozen=True)
class Range:
    """Song range argument (``start:end`` on the wire).

    Attributes:
        start: First position.
        end: Last position, or -1 for "until the end".
        exclusive: True if ``end`` itself is not part of the range.
    """

    start: int
    end: int = -1
    exclusive: bool = False

    @property
    def is_open(self) -> bool:
        """Return True if the range has no upper bound."""
        return self.end == -1


@dataclass
class Track:
    """A song as reported by MPD.

    The tags most callers need are typed attributes. Every other field
    the daemon sends is kept in ``extra``, in wire order.

    Attributes:
        file: URI relative to the music directory, or a stream URL.
        title: Title tag (a list if the tag is repeated).
        artist: Artist tag (a list if the tag is repeated).
        album: Album tag.
        albumartist: Album artist tag.
        time: ``(elapsed, total)`` pair; elapsed is None for library songs.
        extra: All other fields (pos, id, genre, duration, ...).
        client: Client used by ``comments()``.
    """

    file: str | None = None
    title: TagValue = None
    artist: TagValue = None
    album: TagValue = None
    albumartist: TagValue = None
    time: tuple[int | None, int | None] | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    client: MpdClient | None = field(default=None, compare=False, repr=False)
    _comments: dict[str, Any] | None = field(default=None, init=False, compare=False, repr=False)

    @classmethod
    def from_record(cls, record: Mapping[str, Any], client: MpdClient | None = None) -> Track:
        """Build a Track from a parsed response record."""
        data = dict(record)
        core = {name: data.pop(name) for name in _CORE_FIELDS if name in data}
        return cls(**core, extra=data, client=client)

    @property
    def elapsed(self) -> int | None:
        """Return elapsed seconds, if known."""
        return self.time[0] if self.time else None

    @property
    def track_length(self) -> int | None:
        """Return total length in seconds, if known."""
        return self.time[-1] if self.time else None

    @property
    def length(self) -> str:
        """Return the length formatted as ``m:ss`` (``--:--`` if unknown)."""
        total = self.track_length
        if total is None:
            return "--:--"
        return f"{total // 60}:{total % 60:02d}"

    def get(self, key: str, default: Any = None) -> Any:
        """Return a field by wire name, core or extra."""
        if key in _CORE_FIELDS:
            value = getattr(self, key)
            return default if value is None else value
        return self.extra.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a field by wire name, core or extra."""
        if key in _CORE_FIELDS:
            setattr(self, key, value)
        else:
            self.extra[key] = value

    def to_dict(self) -> dict[str, Any]:
        """Return all fields as a flat dict."""
        result: dict[str, Any] = {name: getattr(self, name) for name in _CORE_FIELDS}
        result.update(self.extra)
        return result

    async def comments(self) -> dict[str, Any]:
        """Return the comment tags stored in the file (read once, then cached)."""
        if self._comments is None:
            if self.client is None:
                raise MpdConnectionError(f"Track {self.file!r} is not bound to a client")
            reply = await self.client.send_command("readcomments", self.file)
            self._comments = reply if isinstance(reply, dict) else {}
        return self._comments


@dataclass
class Playlist:
    """A stored playlist.

    The name is always text, even when it looks like a number.
    Operations go through the client the playlist was created with.
    """

    name: str
    last_modified: datetime | None = None
    client: MpdClient | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        self.name = str(self.name)

    @classmethod
    def from_record(cls, record: Mapping[str, Any], client: MpdClient | None = None) -> Playlist:
        """Build a Playlist from a ``listplaylists`` record."""
        return cls(
            name=str(record.get("playlist", "")),
            last_modified=record.get("last-modified"),
            client=client,
        )

    async def _send(self, command: str, *args: Any) -> Any:
        if self.client is None:
            raise MpdConnectionError(f"Playlist {self.name!r} is not bound to a client")
        return await self.client.send_command(command, self, *args)

    async def songs(self) -> list[Track]:
        """Return the playlist's songs with their metadata."""
        return await self._send("listplaylistinfo")

    async def files(self) -> list[str]:
        """Return the playlist's song URIs."""
        return await self._send("listplaylist")

    async def load(self, songs: Range | range | None = None) -> Any:
        """Append the playlist (or a range of it) to the queue."""
        return await self._send("load", songs)

    async def add(self, uri: str | Track) -> Any:
        """Append a song to the playlist, creating it if needed."""
        return await self._send("playlistadd", uri)

    async def searchadd(self, query: Mapping[str, Any]) -> Any:
        """Search the database and append matches to the playlist."""
        return await self._send("searchaddpl", query)

    async def clear(self) -> Any:
        """Remove every song from the playlist."""
        return await self._send("playlistclear")

    async def delete(self, pos: int) -> Any:
        """Remove the song at ``pos``."""
        return await self._send("playlistdelete", pos)

    async def move(self, from_pos: int, to_pos: int) -> Any:
        """Move the song at ``from_pos`` to ``to_pos``."""
        return await self._send("playlistmove", from_pos, to_pos)

    async def rename(self, new_name: str) -> Any:
        """Rename the playlist."""
        result = await self._send("rename", new_name)
        self.name = str(new_name)
        return result

    async def destroy(self) -> Any:
        """Delete the playlist from the playlist directory."""
        return await self._send("rm")


class DispatchOutcome(Enum):
    """How a single command round trip ended."""

    OK = "ok"
    DISCONNECTED = "disconnected"
    ERROR = "error"


@dataclass(frozen=True)
class DispatchResult:
    """Result of one round trip on the socket.

    ``DISCONNECTED`` is recoverable (the client reconnects once and
    retries); ``ERROR`` carries the daemon's ACK and is terminal.
    """

    outcome: DispatchOutcome
    value: Any = None
    error: MpdError | None = None

    @classmethod
    def ok(cls, value: Any) -> DispatchResult:
        """Build a success result."""
        return cls(DispatchOutcome.OK, value=value)

    @classmethod
    def disconnected(cls) -> DispatchResult:
        """Build a recoverable-disconnect result."""
        return cls(DispatchOutcome.DISCONNECTED)

    @classmethod
    def failed(cls, error: MpdError) -> DispatchResult:
        """Build a terminal error result."""
        return cls(DispatchOutcome.ERROR, error=error)

    def unwrap(self) -> Any:
        """Return the value or raise the carried error."""
        if self.outcome is DispatchOutcome.ERROR and self.error is not None:
            raise self.error
        if self.outcome is DispatchOutcome.DISCONNECTED:
            raise MpdConnectionError("Connection closed")
        return self.value
