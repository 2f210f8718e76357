"""Async MPD client.

This module provides an asyncio-based MPD client. One connection is
shared by the caller and the optional status poller; every command
runs its full write-read-parse round trip under a single lock, because
the protocol is strictly half-duplex.

Example:
    async with MpdClient("192.168.1.100") as client:
        status = await client.status()
        if status.get("state") == "play":
            track = await client.current()
            print(f"Playing: {track.title} by {track.artist}")

        async with client.command_list() as batch:
            await client.clear()
            await client.add("albums/some album")
            await client.play()
        print(batch.results)
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Self

from mpdctrl.api.mpd.errors import MpdConnectionError, MpdError
from mpdctrl.api.mpd.parser import parse_command_list, parse_response
from mpdctrl.api.mpd.protocol import (
    format_command,
    format_command_list,
    is_ack,
    parse_ack,
    parse_greeting,
)
from mpdctrl.api.mpd.types import DispatchOutcome, DispatchResult, Playlist, Range, Track

if TYPE_CHECKING:
    from collections.abc import Callable

    from mpdctrl.core.status_poller import StatusPoller

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6600
CONNECT_TIMEOUT = 5.0


class ConnectionState(StrEnum):
    """Lifecycle of the client's socket."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    # Socket dropped or stream out of sync; reconnect before next command
    ERROR = "error"


class CommandList:
    """Commands queued between ``begin_command_list`` and execution.

    Attributes:
        commands: Names of the queued commands, in order.
        lines: Encoded command lines, in order.
        results: Parsed results, filled in after execution.
    """

    def __init__(self, owner: asyncio.Task[Any] | None) -> None:
        self.owner = owner
        self.commands: list[str] = []
        self.lines: list[str] = []
        self.results: list[Any] = []

    def add(self, command: str, line: str) -> None:
        """Queue one encoded command."""
        self.commands.append(command)
        self.lines.append(line)

    def __len__(self) -> int:
        return len(self.commands)


class MpdClient:
    """Async MPD client.

    Attributes:
        host: MPD server hostname, IP, or Unix socket path.
        port: MPD server port (ignored for Unix sockets).
        password: Optional password for authentication.
        timeout: Bound on opening the socket and reading the greeting.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        password: str = "",
        timeout: float = CONNECT_TIMEOUT,
        callbacks: bool = False,
    ) -> None:
        """Initialize MPD client.

        Args:
            host: MPD server hostname, IP, or Unix socket path.
            port: MPD server port.
            password: Optional password for authentication.
            timeout: Connect and greeting timeout in seconds.
            callbacks: Start the status poller on every ``connect()``.
        """
        self.host = host
        self.port = port
        self.password = password
        self.timeout = timeout
        self._callbacks = callbacks

        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._lock = asyncio.Lock()
        self._state = ConnectionState.DISCONNECTED
        self._version: str = ""
        self._command_list: CommandList | None = None
        self._poller: StatusPoller | None = None

    @property
    def state(self) -> ConnectionState:
        """Return the current connection state."""
        return self._state

    @property
    def connected(self) -> bool:
        """Return True if the socket is believed to be open (no round trip)."""
        return self._state is ConnectionState.CONNECTED

    @property
    def version(self) -> str:
        """Return MPD protocol version from initial handshake."""
        return self._version

    @property
    def is_unix_socket(self) -> bool:
        """Return True if ``host`` names a Unix domain socket.

        Absolute paths, paths under ``~`` and existing relative paths are
        treated as sockets. Anything else is a hostname.
        """
        path = self._socket_path
        return path.startswith("/") or os.path.exists(path)

    @property
    def _socket_path(self) -> str:
        return os.path.expanduser(self.host)

    @property
    def poller(self) -> StatusPoller:
        """Return the status poller bound to this client."""
        if self._poller is None:
            from mpdctrl.core.status_poller import StatusPoller

            self._poller = StatusPoller(self)
        return self._poller

    @property
    def in_command_list(self) -> bool:
        """Return True if the current task is building a command list."""
        batch = self._command_list
        return batch is not None and batch.owner is asyncio.current_task()

    # -------------------------------------------------------------------------
    # Connection lifecycle
    # -------------------------------------------------------------------------

    async def connect(self, callbacks: bool | None = None) -> None:
        """Connect to MPD server.

        Args:
            callbacks: Start the status poller after connecting. Defaults
                to the value given to the constructor.

        Raises:
            MpdConnectionError: If already connected or connection fails.
            MpdError: If authentication fails.
        """
        if self._state in (ConnectionState.CONNECTED, ConnectionState.CONNECTING):
            raise MpdConnectionError("Already connected")

        async with self._lock:
            await self._open()

        if callbacks if callbacks is not None else self._callbacks:
            self.poller.start()

    async def disconnect(self) -> bool:
        """Disconnect from MPD server.

        Stops the status poller, waits for any command in flight, then
        sends ``close`` and closes the socket. A command list opened by
        the calling task is dropped unsent.

        Returns:
            True if a connection was closed, False if already disconnected.
        """
        if self._poller is not None:
            await self._poller.stop()

        if self.in_command_list:
            # The list already holds the lock for this task
            self._command_list = None
        else:
            await self._lock.acquire()

        try:
            if self._state is ConnectionState.DISCONNECTED:
                return False

            if self._writer is not None and self._state is ConnectionState.CONNECTED:
                try:
                    self._writer.write(b"close\n")
                    await self._writer.drain()
                except OSError as e:
                    logger.debug("Expected error sending close to MPD: %s", e)

            await self._close_transport()
            self._reset()
        finally:
            self._lock.release()

        logger.info("Disconnected from MPD")
        return True

    async def reconnect(self) -> None:
        """Close and re-open the connection, keeping the poller running.

        Raises:
            MpdConnectionError: If the new connection fails.
            RuntimeError: If called while building a command list.
        """
        if self.in_command_list:
            raise RuntimeError("Cannot reconnect during a command list")
        async with self._lock:
            await self._reconnect_locked()

    async def is_connected(self) -> bool:
        """Return True only if the daemon answers a ping."""
        if self._state is not ConnectionState.CONNECTED or self.in_command_list:
            return False
        try:
            await self.send_command("ping")
        except (MpdError, OSError) as e:
            logger.debug("MPD ping failed: %s", e)
            return False
        return True

    async def __aenter__(self) -> Self:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, *_: object) -> None:
        """Async context manager exit."""
        await self.disconnect()

    async def _open_streams(self) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        if self.is_unix_socket:
            return await asyncio.open_unix_connection(self._socket_path)
        return await asyncio.open_connection(self.host, self.port)

    @property
    def _address(self) -> str:
        return self._socket_path if self.is_unix_socket else f"{self.host}:{self.port}"

    async def _open(self, reconnecting: bool = False) -> None:
        """Open the socket, read the greeting and authenticate.

        Must be called with the lock held. A failed reconnect leaves the
        client in the ERROR state instead of DISCONNECTED.
        """
        self._state = ConnectionState.CONNECTING
        try:
            self._reader, self._writer = await asyncio.wait_for(
                self._open_streams(),
                timeout=self.timeout,
            )
            greeting = await asyncio.wait_for(self._reader.readline(), timeout=self.timeout)
        except TimeoutError as e:
            await self._fail_open(reconnecting)
            raise MpdConnectionError(f"Connection to {self._address} timed out") from e
        except OSError as e:
            await self._fail_open(reconnecting)
            raise MpdConnectionError(f"Failed to connect to {self._address}: {e}") from e
        except asyncio.CancelledError:
            self._abort()
            raise

        if not greeting:
            await self._fail_open(reconnecting)
            raise MpdConnectionError("Unable to connect (possibly too many connections open)")

        try:
            self._version = parse_greeting(greeting.decode("utf-8", errors="replace"))
        except MpdConnectionError:
            await self._fail_open(reconnecting)
            raise

        self._state = ConnectionState.CONNECTED
        logger.info("Connected to MPD %s at %s", self._version, self._address)

        if self.password:
            result = await self._round_trip("password", (self.password,))
            if result.outcome is not DispatchOutcome.OK:
                await self._fail_open(reconnecting)
                result.unwrap()

    async def _fail_open(self, reconnecting: bool) -> None:
        await self._close_transport()
        if reconnecting:
            self._state = ConnectionState.ERROR
        else:
            self._state = ConnectionState.DISCONNECTED
            self._version = ""

    async def _reconnect_locked(self) -> None:
        logger.info("Reconnecting to MPD at %s", self._address)
        await self._close_transport()
        await self._open(reconnecting=True)

    async def _close_transport(self) -> None:
        writer = self._writer
        self._writer = None
        self._reader = None
        if writer is None:
            return
        try:
            writer.close()
            await writer.wait_closed()
        except (OSError, asyncio.CancelledError) as e:
            logger.debug("Expected error during MPD socket close: %s", e)

    def _abort(self) -> None:
        """Drop the socket after an interrupted round trip."""
        if self._writer is not None:
            self._writer.close()
        self._writer = None
        self._reader = None
        self._state = ConnectionState.ERROR

    def _reset(self) -> None:
        self._reader = None
        self._writer = None
        self._version = ""
        self._state = ConnectionState.DISCONNECTED

    # -------------------------------------------------------------------------
    # Command dispatch
    # -------------------------------------------------------------------------

    async def send_command(self, command: str, *args: Any) -> Any:
        """Send a command and return its parsed reply.

        Inside a command list owned by the calling task the command is
        only queued and None is returned.

        Args:
            command: MPD command name.
            *args: Arguments (str, int, bool, Range, Track, Playlist,
                search-query mapping; None is left out).

        Returns:
            The parsed reply (see ``parse_response``).

        Raises:
            MpdConnectionError: If not connected, or the connection
                drops again after one reconnect.
            MpdError: If the daemon answers with an ACK.
        """
        if self._state is ConnectionState.DISCONNECTED:
            raise MpdConnectionError("Not connected")

        if self.in_command_list:
            assert self._command_list is not None
            self._command_list.add(command, format_command(command, *args))
            return None

        async with self._lock:
            return await self._dispatch(command, (command, args))

    async def _dispatch(self, label: str, request: tuple[str, tuple[Any, ...]] | CommandList) -> Any:
        """Run one request with the reconnect-once policy.

        Must be called with the lock held.
        """
        if self._state is ConnectionState.DISCONNECTED:
            raise MpdConnectionError("Not connected")

        retried = False
        if self._state is not ConnectionState.CONNECTED:
            await self._reconnect_locked()
            retried = True

        result = await self._send_request(request)
        if result.outcome is DispatchOutcome.DISCONNECTED and not retried:
            logger.info("MPD connection lost, retrying %s once", label)
            await self._reconnect_locked()
            result = await self._send_request(request)

        return result.unwrap()

    async def _send_request(self, request: tuple[str, tuple[Any, ...]] | CommandList) -> DispatchResult:
        if isinstance(request, CommandList):
            return await self._round_trip_list(request)
        command, args = request
        return await self._round_trip(command, args)

    async def _round_trip(self, command: str, args: tuple[Any, ...]) -> DispatchResult:
        line = format_command(command, *args)
        logger.debug("MPD command: %s", line)

        def decode(body: str, error: MpdError | None) -> DispatchResult:
            if error is not None:
                return DispatchResult.failed(error)
            return DispatchResult.ok(parse_response(command, body, self))

        return await self._exchange(f"{line}\n", decode)

    async def _round_trip_list(self, batch: CommandList) -> DispatchResult:
        logger.debug("MPD command list: %s", ", ".join(batch.commands))

        def decode(body: str, error: MpdError | None) -> DispatchResult:
            results = parse_command_list(batch.commands, body, error, self)
            if error is not None:
                error.results = results[:-1]
                return DispatchResult.failed(error)
            return DispatchResult.ok(results)

        return await self._exchange(format_command_list(batch.lines), decode)

    async def _exchange(
        self,
        request: str,
        decode: Callable[[str, MpdError | None], DispatchResult],
    ) -> DispatchResult:
        """Write a request and read its reply.

        A dropped connection is reported as a DISCONNECTED result rather
        than raised; cancellation mid-exchange leaves the client in the
        ERROR state so the next command reconnects.
        """
        if self._writer is None or self._reader is None:
            return DispatchResult.disconnected()

        try:
            self._writer.write(request.encode("utf-8"))
            await self._writer.drain()
            body, error = await self._read_reply()
        except (OSError, EOFError) as e:
            logger.info("MPD connection lost: %s", e)
            await self._close_transport()
            self._state = ConnectionState.ERROR
            return DispatchResult.disconnected()
        except asyncio.CancelledError:
            self._abort()
            raise

        return decode(body, error)

    async def _read_line(self) -> str:
        """Read a single line from MPD."""
        if not self._reader:
            raise MpdConnectionError("Not connected")
        line = await self._reader.readline()
        if not line:
            raise MpdConnectionError("Connection closed")
        return line.decode("utf-8", errors="replace")

    async def _read_reply(self) -> tuple[str, MpdError | None]:
        """Read response lines until OK or ACK.

        Returns:
            The body (all lines before OK/ACK) and the ACK error, if any.
        """
        lines: list[str] = []
        while True:
            line = await self._read_line()
            if line == "OK\n":
                return "".join(lines), None
            if is_ack(line):
                return "".join(lines), parse_ack(line)
            lines.append(line)

    async def _query(self, command: str, *args: Any) -> Any:
        """Send a command whose reply the caller needs right away."""
        if self.in_command_list:
            raise RuntimeError("Cannot read from the server during a command list")
        return await self.send_command(command, *args)

    # -------------------------------------------------------------------------
    # Command lists
    # -------------------------------------------------------------------------

    async def begin_command_list(self) -> CommandList:
        """Start queueing commands into one batch.

        The batch holds the connection lock until ``execute_command_list``,
        so other tasks' commands wait for it.

        Raises:
            MpdConnectionError: If not connected.
            RuntimeError: If this task already has an open command list.
        """
        if self._state is ConnectionState.DISCONNECTED:
            raise MpdConnectionError("Not connected")
        if self.in_command_list:
            raise RuntimeError("Command list already active")
        await self._lock.acquire()
        self._command_list = CommandList(asyncio.current_task())
        return self._command_list

    async def execute_command_list(self) -> list[Any]:
        """Send the queued batch and return per-command results.

        Commands whose reply was empty have no entry in the results.

        Raises:
            MpdError: The first failing command's error; its ``results``
                holds what the commands before it returned. Commands after
                the failing one are not run by the daemon.
            RuntimeError: If no command list is active for this task.
        """
        batch = self._command_list
        if batch is None or not self.in_command_list:
            raise RuntimeError("No active command list")
        try:
            if batch:
                batch.results = await self._dispatch("command list", batch)
        finally:
            self._command_list = None
            self._lock.release()
        return batch.results

    async def abort_command_list(self) -> None:
        """Discard the queued batch without sending it."""
        if self.in_command_list:
            self._command_list = None
            self._lock.release()

    @asynccontextmanager
    async def command_list(self) -> AsyncIterator[CommandList]:
        """Queue every command issued inside the block into one batch.

        The batch is executed when the block exits normally and dropped
        if the block raises.
        """
        batch = await self.begin_command_list()
        try:
            yield batch
        except BaseException:
            await self.abort_command_list()
            raise
        await self.execute_command_list()

    # -------------------------------------------------------------------------
    # Status & Info Commands
    # -------------------------------------------------------------------------

    async def status(self) -> dict[str, Any]:
        """Get current player status (state, volume, time, audio, ...)."""
        return await self._query("status")

    async def stats(self) -> dict[str, Any]:
        """Get database statistics (artists, albums, songs, uptime, ...)."""
        return await self._query("stats")

    async def current(self) -> Track | None:
        """Get the current song, or None if nothing is loaded."""
        record = await self._query("currentsong")
        if not isinstance(record, dict):
            return None
        return Track.from_record(record, self)

    async def ping(self) -> Any:
        """Ping MPD server to check connection."""
        return await self.send_command("ping")

    async def password(self, password: str) -> Any:
        """Authenticate with a plaintext password."""
        return await self.send_command("password", password)

    async def kill(self) -> Any:
        """Stop the MPD process."""
        return await self.send_command("kill")

    async def commands(self) -> list[str]:
        """Return the commands the current user may run."""
        return await self._query("commands")

    async def notcommands(self) -> list[str]:
        """Return the commands the current user may not run."""
        return await self._query("notcommands")

    async def tagtypes(self) -> list[str]:
        """Return the tag types the daemon reports."""
        return await self._query("tagtypes")

    async def urlhandlers(self) -> list[str]:
        """Return the supported URL schemes."""
        return await self._query("urlhandlers")

    async def decoders(self) -> list[dict[str, Any]]:
        """Return decoder plugins with their suffixes and MIME types."""
        return await self._query("decoders")

    async def idle(self, *subsystems: str) -> list[str]:
        """Wait for changes in specified subsystems.

        This blocks the connection (and the poller) until something
        changes.

        Args:
            *subsystems: Subsystems to watch (player, mixer, options, etc.).
                         If empty, watches all subsystems.

        Returns:
            List of changed subsystems.
        """
        changed = await self._query("idle", *subsystems)
        if changed is True:
            return []
        if isinstance(changed, list):
            return changed
        return [changed]

    # -------------------------------------------------------------------------
    # Playback Control
    # -------------------------------------------------------------------------

    async def play(self, pos: int | None = None) -> Any:
        """Start playback, optionally at a queue position."""
        return await self.send_command("play", pos)

    async def playid(self, songid: int | None = None) -> Any:
        """Start playback at a song id."""
        return await self.send_command("playid", songid)

    async def pause(self, state: bool | None = None) -> Any:
        """Pause or resume playback.

        Args:
            state: True to pause, False to resume, None to toggle.
        """
        return await self.send_command("pause", state)

    async def stop(self) -> Any:
        """Stop playback."""
        return await self.send_command("stop")

    async def next(self) -> Any:
        """Skip to next track."""
        return await self.send_command("next")

    async def previous(self) -> Any:
        """Skip to previous track."""
        return await self.send_command("previous")

    async def seek(self, time: float | str, pos: int | None = None, songid: int | None = None) -> Any:
        """Seek within a song.

        Args:
            time: Position in seconds (``"+5"``/``"-5"`` for relative
                seeks in the current song).
            pos: Queue position of the song to seek in.
            songid: Song id to seek in (used when ``pos`` is None).
        """
        if pos is not None:
            return await self.send_command("seek", pos, time)
        if songid is not None:
            return await self.send_command("seekid", songid, time)
        return await self.send_command("seekcur", time)

    # -------------------------------------------------------------------------
    # Playback Options
    # -------------------------------------------------------------------------

    async def setvol(self, volume: int) -> Any:
        """Set volume (clamped to 0-100)."""
        return await self.send_command("setvol", max(0, min(100, volume)))

    async def repeat(self, state: bool = True) -> Any:
        """Enable or disable repeat."""
        return await self.send_command("repeat", state)

    async def random(self, state: bool = True) -> Any:
        """Enable or disable random."""
        return await self.send_command("random", state)

    async def single(self, state: bool | str = True) -> Any:
        """Enable or disable single mode (``"oneshot"`` also accepted)."""
        return await self.send_command("single", state)

    async def consume(self, state: bool | str = True) -> Any:
        """Enable or disable consume mode (``"oneshot"`` also accepted)."""
        return await self.send_command("consume", state)

    async def crossfade(self, seconds: int) -> Any:
        """Set crossfade between songs."""
        return await self.send_command("crossfade", seconds)

    async def replay_gain_mode(self, mode: str) -> Any:
        """Set replay gain mode (off, track, album, auto)."""
        return await self.send_command("replay_gain_mode", mode)

    async def replay_gain_status(self) -> Any:
        """Return the current replay gain mode."""
        return await self._query("replay_gain_status")

    # -------------------------------------------------------------------------
    # Queue
    # -------------------------------------------------------------------------

    async def queue(self, songs: int | Range | range | None = None) -> list[Track]:
        """Return the queue, or part of it."""
        return await self._query("playlistinfo", songs)

    async def add(self, path: str | Track) -> Any:
        """Add a file or directory (recursively) to the queue."""
        return await self.send_command("add", path)

    async def addid(self, path: str | Track, pos: int | None = None) -> Any:
        """Add one song to the queue and return its song id."""
        return await self.send_command("addid", path, pos)

    async def clear(self) -> Any:
        """Clear the queue."""
        return await self.send_command("clear")

    async def delete(self, songs: int | Range | range) -> Any:
        """Delete a song or range of songs from the queue."""
        return await self.send_command("delete", songs)

    async def deleteid(self, songid: int) -> Any:
        """Delete a song from the queue by id."""
        return await self.send_command("deleteid", songid)

    async def move(self, songs: int | Range | range, to: int) -> Any:
        """Move a song or range of songs to a new queue position."""
        return await self.send_command("move", songs, to)

    async def moveid(self, songid: int, to: int) -> Any:
        """Move a song, by id, to a new queue position."""
        return await self.send_command("moveid", songid, to)

    async def shuffle(self, songs: Range | range | None = None) -> Any:
        """Shuffle the queue, or part of it."""
        return await self.send_command("shuffle", songs)

    async def queue_changes(self, version: int) -> list[Track]:
        """Return songs changed in the queue since ``version``."""
        return await self._query("plchanges", version)

    async def song_priority(self, priority: int, songs: int | Range | range) -> Any:
        """Set the priority of queued songs (0-255)."""
        return await self.send_command("prio", priority, songs)

    # -------------------------------------------------------------------------
    # Database
    # -------------------------------------------------------------------------

    async def files(self, path: str | None = None) -> dict[str, Any]:
        """Return every directory and file below ``path``."""
        return await self._query("listall", path)

    async def songs(self, path: str | None = None) -> list[Track]:
        """Return every song below ``path`` with its metadata."""
        return await self._query("listallinfo", path)

    async def find(self, query: Mapping[str, Any]) -> list[Track]:
        """Find songs whose tags match exactly."""
        return await self._query("find", query)

    async def search(self, query: Mapping[str, Any]) -> list[Track]:
        """Find songs whose tags contain the given values (case-insensitive)."""
        return await self._query("search", query)

    async def where(self, query: Mapping[str, Any], strict: bool = True, add: bool = False) -> Any:
        """Search the database, optionally adding the matches to the queue.

        Args:
            query: Tag/value pairs.
            strict: Exact match (``find``) instead of substring (``search``).
            add: Add matches to the queue instead of returning them.
        """
        command = ("find" if strict else "search") + ("add" if add else "")
        return await self.send_command(command, query)

    async def list_values(self, tag: str, query: Mapping[str, Any] | None = None) -> list[Any]:
        """Return the distinct values of ``tag``."""
        return await self._query("list", tag, query)

    async def update(self, path: str | None = None) -> Any:
        """Start a database update and return its job id."""
        return await self.send_command("update", path)

    async def rescan(self, path: str | None = None) -> Any:
        """Like ``update`` but also rescans unmodified files."""
        return await self.send_command("rescan", path)

    # -------------------------------------------------------------------------
    # Stored Playlists
    # -------------------------------------------------------------------------

    async def playlists(self) -> list[Playlist]:
        """Return the stored playlists."""
        return await self._query("listplaylists")

    async def save(self, name: str) -> Any:
        """Save the queue as a stored playlist."""
        return await self.send_command("save", name)

    # -------------------------------------------------------------------------
    # Outputs
    # -------------------------------------------------------------------------

    async def outputs(self) -> list[dict[str, Any]]:
        """Return the audio outputs."""
        return await self._query("outputs")

    async def enableoutput(self, outputid: int) -> Any:
        """Enable an output."""
        return await self.send_command("enableoutput", outputid)

    async def disableoutput(self, outputid: int) -> Any:
        """Disable an output."""
        return await self.send_command("disableoutput", outputid)

    async def toggleoutput(self, outputid: int) -> Any:
        """Toggle an output."""
        return await self.send_command("toggleoutput", outputid)

    # -------------------------------------------------------------------------
    # Stickers
    # -------------------------------------------------------------------------

    async def sticker_get(self, kind: str, uri: str, name: str) -> str:
        """Return the value of one sticker."""
        reply = await self._query("sticker", "get", kind, uri, name)
        return str(reply).split("=", 1)[-1]

    async def sticker_set(self, kind: str, uri: str, name: str, value: Any) -> Any:
        """Set a sticker value."""
        return await self.send_command("sticker", "set", kind, uri, name, value)

    async def sticker_delete(self, kind: str, uri: str, name: str | None = None) -> Any:
        """Delete one sticker, or all stickers of an object."""
        return await self.send_command("sticker", "delete", kind, uri, name)

    async def sticker_list(self, kind: str, uri: str) -> dict[str, str]:
        """Return all stickers of an object as a dict."""
        reply = await self._query("sticker", "list", kind, uri)
        if reply is True:
            return {}
        entries = reply if isinstance(reply, list) else [reply]
        return dict(str(entry).split("=", 1) for entry in entries)

    async def sticker_find(self, kind: str, uri: str, name: str) -> list[dict[str, Any]]:
        """Find objects below ``uri`` that have sticker ``name``."""
        reply = await self._query("sticker", "find", kind, uri, name)
        if reply is True:
            return []
        return reply if isinstance(reply, list) else [reply]

    # -------------------------------------------------------------------------
    # Client-to-client Channels
    # -------------------------------------------------------------------------

    async def subscribe(self, channel: str) -> Any:
        """Subscribe to a channel."""
        return await self.send_command("subscribe", channel)

    async def unsubscribe(self, channel: str) -> Any:
        """Unsubscribe from a channel."""
        return await self.send_command("unsubscribe", channel)

    async def channels(self) -> list[str]:
        """Return channels that have at least one subscriber."""
        return await self._query("channels")

    async def readmessages(self) -> list[dict[str, Any]]:
        """Return and consume messages for subscribed channels."""
        return await self._query("readmessages")

    async def sendmessage(self, channel: str, text: str) -> Any:
        """Send a message to a channel."""
        return await self.send_command("sendmessage", channel, text)

