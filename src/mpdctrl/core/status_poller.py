"""Background status polling with per-field change events.

The poller repeatedly takes a status snapshot through the shared
``MpdClient``, compares it with the previous one, and publishes one
``StatusChange`` per field that differs. Consumers either register a
callback for specific fields (``on``) or iterate over a queue of
changes (``listen``).

Example:
    poller = client.poller
    poller.on(StatusEvent.VOLUME, lambda volume: print(f"Volume: {volume}"))
    poller.start()

    async for change in poller.listen(StatusEvent.SONG):
        print(change.values[0])
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable
from contextlib import suppress
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, TypeVar

from mpdctrl.api.mpd.errors import MpdError
from mpdctrl.api.mpd.types import Track

if TYPE_CHECKING:
    from mpdctrl.api.mpd.client import MpdClient

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.1  # seconds
DEFAULT_RECONNECT_DELAY = 2.0  # seconds

StatusSnapshot = dict[str, Any]
ChangeHandler = Callable[..., Any]

_T = TypeVar("_T")
_CLOSED = object()


class StatusEvent(StrEnum):
    """Fields of a status snapshot that produce change events."""

    CONNECTION = "connection"
    SONG = "song"
    STATE = "state"
    VOLUME = "volume"
    REPEAT = "repeat"
    RANDOM = "random"
    SINGLE = "single"
    CONSUME = "consume"
    PLAYLIST = "playlist"
    PLAYLISTLENGTH = "playlistlength"
    SONGID = "songid"
    NEXTSONG = "nextsong"
    NEXTSONGID = "nextsongid"
    TIME = "time"
    ELAPSED = "elapsed"
    DURATION = "duration"
    BITRATE = "bitrate"
    XFADE = "xfade"
    MIXRAMPDB = "mixrampdb"
    MIXRAMPDELAY = "mixrampdelay"
    AUDIO = "audio"
    UPDATING_DB = "updating_db"
    ERROR = "error"
    PARTITION = "partition"


@dataclass(frozen=True)
class StatusChange:
    """One changed field between two snapshots.

    Attributes:
        field: Snapshot key that changed.
        values: New value; tuples (``time``, ``audio``) are spread
            positionally, everything else is a 1-tuple.
    """

    field: str
    values: tuple[Any, ...]

    @property
    def event(self) -> StatusEvent | None:
        """Return the typed event, or None for fields not in StatusEvent."""
        try:
            return StatusEvent(self.field)
        except ValueError:
            return None

    @property
    def value(self) -> Any:
        """Return the value, unspread."""
        return self.values[0] if len(self.values) == 1 else self.values


class Subscription:
    """Handle for a callback or queue registered with a StatusPoller."""

    def __init__(
        self,
        poller: StatusPoller,
        events: frozenset[str],
        handler: ChangeHandler | None = None,
        maxsize: int = 0,
    ) -> None:
        self._poller = poller
        self._events = events
        self._handler = handler
        self._queue: asyncio.Queue[Any] | None = None if handler else asyncio.Queue(maxsize)
        self.active = True

    def matches(self, change: StatusChange) -> bool:
        """Return True if this subscription wants ``change``."""
        return not self._events or change.field in self._events

    def deliver(self, change: StatusChange) -> None:
        """Hand a change to the callback or queue."""
        if self._handler is not None:
            try:
                self._handler(*change.values)
            except Exception:  # noqa: BLE001
                logger.exception("Status handler for %s failed", change.field)
            return
        assert self._queue is not None
        try:
            self._queue.put_nowait(change)
        except asyncio.QueueFull:
            logger.warning("Status listener queue full, dropping %s change", change.field)

    def unsubscribe(self) -> None:
        """Stop receiving changes; ends any ``async for`` over this handle."""
        if not self.active:
            return
        self.active = False
        self._poller._remove(self)
        if self._queue is not None:
            with suppress(asyncio.QueueFull):
                self._queue.put_nowait(_CLOSED)

    def __aiter__(self) -> Subscription:
        if self._queue is None:
            raise TypeError("Callback subscriptions are not iterable")
        return self

    async def __anext__(self) -> StatusChange:
        assert self._queue is not None
        item = await self._queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        return item


def _same(old: Any, new: Any) -> bool:
    if isinstance(old, float) and isinstance(new, float) and math.isnan(old) and math.isnan(new):
        return True
    return bool(old == new)


def diff(old: StatusSnapshot, new: StatusSnapshot) -> list[StatusChange]:
    """Return one change per key of ``new`` whose value differs from ``old``."""
    changes: list[StatusChange] = []
    for key, value in new.items():
        if _same(old.get(key), value):
            continue
        values = tuple(value) if isinstance(value, tuple | list) else (value,)
        changes.append(StatusChange(key, values))
    return changes


class StatusPoller:
    """Poll MPD status in a background task and publish field changes.

    The task is cancelled on ``stop()``, so shutdown does not wait for
    the current sleep; a command interrupted mid-read leaves the client
    to reconnect before its next command.
    """

    def __init__(
        self,
        client: MpdClient,
        interval: float = DEFAULT_POLL_INTERVAL,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
    ) -> None:
        """Initialize the poller.

        Args:
            client: Client whose connection is polled.
            interval: Delay between polls in seconds.
            reconnect_delay: Extra delay before reconnecting after the
                connection is found down.
        """
        self._client = client
        self.interval = interval
        self.reconnect_delay = reconnect_delay

        self._task: asyncio.Task[None] | None = None
        self._stop_requested = False
        self._previous: StatusSnapshot = {}
        self._subscriptions: list[Subscription] = []

    @property
    def running(self) -> bool:
        """Return True while the polling task is alive."""
        return self._task is not None and not self._task.done()

    @property
    def last_snapshot(self) -> StatusSnapshot:
        """Return the most recent snapshot (empty before the first poll)."""
        return self._previous

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def on(self, event: StatusEvent | str, handler: ChangeHandler) -> Subscription:
        """Call ``handler(*values)`` whenever ``event`` changes."""
        subscription = Subscription(self, frozenset({str(event)}), handler=handler)
        self._subscriptions.append(subscription)
        return subscription

    def listen(self, *events: StatusEvent | str, maxsize: int = 0) -> Subscription:
        """Return an async iterator of changes (all fields if none given)."""
        subscription = Subscription(self, frozenset(str(e) for e in events), maxsize=maxsize)
        self._subscriptions.append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        with suppress(ValueError):
            self._subscriptions.remove(subscription)

    def publish(self, changes: list[StatusChange]) -> None:
        """Deliver changes to every matching subscription."""
        for change in changes:
            for subscription in list(self._subscriptions):
                if subscription.matches(change):
                    subscription.deliver(change)

    # -------------------------------------------------------------------------
    # Polling
    # -------------------------------------------------------------------------

    async def _best_effort(self, call: Awaitable[_T], default: _T) -> _T:
        try:
            return await call
        except (MpdError, OSError) as e:
            logger.debug("Status query failed: %s", e)
            return default
        except Exception:  # noqa: BLE001
            logger.exception("Status query failed")
            return default

    async def snapshot(self) -> StatusSnapshot:
        """Take a status snapshot.

        Every query is best-effort: a failure counts as "no data". The
        ``time`` and ``audio`` fields are always present with a fixed
        arity so listeners get the same number of values each time.
        """
        connected = await self._best_effort(self._client.is_connected(), False)
        status: Any = {}
        song: Track | None = None
        if connected:
            status = await self._best_effort(self._client.status(), {})
            song = await self._best_effort(self._client.current(), None)

        snapshot: StatusSnapshot = dict(status) if isinstance(status, dict) else {}
        snapshot["connection"] = connected
        snapshot.setdefault("time", (None, None))  # elapsed, total
        snapshot.setdefault("audio", (None, None, None))  # rate, bits, channels
        snapshot.setdefault("updating_db", None)
        snapshot["song"] = song
        return snapshot

    async def poll_once(self) -> list[StatusChange]:
        """Take one snapshot, publish its changes and return them."""
        snapshot = await self.snapshot()
        changes = diff(self._previous, snapshot)
        self._previous = snapshot
        self.publish(changes)
        return changes

    def start(self) -> None:
        """Start polling (no-op if already running)."""
        if self.running:
            return
        self._stop_requested = False
        self._previous = {}
        self._task = asyncio.create_task(self._run(), name="mpd-status-poller")
        logger.info("Status poller started")

    async def stop(self) -> None:
        """Stop polling and end every ``listen()`` iterator."""
        task = self._task
        if task is None:
            return
        self._stop_requested = True
        if task is asyncio.current_task():
            # Asked from inside the loop: finish after this iteration
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception:  # noqa: BLE001
            logger.exception("Status poller task failed")
        self._task = None
        for subscription in list(self._subscriptions):
            if subscription._queue is not None:
                subscription.unsubscribe()
        logger.info("Status poller stopped")

    async def _run(self) -> None:
        while not self._stop_requested:
            await self.poll_once()
            await asyncio.sleep(self.interval)

            if self._previous.get("connection") or self._stop_requested:
                continue
            await asyncio.sleep(self.reconnect_delay)
            try:
                await self._client.reconnect()
            except (MpdError, OSError) as e:
                logger.debug("MPD reconnect failed: %s", e)
            except Exception:  # noqa: BLE001
                logger.exception("MPD reconnect failed")
