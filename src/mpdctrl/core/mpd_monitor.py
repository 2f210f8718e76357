"""Qt bridge for MPD status changes.

This module provides a QObject that runs an MpdClient and its
StatusPoller on an asyncio event loop in a background thread, and
re-emits every status change as a Qt signal so widgets can react in
the main thread.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, Signal

from mpdctrl.api.mpd import MpdClient, MpdConnectionError, MpdError
from mpdctrl.core.status_poller import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RECONNECT_DELAY,
    StatusChange,
    StatusEvent,
)

if TYPE_CHECKING:
    from mpdctrl.core.config import ConfigManager

logger = logging.getLogger(__name__)

_STOP_TIMEOUT = 5.0  # seconds


class MpdMonitor(QObject):
    """Monitor MPD and emit Qt signals for every status change.

    Example:
        monitor = MpdMonitor("192.168.1.100")
        monitor.track_changed.connect(lambda t: print(f"Now playing: {t.title if t else '-'}"))
        monitor.status_changed.connect(lambda field, values: print(field, *values))
        monitor.start()
    """

    # Emitted for every changed snapshot field
    # Parameters: (field: str, values: tuple)
    status_changed = Signal(str, object)

    # Emitted when the current track changes
    # Parameter: Track | None (None if no track)
    track_changed = Signal(object)

    # Emitted on connection state change
    # Parameter: bool (True = connected)
    connection_changed = Signal(bool)

    # Emitted on error
    # Parameter: str (error message)
    error_occurred = Signal(str)

    def __init__(
        self,
        host: str,
        port: int = 6600,
        password: str = "",
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        parent: QObject | None = None,
    ) -> None:
        """Initialize the MPD monitor.

        Args:
            host: MPD server hostname, IP, or Unix socket path.
            port: MPD server port.
            password: Optional password for authentication.
            poll_interval: Interval between status polls in seconds.
            reconnect_delay: Delay between connection attempts in seconds.
            parent: Optional parent QObject.
        """
        super().__init__(parent)
        self._host = host
        self._port = port
        self._password = password
        self._poll_interval = poll_interval
        self._reconnect_delay = reconnect_delay

        self._running = False
        self._thread: threading.Thread | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._task: asyncio.Task[None] | None = None
        self._ready = threading.Event()

    @classmethod
    def from_config(cls, config: ConfigManager, parent: QObject | None = None) -> MpdMonitor:
        """Create a monitor from saved settings."""
        settings = config.load()
        return cls(
            settings.host,
            port=settings.port,
            password=settings.password,
            poll_interval=settings.poll_interval,
            reconnect_delay=settings.reconnect_delay,
            parent=parent,
        )

    @property
    def host(self) -> str:
        """Return the MPD host."""
        return self._host

    @property
    def port(self) -> int:
        """Return the MPD port."""
        return self._port

    @property
    def is_running(self) -> bool:
        """Return True while the background thread is active."""
        return self._running

    def set_host(self, host: str, port: int = 6600) -> None:
        """Update the MPD host; takes effect on the next start()."""
        self._host = host
        self._port = port

    def start(self) -> None:
        """Start the monitor.

        Returns once the background loop exists, so an immediate
        ``stop()`` can cancel it.
        """
        if not self._running:
            self._running = True
            self._ready.clear()
            self._thread = threading.Thread(target=self._run_loop, daemon=True)
            self._thread.start()
            self._ready.wait(timeout=_STOP_TIMEOUT)
            logger.info("MpdMonitor started for %s:%d", self._host, self._port)

    def stop(self) -> None:
        """Stop the monitor, cancelling any pending poll or sleep."""
        self._running = False
        loop, task = self._loop, self._task
        if loop is not None and task is not None and not loop.is_closed():
            loop.call_soon_threadsafe(task.cancel)
        if self._thread:
            self._thread.join(timeout=_STOP_TIMEOUT)
            self._thread = None
            logger.info("MpdMonitor stopped")

    def _run_loop(self) -> None:
        """Background thread: run asyncio event loop."""
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        try:
            self._task = loop.create_task(self._monitor_loop())
            self._ready.set()
            loop.run_until_complete(self._task)
        except asyncio.CancelledError:
            logger.debug("MpdMonitor loop cancelled")
        finally:
            self._ready.set()
            self._task = None
            self._loop = None
            loop.close()

    async def _connect(self, client: MpdClient) -> bool:
        """Connect, retrying until it works or the monitor stops."""
        while self._running:
            try:
                await client.connect()
                return True
            except MpdConnectionError as e:
                logger.warning("MPD connection failed: %s", e)
                self.connection_changed.emit(False)
                self.error_occurred.emit(str(e))
            except MpdError as e:
                logger.error("MPD protocol error: %s", e)
                self.error_occurred.emit(str(e))
            await asyncio.sleep(self._reconnect_delay)
        return False

    async def _monitor_loop(self) -> None:
        """Async monitor loop: connect, then forward poller changes."""
        client = MpdClient(self._host, self._port, self._password)
        if not await self._connect(client):
            return

        poller = client.poller
        poller.interval = self._poll_interval
        poller.reconnect_delay = self._reconnect_delay
        changes = poller.listen()
        poller.start()
        try:
            async for change in changes:
                if not self._running:
                    break
                self._emit_change(change)
        finally:
            await poller.stop()
            await client.disconnect()

    def _emit_change(self, change: StatusChange) -> None:
        """Re-emit one poller change as Qt signals."""
        self.status_changed.emit(change.field, change.values)
        if change.event is StatusEvent.CONNECTION:
            self.connection_changed.emit(bool(change.value))
        elif change.event is StatusEvent.SONG:
            self.track_changed.emit(change.value)
