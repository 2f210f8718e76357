"""Configuration manager using QSettings for persistent storage."""

import logging
from dataclasses import dataclass

from PySide6.QtCore import QSettings

from mpdctrl.api.mpd.client import CONNECT_TIMEOUT, DEFAULT_HOST, DEFAULT_PORT
from mpdctrl.core.status_poller import DEFAULT_POLL_INTERVAL, DEFAULT_RECONNECT_DELAY

logger = logging.getLogger(__name__)

# Settings keys
_KEY_MPD_HOST = "mpd/host"
_KEY_MPD_PORT = "mpd/port"
_KEY_MPD_PASSWORD = "mpd/password"
_KEY_MPD_TIMEOUT = "mpd/timeout"

# Monitoring
_KEY_POLL_INTERVAL = "monitoring/poll_interval"
_KEY_RECONNECT_DELAY = "monitoring/reconnect_delay"

_MIN_POLL_INTERVAL = 0.05
_MAX_POLL_INTERVAL = 30.0


@dataclass(frozen=True)
class MpdSettings:
    """Connection and polling settings.

    Attributes:
        host: MPD hostname, IP, or Unix socket path.
        port: MPD TCP port.
        password: Password sent after connecting (empty for none).
        timeout: Connect and greeting timeout in seconds.
        poll_interval: Status poll interval in seconds.
        reconnect_delay: Delay before reconnecting after a lost connection.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    password: str = ""
    timeout: float = CONNECT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    reconnect_delay: float = DEFAULT_RECONNECT_DELAY


class ConfigManager:
    """Wrapper around QSettings for type-safe config access.

    QSettings stores config in platform-specific locations:
    - Windows: HKEY_CURRENT_USER\\Software\\mpdctrl\\mpdctrl
    - macOS: ~/Library/Preferences/com.mpdctrl.mpdctrl.plist
    - Linux: ~/.config/mpdctrl/mpdctrl.conf

    Example:
        config = ConfigManager()
        settings = config.load()
        config.set_mpd_host("musicbox.local")
    """

    def __init__(self, organization: str = "mpdctrl", application: str = "mpdctrl") -> None:
        """Initialize the config manager.

        Args:
            organization: Organization name for QSettings.
            application: Application name for QSettings.
        """
        self._settings = QSettings(organization, application)

    @property
    def settings(self) -> QSettings:
        """Return the underlying QSettings instance."""
        return self._settings

    # -- Connection -----------------------------------------------------------

    def get_mpd_host(self) -> str:
        """Return the MPD host (defaults to localhost)."""
        value = self._settings.value(_KEY_MPD_HOST, DEFAULT_HOST, str)
        return str(value) if value else DEFAULT_HOST

    def set_mpd_host(self, host: str) -> None:
        """Set the MPD host or Unix socket path."""
        self._settings.setValue(_KEY_MPD_HOST, host)

    def get_mpd_port(self) -> int:
        """Return the MPD port (default 6600)."""
        value = self._settings.value(_KEY_MPD_PORT, DEFAULT_PORT, int)
        return int(value) if value else DEFAULT_PORT

    def set_mpd_port(self, port: int) -> None:
        """Set the MPD port (clamped to 1-65535)."""
        self._settings.setValue(_KEY_MPD_PORT, max(1, min(65535, port)))

    def get_mpd_password(self) -> str:
        """Return the MPD password, or empty string for none."""
        value = self._settings.value(_KEY_MPD_PASSWORD, "", str)
        return str(value) if value else ""

    def set_mpd_password(self, password: str) -> None:
        """Set the MPD password."""
        self._settings.setValue(_KEY_MPD_PASSWORD, password)

    def get_mpd_timeout(self) -> float:
        """Return the connect timeout in seconds."""
        value = self._settings.value(_KEY_MPD_TIMEOUT, CONNECT_TIMEOUT, float)
        return float(value) if value else CONNECT_TIMEOUT

    def set_mpd_timeout(self, seconds: float) -> None:
        """Set the connect timeout in seconds."""
        self._settings.setValue(_KEY_MPD_TIMEOUT, max(0.1, seconds))

    # -- Monitoring -----------------------------------------------------------

    def get_poll_interval(self) -> float:
        """Return the status poll interval in seconds."""
        value = self._settings.value(_KEY_POLL_INTERVAL, DEFAULT_POLL_INTERVAL, float)
        return float(value) if value else DEFAULT_POLL_INTERVAL

    def set_poll_interval(self, seconds: float) -> None:
        """Set the status poll interval (clamped to 0.05-30 seconds)."""
        clamped = max(_MIN_POLL_INTERVAL, min(_MAX_POLL_INTERVAL, seconds))
        self._settings.setValue(_KEY_POLL_INTERVAL, clamped)

    def get_reconnect_delay(self) -> float:
        """Return the reconnect delay in seconds."""
        value = self._settings.value(_KEY_RECONNECT_DELAY, DEFAULT_RECONNECT_DELAY, float)
        return float(value) if value is not None else DEFAULT_RECONNECT_DELAY

    def set_reconnect_delay(self, seconds: float) -> None:
        """Set the reconnect delay in seconds."""
        self._settings.setValue(_KEY_RECONNECT_DELAY, max(0.0, seconds))

    # -- Bulk access ----------------------------------------------------------

    def load(self) -> MpdSettings:
        """Return all saved settings, with defaults for missing keys."""
        return MpdSettings(
            host=self.get_mpd_host(),
            port=self.get_mpd_port(),
            password=self.get_mpd_password(),
            timeout=self.get_mpd_timeout(),
            poll_interval=self.get_poll_interval(),
            reconnect_delay=self.get_reconnect_delay(),
        )

    def save(self, settings: MpdSettings) -> None:
        """Persist all settings."""
        self.set_mpd_host(settings.host)
        self.set_mpd_port(settings.port)
        self.set_mpd_password(settings.password)
        self.set_mpd_timeout(settings.timeout)
        self.set_poll_interval(settings.poll_interval)
        self.set_reconnect_delay(settings.reconnect_delay)
        logger.debug("Saved MPD settings for %s:%d", settings.host, settings.port)

    def clear(self) -> None:
        """Clear all settings (useful for testing or reset)."""
        self._settings.clear()

    def sync(self) -> None:
        """Force settings to be written to disk."""
        self._settings.sync()
