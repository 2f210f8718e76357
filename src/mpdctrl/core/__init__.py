"""Core application layer.

This module contains the pieces built on top of the async MPD client:
status polling, the Qt signal bridge and persistent configuration.

Classes:
    StatusPoller: Background task publishing per-field status changes.
    MpdMonitor: QObject re-emitting poller changes as Qt signals.
    ConfigManager: QSettings wrapper for configuration.
"""

from mpdctrl.core.config import ConfigManager, MpdSettings
from mpdctrl.core.mpd_monitor import MpdMonitor
from mpdctrl.core.status_poller import StatusChange, StatusEvent, StatusPoller, Subscription

__all__ = [
    "ConfigManager",
    "MpdMonitor",
    "MpdSettings",
    "StatusChange",
    "StatusEvent",
    "StatusPoller",
    "Subscription",
]
