"""MPD client module.

This module provides an async MPD client: command encoding, typed
response parsing, command lists, and a shared connection that
reconnects once when the socket drops.

Example:
    from mpdctrl.api.mpd import MpdClient

    async with MpdClient("192.168.1.100") as client:
        status = await client.status()
        track = await client.current()
"""

from mpdctrl.api.mpd.client import CommandList, ConnectionState, MpdClient
from mpdctrl.api.mpd.errors import (
    SERVER_ERRORS,
    AlreadyExists,
    AlreadyUpdating,
    IncorrectPassword,
    MpdConnectionError,
    MpdError,
    MpdPermissionError,
    MpdSystemError,
    NotFound,
    NotListError,
    NotPlaying,
    PlaylistLoadError,
    PlaylistMaxError,
    ServerArgumentError,
    ServerError,
)
from mpdctrl.api.mpd.types import Playlist, Range, Track

__all__ = [
    "MpdClient",
    "CommandList",
    "ConnectionState",
    "MpdConnectionError",
    "MpdError",
    "SERVER_ERRORS",
    "NotListError",
    "ServerArgumentError",
    "IncorrectPassword",
    "MpdPermissionError",
    "ServerError",
    "NotFound",
    "PlaylistMaxError",
    "MpdSystemError",
    "PlaylistLoadError",
    "AlreadyUpdating",
    "NotPlaying",
    "AlreadyExists",
    "Playlist",
    "Range",
    "Track",
]
