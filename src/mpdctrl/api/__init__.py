"""API clients for the MPD line protocol."""

from mpdctrl.api.mpd import MpdClient, MpdConnectionError, MpdError

__all__ = [
    "MpdClient",
    "MpdConnectionError",
    "MpdError",
]
