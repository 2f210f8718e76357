"""MPD error taxonomy.

MPD reports failures with an ACK line carrying a numeric error code.
Each code maps to one exception class so callers can catch specific
failures (e.g. ``NotFound``) instead of inspecting codes.

Reference: https://mpd.readthedocs.io/en/stable/protocol.html#failure-responses
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class MpdConnectionError(ConnectionError):
    """Connection-level failure (not connected, refused, closed by peer)."""


class MpdError(Exception):
    """MPD protocol error reported by an ACK line.

    Attributes:
        code: Numeric MPD error code.
        position: 1-based position of the failing command in a batch. A
            single command reports 1.
        command: Name of the command that failed.
        message: Human-readable message from the daemon.
        results: Results already parsed when the error ended a command list.
    """

    def __init__(self, code: int, command: str, message: str, position: int = 0) -> None:
        self.code = code
        self.position = position
        self.command = command
        self.message = message
        self.results: list[Any] = []
        super().__init__(f"MPD error {code} in {command}: {message}")


class NotListError(MpdError):
    """Command is only valid inside a command list."""


class ServerArgumentError(MpdError):
    """Wrong number or kind of arguments."""


class IncorrectPassword(MpdError):
    """Password rejected."""


class MpdPermissionError(MpdError):
    """Command not allowed with the current permissions."""


class ServerError(MpdError):
    """Generic server-side failure."""


class NotFound(MpdError):
    """Requested file, playlist or object does not exist."""


class PlaylistMaxError(MpdError):
    """Queue or playlist is full."""


class MpdSystemError(MpdError):
    """Daemon hit an I/O or OS-level error."""


class PlaylistLoadError(MpdError):
    """Stored playlist could not be loaded."""


class AlreadyUpdating(MpdError):
    """A database update is already running."""


class NotPlaying(MpdError):
    """Command needs an active song but the player is stopped."""


class AlreadyExists(MpdError):
    """Object (e.g. a stored playlist) already exists."""


SERVER_ERRORS: dict[int, type[MpdError]] = {
    1: NotListError,
    2: ServerArgumentError,
    3: IncorrectPassword,
    4: MpdPermissionError,
    5: ServerError,
    50: NotFound,
    51: PlaylistMaxError,
    52: MpdSystemError,
    53: PlaylistLoadError,
    54: AlreadyUpdating,
    55: NotPlaying,
    56: AlreadyExists,
}


def error_for_code(code: int) -> type[MpdError]:
    """Return the exception class for an ACK error code.

    Unknown codes should not come from a conforming daemon; they fall
    back to ``ServerError``.
    """
    error_class = SERVER_ERRORS.get(code)
    if error_class is None:
        logger.warning("Unmapped MPD error code %d, treating as ServerError", code)
        return ServerError
    return error_class
