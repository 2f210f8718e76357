"""Test fixtures for mpdctrl tests."""

import os

import pytest

# Qt must not need a display in CI
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


def _mock_status_response() -> dict:
    """Return a status reply body as MPD sends it."""
    return {
        "volume": "50",
        "repeat": "0",
        "random": "0",
        "single": "0",
        "consume": "0",
        "playlist": "4",
        "playlistlength": "2",
        "state": "play",
        "song": "0",
        "songid": "1",
        "time": "10:200",
        "elapsed": "10.250",
        "audio": "44100:16:2",
    }


@pytest.fixture
def mock_status_response() -> dict:
    """Fixture providing raw status fields."""
    return _mock_status_response()


@pytest.fixture
def status_reply(mock_status_response: dict) -> bytes:
    """Fixture providing a full status reply, terminated by OK."""
    body = "".join(f"{key}: {value}\n" for key, value in mock_status_response.items())
    return f"{body}OK\n".encode()
