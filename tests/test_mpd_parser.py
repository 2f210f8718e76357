"""Tests for MPD response parsing."""

from datetime import UTC, datetime

from mpdctrl.api.mpd.errors import NotFound
from mpdctrl.api.mpd.parser import (
    build_record,
    make_chunks,
    parse_command_list,
    parse_response,
)
from mpdctrl.api.mpd.types import Playlist, Track


class TestBuildRecord:
    """Tests for build_record."""

    def test_simple(self) -> None:
        """Test a flat record."""
        assert build_record("volume: 50\nstate: play\n") == {"volume": 50, "state": "play"}

    def test_repeated_key_becomes_list(self) -> None:
        """Test that repeated tags accumulate in order."""
        record = build_record("Artist: A\nArtist: B\nArtist: C\n")
        assert record == {"artist": ["A", "B", "C"]}

    def test_tuple_value_not_extended(self) -> None:
        """Test that tuple-valued fields stay tuples."""
        record = build_record("time: 61:225\naudio: 44100:16:2\n")
        assert record["time"] == (61, 225)
        assert record["audio"] == (44100, 16, 2)


class TestMakeChunks:
    """Tests for splitting a body into records."""

    def test_split_on_first_key(self) -> None:
        """Test that each repeat of the first key opens a record."""
        body = "file: a.flac\nTitle: A\nfile: b.flac\nTitle: B\n"
        assert make_chunks(body) == ["file: a.flac\nTitle: A", "file: b.flac\nTitle: B"]

    def test_single_record(self) -> None:
        """Test a body with a single record."""
        assert make_chunks("volume: 50\nstate: stop\n") == ["volume: 50\nstate: stop"]

    def test_empty(self) -> None:
        """Test an empty body."""
        assert make_chunks("") == []


class TestParseResponse:
    """Tests for parse_response."""

    def test_empty_reply(self) -> None:
        """Test that an empty reply is True."""
        assert parse_response("play", "") is True

    def test_empty_reply_list_command(self) -> None:
        """Test that an empty reply of a list command is []."""
        assert parse_response("playlistinfo", "") == []
        assert parse_response("outputs", "") == []

    def test_status_record(self) -> None:
        """Test status parsing with typed values."""
        body = (
            "volume: 50\nrepeat: 0\nrandom: 1\nsingle: 0\nconsume: 0\n"
            "playlist: 4\nplaylistlength: 2\nstate: play\nsong: 1\nsongid: 2\n"
            "time: 61:225\nelapsed: 61.250\nbitrate: 320\naudio: 44100:16:2\n"
        )
        status = parse_response("status", body)
        assert status["volume"] == 50
        assert status["repeat"] is False
        assert status["random"] is True
        assert status["playlist"] == 4
        assert status["state"] == "play"
        assert status["time"] == (61, 225)
        assert status["elapsed"] == 61.25
        assert status["audio"] == (44100, 16, 2)

    def test_one_line_status_stays_record(self) -> None:
        """Test that status is a dict even with one field."""
        assert parse_response("status", "volume: 50\n") == {"volume": 50}

    def test_single_value_collapses(self) -> None:
        """Test that a one-line reply collapses to its value."""
        assert parse_response("update", "updating_db: 3\n") == 3
        assert parse_response("addid", "Id: 17\n") == 17

    def test_value_list(self) -> None:
        """Test one-line records collapse to a list of values."""
        body = "command: add\ncommand: play\ncommand: status\n"
        assert parse_response("commands", body) == ["add", "play", "status"]

    def test_value_list_single_element(self) -> None:
        """Test that list commands keep a list for one element."""
        assert parse_response("tagtypes", "tagtype: Artist\n") == ["Artist"]

    def test_records(self) -> None:
        """Test multi-line records stay dicts."""
        body = (
            "outputid: 0\noutputname: Speakers\noutputenabled: 1\n"
            "outputid: 1\noutputname: Headphones\noutputenabled: 0\n"
        )
        outputs = parse_response("outputs", body)
        assert outputs == [
            {"outputid": 0, "outputname": "Speakers", "outputenabled": True},
            {"outputid": 1, "outputname": "Headphones", "outputenabled": False},
        ]

    def test_tracks(self) -> None:
        """Test that song commands build Track objects."""
        body = (
            "file: jazz/so_what.flac\nTitle: So What\nArtist: Miles Davis\n"
            "Time: 545\nduration: 545.123\nPos: 0\nId: 1\n"
            "file: jazz/blue.flac\nTitle: Blue in Green\nPos: 1\nId: 2\n"
        )
        tracks = parse_response("playlistinfo", body)
        assert len(tracks) == 2
        first = tracks[0]
        assert isinstance(first, Track)
        assert first.file == "jazz/so_what.flac"
        assert first.title == "So What"
        assert first.artist == "Miles Davis"
        assert first.time == (None, 545)
        assert first.get("pos") == 0
        assert first.get("duration") == 545.123
        assert tracks[1].title == "Blue in Green"

    def test_tracks_bound_to_client(self) -> None:
        """Test that tracks carry the client they were read with."""
        sentinel = object()
        (track,) = parse_response("find", "file: a.flac\nTitle: A\n", sentinel)  # type: ignore[arg-type]
        assert track.client is sentinel

    def test_readcomments_stays_record(self) -> None:
        """Test that a single comment tag is still a dict."""
        assert parse_response("readcomments", "comment: Live\n") == {"comment": "Live"}

    def test_single_track_list(self) -> None:
        """Test that one track is still returned in a list."""
        tracks = parse_response("find", "file: a.flac\n")
        assert tracks == [Track(file="a.flac")]

    def test_remote_track(self) -> None:
        """Test that stream URLs become minimal tracks."""
        body = "file: http://radio.example/stream\nTitle: Live\nPos: 0\n"
        (track,) = parse_response("playlistinfo", body)
        assert track.file == "http://radio.example/stream"
        assert track.time == (0, None)
        assert track.title is None

    def test_repeated_tag_in_track(self) -> None:
        """Test that repeated tags become lists on the track."""
        (track,) = parse_response("search", "file: a.flac\nArtist: A\nArtist: B\n")
        assert track.artist == ["A", "B"]

    def test_playlists(self) -> None:
        """Test stored playlist parsing keeps names as text."""
        body = (
            "playlist: 007\nLast-Modified: 2023-04-05T06:07:08Z\n"
            "playlist: Road Trip\nLast-Modified: 2023-01-01T00:00:00Z\n"
        )
        sentinel = object()
        playlists = parse_response("listplaylists", body, sentinel)  # type: ignore[arg-type]
        assert [p.name for p in playlists] == ["007", "Road Trip"]
        assert isinstance(playlists[0], Playlist)
        assert playlists[0].last_modified == datetime(2023, 4, 5, 6, 7, 8, tzinfo=UTC)
        assert playlists[0].client is sentinel

    def test_listall_flat(self) -> None:
        """Test that listall returns one flat mapping."""
        body = "directory: jazz\nfile: jazz/a.flac\nfile: jazz/b.flac\n"
        assert parse_response("listall", body) == {
            "directory": "jazz",
            "file": ["jazz/a.flac", "jazz/b.flac"],
        }

    def test_listallinfo_strips_directories(self) -> None:
        """Test that directory and playlist entries are removed."""
        body = (
            "directory: jazz\nLast-Modified: 2020-01-01T00:00:00Z\n"
            "file: jazz/a.flac\nTitle: A\n"
            "playlist: jazz/list.m3u\n"
            "file: jazz/b.flac\nTitle: B\n"
        )
        tracks = parse_response("listallinfo", body)
        assert [t.file for t in tracks] == ["jazz/a.flac", "jazz/b.flac"]


class TestParseCommandList:
    """Tests for command-list reply splitting."""

    def test_results_in_order(self) -> None:
        """Test one result per command with output."""
        body = "volume: 50\nstate: play\nlist_OK\nfile: a.flac\nTitle: A\nlist_OK\nlist_OK\n"
        results = parse_command_list(["status", "currentsong", "play"], body)
        assert results == [
            {"volume": 50, "state": "play"},
            {"file": "a.flac", "title": "A"},
        ]

    def test_empty_outputs_dropped(self) -> None:
        """Test that commands without output have no entry."""
        body = "list_OK\nupdating_db: 5\nlist_OK\n"
        assert parse_command_list(["clear", "update"], body) == [5]

    def test_error_mid_list(self) -> None:
        """Test that the error follows the results before it."""
        error = NotFound(50, "add", "No such directory", position=2)
        body = "volume: 5\nlist_OK\n"
        results = parse_command_list(["status", "add", "play"], body, error)
        assert results == [{"volume": 5}, error]

    def test_error_first_command(self) -> None:
        """Test an error on the first command."""
        error = NotFound(50, "add", "No such directory", position=1)
        assert parse_command_list(["add", "play"], "", error) == [error]
