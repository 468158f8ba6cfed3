from typing import Any, Dict, List

import pytest

from mpd_playlist.application.playlist import Playlist
from mpd_playlist.domain.errors import NotFound, PermanentFailure, error_from_ack
from mpd_playlist.domain.ports import CommandDispatcher


class FakeDispatcher(CommandDispatcher):
    """In-memory server keeping stored playlists as lists of field mappings."""

    def __init__(self) -> None:
        self._stored = {
            "mix": [
                {"file": "Artist/Song.mp3", "title": "Song", "artist": "Artist", "time": "200"},
                {"file": "Other/Tune.flac", "title": "Tune", "artist": "Other", "time": "180"},
            ],
            "radio": [{"file": "http://stream.example/x"}],
        }
        self._catalog = [
            {"file": "Beatles/Help.mp3", "artist": "The Beatles", "title": "Help!"},
            {"file": "Kinks/Lola.mp3", "artist": "The Kinks", "title": "Lola"},
        ]
        self.queue = []  # type: List[Dict[str, Any]]
        self.sent = []

    def _playlist(self, command: str, name: str) -> List[Dict[str, Any]]:
        if name not in self._stored:
            raise error_from_ack(50, "No such playlist", command=command)
        return self._stored[name]

    def send_command(self, command: str, *args: Any) -> Any:
        self.sent.append((command,) + args)
        name = args[0]

        if command == "listplaylistinfo":
            entries = self._playlist(command, name)
            # The server drops the envelope for a lone stream
            if len(entries) == 1 and entries[0]["file"].startswith("http"):
                return [entries[0]["file"]]
            return [dict(e) for e in entries]
        if command == "load":
            entries = self._playlist(command, name)
            if len(args) > 1:
                start, end = args[1].split(":")
                entries = entries[int(start):int(end) if end else None]
            self.queue.extend(entries)
            return True
        if command == "playlistadd":
            self._stored.setdefault(name, []).append({"file": args[1]})
            return True
        if command == "searchaddpl":
            tag, what = args[1], args[2].lower()
            matches = [s for s in self._catalog
                       if any(what in str(v).lower() for k, v in s.items() if tag == "any" or k == tag)]
            self._stored.setdefault(name, []).extend(matches)
            return True
        if command == "playlistclear":
            self._playlist(command, name).clear()
            return True
        if command == "playlistdelete":
            self._playlist(command, name).pop(int(args[1]))
            return True
        if command == "playlistmove":
            entries = self._playlist(command, name)
            entries.insert(int(args[2]), entries.pop(int(args[1])))
            return True
        if command == "rename":
            if args[1] in self._stored:
                raise error_from_ack(56, "Playlist already exists", command=command)
            self._playlist(command, name)
            self._stored[args[1]] = self._stored.pop(name)
            return True
        if command == "rm":
            del self._stored[name]
            return True
        raise error_from_ack(5, f"unknown command \"{command}\"", command=command)


def test_contract_listing_and_quirk():
    mpd = FakeDispatcher()

    songs = Playlist(mpd, "mix").songs()
    assert [s.title for s in songs] == ["Song", "Tune"]
    assert songs[0].duration == 200

    radio = Playlist(mpd, {"playlist": "radio"}).songs()
    assert len(radio) == 1
    assert radio[0].file == "http://stream.example/x"
    assert radio[0].duration == 0


def test_contract_missing_playlist_lists_empty_but_mutations_fail():
    mpd = FakeDispatcher()
    ghost = Playlist(mpd, "ghost")

    assert ghost.songs() == []
    with pytest.raises(NotFound):
        ghost.clear()


def test_contract_clear_then_list_is_empty():
    mpd = FakeDispatcher()
    playlist = Playlist(mpd, "mix")

    playlist.clear()

    assert playlist.songs() == []


def test_contract_add_move_delete():
    mpd = FakeDispatcher()
    playlist = Playlist(mpd, "mix")

    playlist.add("New/One.ogg")
    playlist.move(2, 0)
    assert [s.file for s in playlist.songs()] == ["New/One.ogg", "Artist/Song.mp3", "Other/Tune.flac"]

    playlist.delete(1)
    assert [s.file for s in playlist.songs()] == ["New/One.ogg", "Other/Tune.flac"]


def test_contract_searchadd_is_case_insensitive():
    mpd = FakeDispatcher()
    playlist = Playlist(mpd, "oldies")

    playlist.searchadd("artist", "BEATLES")
    assert [s.file for s in playlist.songs()] == ["Beatles/Help.mp3"]

    playlist.searchadd("any", "lola")
    assert [s.file for s in playlist.songs()] == ["Beatles/Help.mp3", "Kinks/Lola.mp3"]


def test_contract_load_range():
    mpd = FakeDispatcher()

    Playlist(mpd, "mix").load((1, 2))

    assert mpd.sent[-1] == ("load", "mix", "1:2")
    assert [e["file"] for e in mpd.queue] == ["Other/Tune.flac"]


def test_contract_rename_and_destroy():
    mpd = FakeDispatcher()
    playlist = Playlist(mpd, "mix")
    captured = playlist.name

    playlist.rename("favourites")
    assert playlist.name == "favourites"
    assert captured == "mix"
    assert len(playlist.songs()) == 2
    assert Playlist(mpd, "mix").songs() == []

    with pytest.raises(PermanentFailure):
        playlist.rename("radio")
    assert playlist.name == "favourites"

    playlist.destroy()
    assert playlist.songs() == []
