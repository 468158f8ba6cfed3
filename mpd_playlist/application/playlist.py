from __future__ import annotations

from typing import Any, List, Optional, Tuple

from mpd_playlist.crosscutting.logging import get_logger, log_command, log_listing_recovered
from mpd_playlist.domain.entities import Err, Ok, Result, Song
from mpd_playlist.domain.errors import CommandError, DecodeMismatch, NotFound
from mpd_playlist.domain.normalization import coerce_name, materialize_songs, render_args
from mpd_playlist.domain.ports import CommandDispatcher


logger = get_logger(__name__)


class Playlist:
    """A playlist file stored by the server.

    Playlists live in the server's playlist directory and are addressed by
    their file name, without directory or ``.m3u`` suffix. The handle holds
    only that name and the dispatcher; it caches nothing. ``rename`` updates
    the name for later calls, it does not relink calls already made with the
    old one. After ``destroy`` the handle is stale.
    """

    def __init__(self, mpd: CommandDispatcher, options: Any):
        """Initialize the handle.

        Args:
            mpd: Dispatcher used for every command; must outlive the handle
            options: Playlist name, or a ``listplaylists`` entry with a ``playlist`` field
        """
        self.name = coerce_name(options)
        self._mpd = mpd

    def _send(self, command: str, *args: Any) -> Any:
        rendered = render_args(args)
        log_command(logger, command, rendered)
        return self._mpd.send_command(command, *rendered)

    def fetch_songs(self) -> Result:
        """List the songs in the playlist as an explicit ``Ok``/``Err`` result."""
        try:
            raw = self._send('listplaylistinfo', self.name)
            return Ok(materialize_songs(raw))
        except CommandError as e:
            return Err(e)
        except TypeError as e:
            if not isinstance(e, DecodeMismatch):
                e = DecodeMismatch(str(e), command='listplaylistinfo')
            return Err(e)

    def songs(self) -> List[Song]:
        """Songs in the playlist, in play order. Playlist plugins are supported.

        A missing playlist, or entries that cannot be decoded, list as empty.
        Other failures propagate.
        """
        result = self.fetch_songs()
        if result.is_ok:
            return result.value
        if isinstance(result.error, (NotFound, DecodeMismatch)):
            log_listing_recovered(logger, self.name, result.error)
            return []
        return result.unwrap()

    def load(self, range: Optional[Tuple[Optional[int], Optional[int]]] = None) -> Any:
        """Load the playlist into the queue, optionally only the ``(start, end)`` window."""
        return self._send('load', self.name, range)

    def add(self, uri: str) -> Any:
        """Append ``uri`` to the playlist."""
        return self._send('playlistadd', self.name, uri)

    def searchadd(self, type: str, what: str) -> Any:
        """Search for songs whose ``type`` tag contains ``what`` and append them.

        Searches are not case sensitive. ``type`` may be any tag the server
        supports, ``file`` for the path relative to the database root, or
        ``any`` to match every tag.
        """
        return self._send('searchaddpl', self.name, type, what)

    def clear(self) -> Any:
        return self._send('playlistclear', self.name)

    def delete(self, pos: int) -> Any:
        """Delete the song at position ``pos``."""
        return self._send('playlistdelete', self.name, pos)

    def move(self, songid: int, songpos: int) -> Any:
        """Move song ``songid`` to position ``songpos``."""
        return self._send('playlistmove', self.name, songid, songpos)

    def rename(self, new_name: str) -> Any:
        """Rename the playlist; the handle follows only when the server accepts it."""
        new_name = coerce_name(new_name)
        result = self._send('rename', self.name, new_name)
        self.name = new_name
        return result

    def destroy(self) -> Any:
        """Delete the playlist file from the server."""
        return self._send('rm', self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Playlist):
            return NotImplemented
        return self.name == other.name

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Playlist(name={self.name!r})"
