from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any, Iterable, List, Optional

from .entities import FieldMap, KeyedName, ListingEntry, NameInput, PlainName, SingleFile, Song
from .errors import DecodeMismatch


_REMOTE_SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


def classify_name(value: Any) -> NameInput:
    if isinstance(value, (PlainName, KeyedName)):
        return value
    if isinstance(value, Mapping):
        return KeyedName(value)
    return PlainName(value)


def coerce_name(value: Any) -> str:
    """Return the playlist name for a bare value or a ``listplaylists`` entry."""
    name_input = classify_name(value)
    if isinstance(name_input, KeyedName):
        if "playlist" not in name_input.fields:
            raise ValueError(f"Mapping has no 'playlist' field: {dict(name_input.fields)!r}")
        # The parser may have turned a numeric name into an int
        return str(name_input.fields["playlist"])
    return str(name_input.value)


def render_range(value: Optional[Sequence]) -> Optional[str]:
    """Render a ``(start, end)`` pair as the protocol's ``START:END`` window."""
    if value is None:
        return None
    if isinstance(value, range):
        return f"{value.start}:{value.stop}"
    if len(value) != 2:
        raise TypeError(f"Range must be a (start, end) pair, got {value!r}")
    start, end = value
    return f"{start}:{'' if end is None else end}"


def render_args(args: Iterable[Any]) -> List[str]:
    """Drop omitted optional arguments and stringify the rest in order."""
    rendered = []
    for arg in args:
        if arg is None:
            continue
        if isinstance(arg, (tuple, list, range)):
            arg = render_range(arg)
        rendered.append(str(arg))
    return rendered


def is_remote_uri(path: Optional[str]) -> bool:
    return isinstance(path, str) and _REMOTE_SCHEME_PATTERN.match(path) is not None


def classify_listing(raw: Any) -> List[ListingEntry]:
    """Turn a raw ``listplaylistinfo`` response into tagged listing entries.

    The server collapses a playlist holding exactly one stream into a bare path
    instead of the usual field mapping, and streams listed without metadata can
    arrive the same way. Bare strings become ``SingleFile``; any other
    non-mapping entry is a decode mismatch.
    """
    if not raw:
        return []
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, Sequence):
        raise DecodeMismatch(f"Unexpected listing response of type {type(raw).__name__}")

    if len(raw) == 1 and not isinstance(raw[0], Mapping):
        return [SingleFile(str(raw[0]))]

    entries = []
    for position, item in enumerate(raw):
        if isinstance(item, str):
            entries.append(SingleFile(item))
            continue
        if not isinstance(item, Mapping):
            raise DecodeMismatch(
                f"Listing entry {position} is {type(item).__name__}, expected a field mapping"
            )
        entries.append(FieldMap(item))
    return entries


def entry_fields(entry: ListingEntry) -> Mapping[str, Any]:
    if isinstance(entry, SingleFile):
        return {"file": entry.path}
    return entry.fields


def materialize_song(fields: Mapping[str, Any]) -> Song:
    path = fields.get("file")
    if is_remote_uri(path):
        # Unresolved streams carry no reliable metadata
        return Song.remote(path)
    return Song.from_fields(fields)


def materialize_songs(raw: Any) -> List[Song]:
    """Build songs from a raw listing response, preserving play order."""
    return [materialize_song(entry_fields(entry)) for entry in classify_listing(raw)]
