from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Mapping, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True, eq=False)
class Song:
    """Domain entity representing one entry of a stored playlist.

    ``file`` is the catalog path or stream URI, ``tags`` the remaining fields the
    server reported and ``time`` the server's ``time`` field (``[0]`` for remote
    streams). Two songs are equal when they address the same file.
    """

    file: Optional[str] = None
    tags: Dict[str, Any] = None
    time: List[Any] = None

    def __post_init__(self):
        if self.tags is None:
            object.__setattr__(self, 'tags', {})
        if self.time is None:
            object.__setattr__(self, 'time', [])

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> "Song":
        """Build a song from a full field mapping, keeping every tag."""
        tags = {k: v for k, v in fields.items() if k not in ("file", "time")}
        time = fields.get("time")
        if time is not None and not isinstance(time, list):
            time = [time]
        return cls(file=fields.get("file"), tags=tags, time=time)

    @classmethod
    def remote(cls, uri: str) -> "Song":
        """Build a song for a remote stream: file only, zero duration."""
        return cls(file=uri, time=[0])

    @property
    def duration(self) -> Optional[int]:
        if self.time:
            return int(self.time[0])
        if "duration" in self.tags:
            return int(float(self.tags["duration"]))
        return None

    @property
    def title(self) -> Optional[str]:
        return self.tags.get("title")

    @property
    def artist(self) -> Optional[str]:
        return self.tags.get("artist")

    @property
    def album(self) -> Optional[str]:
        return self.tags.get("album")

    def __getitem__(self, key: str) -> Any:
        if key == "file":
            return self.file
        if key == "time":
            return self.time
        return self.tags[key]

    def to_dict(self) -> Dict[str, Any]:
        data = {"file": self.file}
        if self.time:
            data["time"] = list(self.time)
        data.update(self.tags)
        return data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Song):
            return NotImplemented
        return self.file == other.file

    def __hash__(self) -> int:
        return hash(self.file)


# Name input variants accepted when constructing a playlist handle

@dataclass(frozen=True)
class PlainName:
    """Playlist addressed by a bare value (string, or a number the parser produced)."""

    value: Any


@dataclass(frozen=True)
class KeyedName:
    """Playlist given as a ``listplaylists`` entry carrying a ``playlist`` field."""

    fields: Mapping[str, Any]


NameInput = Union[PlainName, KeyedName]


# Listing entry variants returned by ``listplaylistinfo``

@dataclass(frozen=True)
class SingleFile:
    """Bare path the server sends when a playlist holds exactly one stream."""

    path: str


@dataclass(frozen=True)
class FieldMap:
    """Regular listing entry: one field mapping per song."""

    fields: Mapping[str, Any]


ListingEntry = Union[SingleFile, FieldMap]


# Explicit result of a listing request

@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: Exception

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self):
        raise self.error


Result = Union[Ok, Err]
