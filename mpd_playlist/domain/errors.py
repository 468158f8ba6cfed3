from typing import Optional


class CommandError(Exception):
    """Failure reported by the command dispatcher. Carries the server ACK code when known."""

    def __init__(self, message: str = "Command failed", command: Optional[str] = None,
                 code: Optional[int] = None) -> None:
        super().__init__(message)
        self.command = command
        self.code = code


class NotFound(CommandError):
    """Referenced playlist or file does not exist on the server."""


class DecodeMismatch(CommandError, TypeError):
    """Response entries could not be decoded into the expected shape."""


class TemporaryFailure(CommandError):
    """Transient transport or server failure. Retrying may succeed."""


class PermanentFailure(CommandError):
    """Non-retriable failure due to invalid arguments or missing permission."""


# ACK error numbers from the server's protocol
ACK_ERROR_NOT_LIST = 1
ACK_ERROR_ARG = 2
ACK_ERROR_PASSWORD = 3
ACK_ERROR_PERMISSION = 4
ACK_ERROR_UNKNOWN = 5
ACK_ERROR_NO_EXIST = 50
ACK_ERROR_PLAYLIST_MAX = 51
ACK_ERROR_SYSTEM = 52
ACK_ERROR_PLAYLIST_LOAD = 53
ACK_ERROR_UPDATE_ALREADY = 54
ACK_ERROR_PLAYER_SYNC = 55
ACK_ERROR_EXIST = 56

_PERMANENT_CODES = {
    ACK_ERROR_NOT_LIST, ACK_ERROR_ARG, ACK_ERROR_PASSWORD, ACK_ERROR_PERMISSION,
    ACK_ERROR_UNKNOWN, ACK_ERROR_PLAYLIST_MAX, ACK_ERROR_PLAYLIST_LOAD, ACK_ERROR_EXIST,
}


def error_from_ack(code: int, message: str, command: Optional[str] = None) -> CommandError:
    """Map a server ACK code to the matching failure class."""
    if code == ACK_ERROR_NO_EXIST:
        cls = NotFound
    elif code in _PERMANENT_CODES:
        cls = PermanentFailure
    else:
        cls = TemporaryFailure
    return cls(message, command=command, code=code)
