from __future__ import annotations

from typing import Any, Protocol


class CommandDispatcher(Protocol):
    """Port defining the contract of the protocol connection.

    Implementations own the connection, framing and parsing of the generic
    key/value response grammar. They return a list of field mappings (or the
    server's bare-string shortcut for single-entry results) and raise
    subclasses of ``CommandError`` on failure.
    """

    def send_command(self, command: str, *args: Any) -> Any:
        """Send ``command`` with ordered ``args`` and return the parsed response."""
