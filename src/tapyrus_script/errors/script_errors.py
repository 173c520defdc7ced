"""ScriptError — base exception class for all tapyrus-script errors."""

from __future__ import annotations


class ScriptError(Exception):
    """Base error for script construction and parsing misuse.

    Classification itself never raises: unrecognised or malformed scripts
    are reported through return values. These errors signal invalid
    arguments handed to builders, key helpers and the bytecode iterator.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code string.
    """

    def __init__(self, message: str, *, code: str = "script-error") -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class ScriptDecodeError(ScriptError):
    """A push opcode declares more bytes than the script holds."""

    def __init__(self, message: str, *, offset: int) -> None:
        super().__init__(message, code="script-truncated")
        self.offset = offset
