"""Errors raised by the checkers module and by its query service."""

from __future__ import annotations

from enum import IntEnum

MODULE_NAME = "checkers"


class CheckersError(Exception):
    """Base of the module's registered errors, each with a codespace and code."""

    codespace = MODULE_NAME
    code = 1
    description = "internal"

    def __init__(self, message: str | None = None) -> None:
        self.message = self.description if message is None else message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class InvalidSignerError(CheckersError):
    code = 1100
    description = "expected gov account as only signer for proposal message"


class SampleError(CheckersError):
    code = 1101
    description = "sample error"


class InvalidBlackError(CheckersError):
    code = 1102
    description = "invalid black address"


class InvalidRedError(CheckersError):
    code = 1103
    description = "invalid red address"


class GameNotParseableError(CheckersError):
    code = 1104
    description = "game not parseable"


class InvalidAddressError(CheckersError):
    """An account address that cannot be decoded."""

    codespace = "sdk"
    code = 7
    description = "invalid address"


class StatusCode(IntEnum):
    """Status codes of a remote query."""

    OK = 0
    CANCELED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16

    @property
    def label(self) -> str:
        """The code's name in CamelCase, as shown in error text."""
        if self is StatusCode.OK:
            return "OK"
        return "".join(part.capitalize() for part in self.name.split("_"))


class StatusError(Exception):
    """A failed query, carrying a status code and a description."""

    def __init__(self, code: StatusCode, message: str) -> None:
        self.code = StatusCode(code)
        self.message = message
        super().__init__(code, message)

    def __str__(self) -> str:
        return f"rpc error: code = {self.code.label} desc = {self.message}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StatusError):
            return NotImplemented
        return self.code == other.code and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.code, self.message))