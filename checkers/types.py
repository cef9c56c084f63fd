"""Stored games, genesis state, messages and queries of the checkers module."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from checkers import rules
from checkers.address import Bech32Error, acc_address_from_bech32
from checkers.errors import (
    MODULE_NAME,
    GameNotParseableError,
    InvalidAddressError,
    InvalidBlackError,
    InvalidRedError,
)

STORE_KEY = MODULE_NAME
MEM_STORE_KEY = "mem_checkers"
PARAMS_KEY = b"p_checkers"
SYSTEM_INFO_KEY = "SystemInfo/value/"
STORED_GAME_KEY_PREFIX = "StoredGame/value/"
DEFAULT_INDEX = 1

_VARINT = 0
_FIXED64 = 1
_LENGTH = 2
_FIXED32 = 5


def _encode_varint(value: int) -> bytes:
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _decode_varint(data: bytes, pos: int) -> tuple[int, int]:
    result = 0
    shift = 0
    while True:
        if pos >= len(data):
            raise ValueError("truncated varint")
        if shift >= 70:
            raise ValueError("varint too long")
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        shift += 7
        if not byte & 0x80:
            return result, pos


def _varint_field(number: int, value: int) -> bytes:
    if not value:
        return b""
    return _encode_varint(number << 3 | _VARINT) + _encode_varint(value)


def _string_field(number: int, value: str) -> bytes:
    if not value:
        return b""
    raw = value.encode("utf-8")
    return _encode_varint(number << 3 | _LENGTH) + _encode_varint(len(raw)) + raw


def _read_fields(data: bytes) -> Iterator[tuple[int, int, int | bytes]]:
    pos = 0
    while pos < len(data):
        tag, pos = _decode_varint(data, pos)
        number, wire_type = tag >> 3, tag & 7
        if number == 0:
            raise ValueError("invalid field number 0")
        if wire_type == _VARINT:
            value, pos = _decode_varint(data, pos)
            yield number, wire_type, value
        elif wire_type == _LENGTH:
            length, pos = _decode_varint(data, pos)
            end = pos + length
            if end > len(data):
                raise ValueError("truncated length-delimited field")
            yield number, wire_type, data[pos:end]
            pos = end
        elif wire_type in (_FIXED64, _FIXED32):
            size = 8 if wire_type == _FIXED64 else 4
            if pos + size > len(data):
                raise ValueError("truncated fixed-size field")
            yield number, wire_type, int.from_bytes(data[pos:pos + size], "little")
            pos += size
        else:
            raise ValueError(f"unsupported wire type {wire_type}")


def key_prefix(p: str) -> bytes:
    """Return the store prefix for a key name."""
    return p.encode("utf-8")


def stored_game_key(index: str) -> bytes:
    """Return the store key of a stored game from its index."""
    return index.encode("utf-8") + b"/"


@dataclass(frozen=True)
class Params:
    """Module parameters; there are none yet."""

    def validate(self) -> None:
        """Check the parameters; every set is valid."""
        return None

    def to_bytes(self) -> bytes:
        """Encode the parameters in protobuf wire form."""
        return b""

    @classmethod
    def from_bytes(cls, data: bytes) -> Params:
        """Decode parameters from protobuf wire form."""
        for _ in _read_fields(data):
            pass
        return cls()


def default_params() -> Params:
    """Return the default parameters."""
    return Params()


@dataclass
class SystemInfo:
    """Module-wide bookkeeping: the id the next game will get."""

    next_id: int = 0

    def to_bytes(self) -> bytes:
        """Encode in protobuf wire form."""
        return _varint_field(1, self.next_id)

    @classmethod
    def from_bytes(cls, data: bytes) -> SystemInfo:
        """Decode from protobuf wire form."""
        info = cls()
        for number, wire_type, value in _read_fields(data):
            if number == 1 and wire_type == _VARINT:
                info.next_id = value & 0xFFFFFFFFFFFFFFFF
        return info


_STORED_GAME_FIELDS = ("index", "board", "turn", "black", "red")


@dataclass
class StoredGame:
    """A game as kept in the store: board text, turn and both players."""

    index: str = ""
    board: str = ""
    turn: str = ""
    black: str = ""
    red: str = ""

    def black_address(self) -> bytes:
        """Return the black player's raw address."""
        try:
            return acc_address_from_bech32(self.black)
        except Bech32Error as err:
            raise InvalidBlackError(f"black address is invalid: {self.black}: {err}") from err

    def red_address(self) -> bytes:
        """Return the red player's raw address."""
        try:
            return acc_address_from_bech32(self.red)
        except Bech32Error as err:
            raise InvalidRedError(f"red address is invalid: {self.red}: {err}") from err

    def parse_game(self) -> rules.Game:
        """Rebuild the playable game from the board text and turn."""
        try:
            game = rules.parse(self.board)
        except rules.RulesError as err:
            raise GameNotParseableError(f"game cannot be parsed: {err}") from err
        piece = rules.STRING_PIECES.get(self.turn)
        if piece is None:
            raise GameNotParseableError(f"game cannot be parsed: turn: {self.turn}")
        game.turn = piece.player
        return game

    def validate(self) -> None:
        """Check both addresses and the board, raising the first problem found."""
        self.black_address()
        self.red_address()
        self.parse_game()

    def to_bytes(self) -> bytes:
        """Encode in protobuf wire form."""
        return b"".join(
            _string_field(number, getattr(self, name))
            for number, name in enumerate(_STORED_GAME_FIELDS, start=1)
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> StoredGame:
        """Decode from protobuf wire form."""
        game = cls()
        for number, wire_type, value in _read_fields(data):
            if wire_type == _LENGTH and 1 <= number <= len(_STORED_GAME_FIELDS):
                setattr(game, _STORED_GAME_FIELDS[number - 1], value.decode("utf-8"))
        return game


@dataclass
class GenesisState:
    """The module's state at chain start."""

    params: Params = field(default_factory=Params)
    system_info: SystemInfo = field(default_factory=SystemInfo)
    stored_game_list: list[StoredGame] = field(default_factory=list)

    def validate(self) -> None:
        """Reject duplicate game indexes and invalid parameters."""
        seen: set[bytes] = set()
        for game in self.stored_game_list:
            key = stored_game_key(game.index)
            if key in seen:
                raise ValueError("duplicated index for storedGame")
            seen.add(key)
        self.params.validate()


def default_genesis() -> GenesisState:
    """Return the default genesis state."""
    return GenesisState(
        params=default_params(),
        system_info=SystemInfo(next_id=DEFAULT_INDEX),
        stored_game_list=[],
    )


def _check_creator(creator: str) -> None:
    try:
        acc_address_from_bech32(creator)
    except Bech32Error as err:
        raise InvalidAddressError(
            f"invalid creator address ({err}): {InvalidAddressError.description}"
        ) from err


@dataclass
class MsgCreateGame:
    """Request to start a game between two players."""

    creator: str = ""
    black: str = ""
    red: str = ""

    def validate_basic(self) -> None:
        """Check that the creator address is well formed."""
        _check_creator(self.creator)


@dataclass
class MsgCreateGameResponse:
    game_index: str = ""


@dataclass
class MsgCreatePost:
    """Request to publish a post."""

    creator: str = ""
    title: str = ""
    body: str = ""

    def validate_basic(self) -> None:
        """Check that the creator address is well formed."""
        _check_creator(self.creator)


@dataclass
class MsgCreatePostResponse:
    pass


@dataclass
class MsgUpdateParams:
    """Governance request to replace the module parameters."""

    authority: str = ""
    params: Params = field(default_factory=Params)

    def validate_basic(self) -> None:
        """Check the authority address and the new parameters."""
        try:
            acc_address_from_bech32(self.authority)
        except Bech32Error as err:
            raise Bech32Error(f"invalid authority address: {err}") from err
        self.params.validate()


@dataclass
class MsgUpdateParamsResponse:
    pass


@dataclass
class QueryParamsRequest:
    pass


@dataclass
class QueryParamsResponse:
    params: Params = field(default_factory=Params)


@dataclass
class QueryGetStoredGameRequest:
    index: str = ""


@dataclass
class QueryGetStoredGameResponse:
    stored_game: StoredGame = field(default_factory=StoredGame)


@dataclass
class PageRequest:
    """Which slice of a listing to return."""

    key: bytes | None = None
    offset: int = 0
    limit: int = 0
    count_total: bool = False
    reverse: bool = False


@dataclass
class PageResponse:
    """Where a listing continues, and optionally how long it is."""

    next_key: bytes | None = None
    total: int = 0


@dataclass
class QueryAllStoredGameRequest:
    pagination: PageRequest | None = None


@dataclass
class QueryAllStoredGameResponse:
    stored_game: list[StoredGame] = field(default_factory=list)
    pagination: PageResponse | None = None


@dataclass
class QueryGetSystemInfoRequest:
    pass


@dataclass
class QueryGetSystemInfoResponse:
    system_info: SystemInfo = field(default_factory=SystemInfo)