"""State access, message handling and queries of the checkers module."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from checkers.address import Bech32Error, acc_address_from_bech32
from checkers.errors import MODULE_NAME, InvalidSignerError, StatusCode, StatusError
from checkers.types import (
    PARAMS_KEY,
    STORED_GAME_KEY_PREFIX,
    SYSTEM_INFO_KEY,
    MsgCreateGame,
    MsgCreateGameResponse,
    MsgCreatePost,
    MsgCreatePostResponse,
    MsgUpdateParams,
    MsgUpdateParamsResponse,
    PageRequest,
    PageResponse,
    Params,
    QueryAllStoredGameRequest,
    QueryAllStoredGameResponse,
    QueryGetStoredGameRequest,
    QueryGetStoredGameResponse,
    QueryGetSystemInfoRequest,
    QueryGetSystemInfoResponse,
    QueryParamsRequest,
    QueryParamsResponse,
    StoredGame,
    SystemInfo,
    key_prefix,
    stored_game_key,
)

DEFAULT_LIMIT = 100

_STORED_GAME_PREFIX = key_prefix(STORED_GAME_KEY_PREFIX)
_SYSTEM_INFO_ENTRY = key_prefix(SYSTEM_INFO_KEY) + b"\x00"


class KVStore:
    """An in-memory key-value store with keys iterated in byte order."""

    def __init__(self) -> None:
        self._data: dict[bytes, bytes] = {}

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: bytes) -> bytes | None:
        """Return the value under key, or None when there is none."""
        return self._data.get(bytes(key))

    def set(self, key: bytes, value: bytes) -> None:
        """Store value under key; neither may be missing and the key not empty."""
        if not key:
            raise ValueError("key is nil or empty")
        if value is None:
            raise ValueError("value is nil")
        self._data[bytes(key)] = bytes(value)

    def delete(self, key: bytes) -> None:
        """Remove key if present."""
        self._data.pop(bytes(key), None)

    def iterate(self, prefix: bytes) -> Iterator[tuple[bytes, bytes]]:
        """Yield (key, value) pairs whose key starts with prefix, in key order."""
        prefix = bytes(prefix)
        snapshot = sorted(
            (key, value) for key, value in self._data.items() if key.startswith(prefix)
        )
        yield from snapshot


def _from_key(keys: list[bytes], start: bytes, reverse: bool) -> int:
    """Index in keys where a listing that begins at start opens."""
    first = next((i for i, key in enumerate(keys) if key >= start), None)
    if not reverse:
        return len(keys) if first is None else first
    return len(keys) - 1 if first is None else first


def paginate(
    store: KVStore, prefix: bytes, page_request: PageRequest | None
) -> tuple[list[tuple[bytes, bytes]], PageResponse]:
    """Return one page of the entries under prefix, keys relative to it, and where it ends."""
    request = page_request or PageRequest()
    offset, start, limit = request.offset, request.key, request.limit
    count_total = request.count_total
    if offset > 0 and start:
        raise ValueError("invalid request, either offset or key is expected, got both")
    if limit == 0:
        limit = DEFAULT_LIMIT
        count_total = True

    entries = [(key[len(prefix):], value) for key, value in store.iterate(prefix)]

    if start:
        keys = [key for key, _ in entries]
        at = _from_key(keys, start, request.reverse)
        if request.reverse:
            listing = list(reversed(entries[: at + 1]))
        else:
            listing = entries[at:]
        page = listing[:limit]
        next_key = listing[limit][0] if len(listing) > limit else None
        return page, PageResponse(next_key=next_key)

    listing = list(reversed(entries)) if request.reverse else entries
    end = offset + limit
    page = listing[offset:end]
    next_key = listing[end][0] if len(listing) > end else None
    response = PageResponse(next_key=next_key)
    if count_total:
        response.total = len(listing)
    return page, response


class Keeper:
    """Holds the module's store and answers its queries."""

    def __init__(
        self,
        authority: str,
        store: KVStore | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        try:
            acc_address_from_bech32(authority)
        except Bech32Error as err:
            raise ValueError(f"invalid authority address: {authority}") from err
        self.authority = authority
        self.store = KVStore() if store is None else store
        self.logger = logging.LoggerAdapter(
            logger or logging.getLogger(MODULE_NAME), {"module": f"x/{MODULE_NAME}"}
        )

    # Parameters

    def get_params(self) -> Params:
        """Return the stored parameters, or the empty set when none are stored."""
        data = self.store.get(PARAMS_KEY)
        if data is None:
            return Params()
        return Params.from_bytes(data)

    def set_params(self, params: Params) -> None:
        """Store the parameters."""
        self.store.set(PARAMS_KEY, params.to_bytes())

    # Stored games

    def set_stored_game(self, stored_game: StoredGame) -> None:
        """Store a game under its index, replacing any game there."""
        self.store.set(
            _STORED_GAME_PREFIX + stored_game_key(stored_game.index), stored_game.to_bytes()
        )

    def get_stored_game(self, index: str) -> StoredGame | None:
        """Return the game with the given index, or None."""
        data = self.store.get(_STORED_GAME_PREFIX + stored_game_key(index))
        if data is None:
            return None
        return StoredGame.from_bytes(data)

    def remove_stored_game(self, index: str) -> None:
        """Delete the game with the given index."""
        self.store.delete(_STORED_GAME_PREFIX + stored_game_key(index))

    def all_stored_games(self) -> list[StoredGame]:
        """Return every stored game in key order."""
        return [
            StoredGame.from_bytes(value)
            for _, value in self.store.iterate(_STORED_GAME_PREFIX)
        ]

    # System info

    def set_system_info(self, system_info: SystemInfo) -> None:
        """Store the module's system info."""
        self.store.set(_SYSTEM_INFO_ENTRY, system_info.to_bytes())

    def get_system_info(self) -> SystemInfo | None:
        """Return the system info, or None when it was never set."""
        data = self.store.get(_SYSTEM_INFO_ENTRY)
        if data is None:
            return None
        return SystemInfo.from_bytes(data)

    def remove_system_info(self) -> None:
        """Delete the system info."""
        self.store.delete(_SYSTEM_INFO_ENTRY)

    # Queries

    def params(self, request: QueryParamsRequest | None) -> QueryParamsResponse:
        """Answer a parameters query."""
        if request is None:
            raise StatusError(StatusCode.INVALID_ARGUMENT, "invalid request")
        return QueryParamsResponse(params=self.get_params())

    def stored_game(
        self, request: QueryGetStoredGameRequest | None
    ) -> QueryGetStoredGameResponse:
        """Answer a query for one stored game."""
        if request is None:
            raise StatusError(StatusCode.INVALID_ARGUMENT, "invalid request")
        game = self.get_stored_game(request.index)
        if game is None:
            raise StatusError(StatusCode.NOT_FOUND, "not found")
        return QueryGetStoredGameResponse(stored_game=game)

    def stored_game_all(
        self, request: QueryAllStoredGameRequest | None
    ) -> QueryAllStoredGameResponse:
        """Answer a paginated listing of stored games."""
        if request is None:
            raise StatusError(StatusCode.INVALID_ARGUMENT, "invalid request")
        try:
            page, page_response = paginate(
                self.store, _STORED_GAME_PREFIX, request.pagination
            )
            games = [StoredGame.from_bytes(value) for _, value in page]
        except ValueError as err:
            raise StatusError(StatusCode.INTERNAL, str(err)) from err
        return QueryAllStoredGameResponse(stored_game=games, pagination=page_response)

    def system_info(
        self, request: QueryGetSystemInfoRequest | None
    ) -> QueryGetSystemInfoResponse:
        """Answer a system info query."""
        if request is None:
            raise StatusError(StatusCode.INVALID_ARGUMENT, "invalid request")
        info = self.get_system_info()
        if info is None:
            raise StatusError(StatusCode.NOT_FOUND, "not found")
        return QueryGetSystemInfoResponse(system_info=info)


class MsgServer:
    """Handles the module's transaction messages against a keeper."""

    def __init__(self, keeper: Keeper) -> None:
        self.keeper = keeper

    def create_game(self, msg: MsgCreateGame) -> MsgCreateGameResponse:
        """Accept a game creation request."""
        return MsgCreateGameResponse()

    def create_post(self, msg: MsgCreatePost) -> MsgCreatePostResponse:
        """Accept a post creation request."""
        return MsgCreatePostResponse()

    def update_params(self, msg: MsgUpdateParams) -> MsgUpdateParamsResponse:
        """Replace the parameters when the message comes from the authority."""
        if self.keeper.authority != msg.authority:
            raise InvalidSignerError(
                f"invalid authority; expected {self.keeper.authority}, got {msg.authority}: "
                f"{InvalidSignerError.description}"
            )
        self.keeper.set_params(msg.params)
        return MsgUpdateParamsResponse()