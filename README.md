# checkers

A Python library for the game of checkers (draughts). It holds the game rules, the records
kept for stored games, bech32 account addresses, and an in-memory keeper that stores games,
system information and parameters. It has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests, install the test extra and run pytest:

```
pip install ".[test]"
pytest
```

## Playing a game

`checkers.rules` has the board and the rules. Black moves first. A board prints as eight
rows joined by `|`: `b` and `r` are men, `B` and `R` are kings, and `*` is an empty square.

```python
from checkers.rules import new_game, parse, Pos, RulesError

game = new_game()
print(game)             # *b*b*b*b|b*b*b*b*|*b*b*b*b|********|********|r*r*r*r*|*r*r*r*r|r*r*r*r*
captured = game.move(Pos(1, 2), Pos(2, 3))   # NO_POS: nothing was taken

try:
    game.move(Pos(2, 3), Pos(3, 4))   # it is now red's turn
except RulesError as exc:
    print(exc)                        # Not {black}'s turn

same = parse(str(game))  # a parsed board has black to move
print(game.winner())     # NO_PLAYER while both sides have pieces
```

`Game.move` returns the position of the captured piece, or `NO_POS` when nothing was
captured. It raises `RulesError` for a move that is not allowed. If a jump is available, the
player must take it. After a jump the same player moves again as long as the jumping piece can
jump once more. The turn passes only when the opponent has a move. A man that reaches the far
row becomes a king, and a king may step and jump in all four diagonal directions.

`Game.valid_move` and `Game.valid_jump` check a move without playing it, `capture` gives the
square jumped over, and `parse_piece` reads a single board character. `parse` raises
`RulesError` for a board string of the wrong length or with an unknown character.

## Addresses

`checkers.address` encodes and decodes bech32 strings (`bech32_encode`, `bech32_decode`) and
reads account addresses with the `cosmos` prefix (`acc_address_from_bech32`,
`acc_address_to_bech32`). A bad checksum, prefix or length raises `Bech32Error`.
`find_account` looks an address up among `Account` records and returns `None` when it is
absent.

## Stored games

`checkers.types` defines `StoredGame`, `GenesisState`, `Params`, `SystemInfo` and the message
and query records. A stored game checks its players' addresses and its board:

```python
from checkers.address import acc_address_to_bech32
from checkers.rules import new_game
from checkers.types import StoredGame

game = StoredGame(
    index="1",
    board=str(new_game()),
    turn="b",
    black=acc_address_to_bech32(bytes([1] * 20)),
    red=acc_address_to_bech32(bytes([2] * 20)),
)
game.validate()          # raises InvalidBlackError, InvalidRedError or GameNotParseableError
board = game.parse_game()
```

`StoredGame`, `SystemInfo` and `Params` convert to and from protobuf wire bytes with
`to_bytes` and `from_bytes`. `GenesisState.validate` raises `ValueError` for duplicate game
indexes, and `default_genesis` returns a state whose next game id is 1.
`MsgCreateGame.validate_basic` and `MsgCreatePost.validate_basic` raise `InvalidAddressError`
for a malformed creator address.

## Keeping state

`checkers.keeper` has `Keeper`, which stores its records in a `KVStore` and needs a valid
authority address. It answers queries for parameters, system information and stored games,
and paginated stored-game listings through `PageRequest` (by offset or by key, with an
optional total). `MsgServer` handles game creation, post creation and parameter updates;
`update_params` raises `InvalidSignerError` unless the message comes from the keeper's
authority. `checkers.genesis` loads a `GenesisState` into a keeper with `init_genesis` and
reads it back out with `export_genesis`.

Failed queries raise `checkers.errors.StatusError`, which carries a `StatusCode` such as
`NOT_FOUND` or `INVALID_ARGUMENT`. The module's other errors derive from
`checkers.errors.CheckersError` and carry a codespace and a numeric code.

## What this package does not do

- It is a library only: it installs no command and runs no network service or node.
- State lives in memory in a `KVStore`; nothing is written to disk.
- `MsgServer.create_game` and `MsgServer.create_post` accept their messages and return empty
  responses; they do not create or store a game or a post.