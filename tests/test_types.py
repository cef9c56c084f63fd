from dataclasses import replace

import pytest

from checkers import rules
from checkers.address import ALICE, BOB, Bech32Error, acc_address_from_bech32, acc_address_to_bech32
from checkers.errors import (
    GameNotParseableError,
    InvalidAddressError,
    InvalidBlackError,
    InvalidRedError,
)
from checkers.types import (
    GenesisState,
    MsgCreateGame,
    MsgCreatePost,
    MsgUpdateParams,
    Params,
    StoredGame,
    SystemInfo,
    default_genesis,
    default_params,
    key_prefix,
    stored_game_key,
)

SAMPLE_ADDRESS = acc_address_to_bech32(bytes(range(1, 21)))


def stored_game_1() -> StoredGame:
    return StoredGame(
        black=ALICE,
        red=BOB,
        index="1",
        board=str(rules.new_game()),
        turn="b",
    )


def test_can_get_address_black():
    assert stored_game_1().black_address() == acc_address_from_bech32(ALICE)


def test_get_address_wrong_black():
    game = replace(stored_game_1(), black="cosmos1jmjfq0tplp9tmx4v9uemw72y4d2wa5nr3xn9d4")
    expected = (
        "black address is invalid: cosmos1jmjfq0tplp9tmx4v9uemw72y4d2wa5nr3xn9d4: "
        "decoding bech32 failed: invalid checksum (expected 3xn9d3 got 3xn9d4)"
    )
    with pytest.raises(InvalidBlackError) as exc:
        game.black_address()
    assert str(exc.value) == expected
    with pytest.raises(InvalidBlackError) as exc:
        game.validate()
    assert str(exc.value) == expected


def test_can_get_address_red():
    assert stored_game_1().red_address() == acc_address_from_bech32(BOB)


def test_get_address_wrong_red():
    game = replace(stored_game_1(), red="cosmos1xyxs3skf3f4jfqeuv89yyaqvjc6lffavxqhc8h")
    expected = (
        "red address is invalid: cosmos1xyxs3skf3f4jfqeuv89yyaqvjc6lffavxqhc8h: "
        "decoding bech32 failed: invalid checksum (expected xqhc8g got xqhc8h)"
    )
    with pytest.raises(InvalidRedError) as exc:
        game.red_address()
    assert str(exc.value) == expected
    with pytest.raises(InvalidRedError) as exc:
        game.validate()
    assert str(exc.value) == expected


def test_parse_game_correct():
    game = stored_game_1().parse_game()
    assert game.pieces == rules.new_game().pieces
    assert game.turn == rules.BLACK_PLAYER


def test_parse_game_can_if_changed_ok():
    stored = stored_game_1()
    stored.board = stored.board.replace("b", "r", 1)
    game = stored.parse_game()
    assert game.pieces[rules.Pos(1, 0)] == rules.Piece(rules.RED_PLAYER, False)
    assert game.pieces != rules.new_game().pieces


def test_parse_game_wrong_piece_color():
    stored = stored_game_1()
    stored.board = stored.board.replace("b", "w", 1)
    with pytest.raises(GameNotParseableError) as exc:
        stored.parse_game()
    assert str(exc.value) == "game cannot be parsed: invalid board, invalid piece at 1, 0"
    with pytest.raises(GameNotParseableError) as exc:
        stored.validate()
    assert str(exc.value) == "game cannot be parsed: invalid board, invalid piece at 1, 0"


def test_parse_game_wrong_turn_color():
    stored = replace(stored_game_1(), turn="w")
    with pytest.raises(GameNotParseableError) as exc:
        stored.parse_game()
    assert str(exc.value) == "game cannot be parsed: turn: w"
    with pytest.raises(GameNotParseableError) as exc:
        stored.validate()
    assert str(exc.value) == "game cannot be parsed: turn: w"


def test_parse_game_red_turn():
    game = replace(stored_game_1(), turn="r").parse_game()
    assert game.turn == rules.RED_PLAYER


def test_game_validate_ok():
    assert stored_game_1().validate() is None


def test_default_genesis_expected_initial_next_id():
    assert default_genesis() == GenesisState(
        stored_game_list=[],
        system_info=SystemInfo(1),
    )


@pytest.mark.parametrize(
    ("gen_state", "valid"),
    [
        (default_genesis(), True),
        (
            GenesisState(
                system_info=SystemInfo(next_id=46),
                stored_game_list=[StoredGame(index="0"), StoredGame(index="1")],
            ),
            True,
        ),
        (
            GenesisState(stored_game_list=[StoredGame(index="0"), StoredGame(index="0")]),
            False,
        ),
    ],
    ids=["default is valid", "valid genesis state", "duplicated storedGame"],
)
def test_genesis_state_validate(gen_state, valid):
    if valid:
        assert gen_state.validate() is None
    else:
        with pytest.raises(ValueError, match="duplicated index for storedGame"):
            gen_state.validate()


@pytest.mark.parametrize("msg_class", [MsgCreateGame, MsgCreatePost])
def test_msg_validate_basic_invalid_address(msg_class):
    with pytest.raises(InvalidAddressError) as exc:
        msg_class(creator="invalid_address").validate_basic()
    assert str(exc.value).startswith("invalid creator address (")
    assert exc.value.code == 7


@pytest.mark.parametrize("msg_class", [MsgCreateGame, MsgCreatePost])
def test_msg_validate_basic_valid_address(msg_class):
    assert msg_class(creator=SAMPLE_ADDRESS).validate_basic() is None


def test_msg_update_params_invalid_authority():
    with pytest.raises(Bech32Error, match="invalid authority address"):
        MsgUpdateParams(authority="invalid", params=default_params()).validate_basic()


def test_msg_update_params_valid():
    assert MsgUpdateParams(authority=ALICE).validate_basic() is None


def test_keys():
    assert stored_game_key("1") == b"1/"
    assert stored_game_key("") == b"/"
    assert key_prefix("StoredGame/value/") == b"StoredGame/value/"


def test_params_bytes():
    assert Params().to_bytes() == b""
    assert Params.from_bytes(b"") == default_params()


def test_system_info_bytes():
    assert SystemInfo(1).to_bytes() == b"\x08\x01"
    assert SystemInfo(0).to_bytes() == b""
    assert SystemInfo(300).to_bytes() == b"\x08\xac\x02"
    assert SystemInfo.from_bytes(b"\x08\xac\x02") == SystemInfo(300)


def test_stored_game_round_trip():
    game = stored_game_1()
    assert StoredGame.from_bytes(game.to_bytes()) == game
    assert StoredGame.from_bytes(StoredGame().to_bytes()) == StoredGame()


def test_stored_game_index_encoding():
    assert StoredGame(index="1").to_bytes() == b"\x0a\x011"


def test_from_bytes_truncated():
    with pytest.raises(ValueError):
        StoredGame.from_bytes(b"\x0a\x05ab")
    with pytest.raises(ValueError):
        SystemInfo.from_bytes(b"\x08\x80")