import pytest

from checkers.rules import (
    BLACK_PLAYER,
    NO_POS,
    NO_PLAYER,
    RED_PLAYER,
    Piece,
    Pos,
    RulesError,
    capture,
    new_game,
    parse,
    parse_piece,
)


def make_board(cells):
    rows = [["*"] * 8 for _ in range(8)]
    for (x, y), char in cells.items():
        rows[y][x] = char
    return "|".join("".join(row) for row in rows)


def test_capture_is_midpoint():
    assert capture(Pos(1, 2), Pos(3, 4)) == Pos(2, 3)


def test_new_game_round_trips_through_text():
    game = new_game()
    parsed = parse(str(game))
    assert parsed.pieces == game.pieces
    assert str(parsed) == str(game)


def test_new_game_layout_invariants():
    game = new_game()
    black = [pos for pos, p in game.pieces.items() if p.player == BLACK_PLAYER]
    red = [pos for pos, p in game.pieces.items() if p.player == RED_PLAYER]
    assert len(black) == len(red)
    assert all(pos.y < 3 for pos in black)
    assert all(pos.y >= 5 for pos in red)
    assert all((pos.x + pos.y) % 2 == 1 for pos in game.pieces)


def test_new_game_black_to_move_no_winner():
    game = new_game()
    assert game.turn_is(BLACK_PLAYER)
    assert game.winner() == NO_PLAYER


def test_first_move_passes_turn():
    game = new_game()
    assert game.move(Pos(1, 2), Pos(2, 3)) == NO_POS
    assert game.turn_is(RED_PLAYER)
    assert game.piece_at(Pos(2, 3))
    assert not game.piece_at(Pos(1, 2))


def test_red_cannot_move_first():
    game = new_game()
    with pytest.raises(RulesError, match="turn"):
        game.move(Pos(0, 5), Pos(1, 4))


def test_move_errors():
    game = new_game()
    with pytest.raises(RulesError, match="No piece at source position"):
        game.move(Pos(2, 3), Pos(3, 4))
    with pytest.raises(RulesError, match="Already piece at destination position"):
        game.move(Pos(0, 1), Pos(1, 2))
    with pytest.raises(RulesError, match="Invalid move"):
        game.move(Pos(1, 2), Pos(1, 4))


def test_jump_captures_and_wins():
    game = parse(make_board({(1, 2): "b", (2, 3): "r"}))
    src, dst = Pos(1, 2), Pos(3, 4)
    captured = game.move(src, dst)
    assert captured == capture(src, dst)
    assert not game.piece_at(captured)
    assert game.winner() == BLACK_PLAYER
    assert game.turn_is(BLACK_PLAYER)


def test_forced_jump_blocks_simple_move():
    game = parse(make_board({(1, 2): "b", (2, 3): "r", (5, 2): "b"}))
    assert not game.valid_move(Pos(5, 2), Pos(6, 3))
    assert game.valid_move(Pos(1, 2), Pos(3, 4))
    with pytest.raises(RulesError, match="Invalid move"):
        game.move(Pos(5, 2), Pos(6, 3))


def test_multi_jump_keeps_turn_until_done():
    game = parse(make_board({(1, 2): "b", (2, 3): "r", (4, 5): "r", (6, 7): "r"}))
    game.move(Pos(1, 2), Pos(3, 4))
    assert game.turn_is(BLACK_PLAYER)
    game.move(Pos(3, 4), Pos(5, 6))
    assert game.turn_is(RED_PLAYER)
    assert not game.piece_at(Pos(4, 5))


def test_reaching_last_row_crowns_piece():
    game = parse(make_board({(1, 6): "b", (6, 1): "r"}))
    game.move(Pos(1, 6), Pos(0, 7))
    assert game.pieces[Pos(0, 7)] == Piece(BLACK_PLAYER, True)
    assert game.turn_is(RED_PLAYER)
    assert parse(str(game)).pieces == game.pieces


def test_king_moves_backward_but_man_does_not():
    king = parse(make_board({(3, 4): "B", (6, 1): "r"}))
    man = parse(make_board({(3, 4): "b", (6, 1): "r"}))
    assert king.valid_move(Pos(3, 4), Pos(2, 3))
    assert not man.valid_move(Pos(3, 4), Pos(2, 3))


def test_king_jumps_backward():
    game = parse(make_board({(3, 4): "B", (2, 3): "r", (6, 7): "r"}))
    assert game.valid_jump(Pos(3, 4), Pos(1, 2))
    game.move(Pos(3, 4), Pos(1, 2))
    assert not game.piece_at(Pos(2, 3))


def test_red_wins_when_black_is_gone():
    game = parse(make_board({(0, 5): "r"}))
    assert game.winner() == RED_PLAYER


def test_parse_piece():
    assert parse_piece("R") == Piece(RED_PLAYER, True)
    assert parse_piece("b") == Piece(BLACK_PLAYER, False)
    assert parse_piece("w") is None


def test_parse_rejects_wrong_length():
    with pytest.raises(RulesError, match="invalid board string"):
        parse("rb")


def test_parse_rejects_invalid_piece():
    board = str(new_game()).replace("b", "w", 1)
    with pytest.raises(RulesError) as info:
        parse(board)
    assert str(info.value) == "invalid board, invalid piece at 1, 0"


def test_parse_rejects_piece_out_of_bounds():
    board = make_board({})
    board = "*" + board[:8] + board[9:]
    with pytest.raises(RulesError, match="out of bounds"):
        parse(board)