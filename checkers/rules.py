"""Checkers board rules: positions, pieces, legal moves and the board's text form."""

from __future__ import annotations

from dataclasses import dataclass, field

BOARD_DIM = 8
RED = "red"
BLACK = "black"
ROW_SEP = "|"


class RulesError(ValueError):
    """Raised for an illegal move or a board string that cannot be read."""


@dataclass(frozen=True)
class Player:
    """A side of the game, identified by its colour."""

    color: str

    def __str__(self) -> str:
        return f"{{{self.color}}}"


BLACK_PLAYER = Player(BLACK)
RED_PLAYER = Player(RED)
NO_PLAYER = Player("NO_PLAYER")

PLAYERS = {RED: RED_PLAYER, BLACK: BLACK_PLAYER}
OPPONENTS = {BLACK_PLAYER: RED_PLAYER, RED_PLAYER: BLACK_PLAYER}


@dataclass(frozen=True)
class Pos:
    """A square on the board; x is the column, y the row."""

    x: int
    y: int

    def __str__(self) -> str:
        return f"{{{self.x} {self.y}}}"


NO_POS = Pos(-1, -1)


@dataclass(frozen=True)
class Piece:
    """A piece owned by a player, possibly crowned."""

    player: Player
    king: bool = False


NO_PIECE = Piece(NO_PLAYER, False)

PIECE_STRINGS = {
    RED_PLAYER: "r",
    BLACK_PLAYER: "b",
    NO_PLAYER: "*",
}

STRING_PIECES = {
    "r": Piece(RED_PLAYER, False),
    "b": Piece(BLACK_PLAYER, False),
    "R": Piece(RED_PLAYER, True),
    "B": Piece(BLACK_PLAYER, True),
    "*": NO_PIECE,
}


def _half(n: int) -> int:
    """Halve an integer, truncating toward zero."""
    return n // 2 if n >= 0 else -((-n) // 2)


def capture(src: Pos, dst: Pos) -> Pos:
    """Return the square jumped over when moving from src to dst."""
    return Pos(_half(src.x + dst.x), _half(src.y + dst.y))


def _build_tables():
    usable = frozenset(
        Pos(x, y)
        for y in range(BOARD_DIM)
        for x in range((y + 1) % 2, BOARD_DIM, 2)
    )
    moves: dict[Player, dict[Pos, frozenset[Pos]]] = {BLACK_PLAYER: {}, RED_PLAYER: {}}
    jumps: dict[Player, dict[Pos, dict[Pos, Pos]]] = {BLACK_PLAYER: {}, RED_PLAYER: {}}
    king_moves: dict[Pos, frozenset[Pos]] = {}
    king_jumps: dict[Pos, dict[Pos, Pos]] = {}

    for pos in usable:
        all_steps: set[Pos] = set()
        all_leaps: dict[Pos, Pos] = {}
        for player, forward in ((BLACK_PLAYER, 1), (RED_PLAYER, -1)):
            steps: set[Pos] = set()
            leaps: dict[Pos, Pos] = {}
            for side in (1, -1):
                step = Pos(pos.x + side, pos.y + forward)
                if step in usable:
                    steps.add(step)
                leap = Pos(pos.x + 2 * side, pos.y + 2 * forward)
                if leap in usable:
                    leaps[leap] = capture(pos, leap)
            moves[player][pos] = frozenset(steps)
            jumps[player][pos] = leaps
            all_steps |= steps
            all_leaps.update(leaps)
        king_moves[pos] = frozenset(all_steps)
        king_jumps[pos] = all_leaps

    return usable, moves, jumps, king_moves, king_jumps


USABLE, MOVES, JUMPS, KING_MOVES, KING_JUMPS = _build_tables()

_NO_STEPS: frozenset[Pos] = frozenset()
_NO_LEAPS: dict[Pos, Pos] = {}


@dataclass
class Game:
    """A board position together with whose turn it is."""

    pieces: dict[Pos, Piece] = field(default_factory=dict)
    turn: Player = BLACK_PLAYER

    def piece_at(self, pos: Pos) -> bool:
        """Tell whether a piece stands on pos."""
        return pos in self.pieces

    def turn_is(self, player: Player) -> bool:
        """Tell whether it is player's turn."""
        return self.turn == player

    def winner(self) -> Player:
        """Return the player left alone on the board, or NO_PLAYER."""
        black_count = sum(1 for p in self.pieces.values() if p.player == BLACK_PLAYER)
        red_count = sum(1 for p in self.pieces.values() if p.player == RED_PLAYER)
        if black_count > 0 and red_count <= 0:
            return BLACK_PLAYER
        if red_count > 0 and black_count <= 0:
            return RED_PLAYER
        return NO_PLAYER

    @staticmethod
    def _step_targets(src: Pos, piece: Piece) -> frozenset[Pos]:
        if piece.king:
            return KING_MOVES.get(src, _NO_STEPS)
        return MOVES.get(piece.player, {}).get(src, _NO_STEPS)

    @staticmethod
    def _jump_targets(src: Pos, piece: Piece) -> dict[Pos, Pos]:
        if piece.king:
            return KING_JUMPS.get(src, _NO_LEAPS)
        return JUMPS.get(piece.player, {}).get(src, _NO_LEAPS)

    def valid_move(self, src: Pos, dst: Pos) -> bool:
        """Tell whether the piece on src may go to dst, by a step or a jump."""
        if not self.piece_at(src) or self.piece_at(dst):
            return False
        piece = self.pieces[src]
        if dst in self._step_targets(src, piece):
            return not self._player_has_jump(piece.player)
        return self.valid_jump(src, dst)

    def valid_jump(self, src: Pos, dst: Pos) -> bool:
        """Tell whether the piece on src may jump to dst over an opponent."""
        if not self.piece_at(src) or self.piece_at(dst):
            return False
        piece = self.pieces[src]
        captured = self._jump_targets(src, piece).get(dst)
        if captured is None:
            return False
        victim = self.pieces.get(captured)
        return victim is not None and victim.player == OPPONENTS.get(piece.player)

    def _king_piece(self, dst: Pos) -> None:
        piece = self.pieces.get(dst)
        if piece is None:
            return
        if (dst.y == 0 and piece.player == RED_PLAYER) or (
            dst.y == BOARD_DIM - 1 and piece.player == BLACK_PLAYER
        ):
            self.pieces[dst] = Piece(piece.player, True)

    def _update_turn(self, dst: Pos, jumped: bool) -> None:
        opponent = OPPONENTS.get(self.turn, NO_PLAYER)
        if (not jumped or not self._jump_possible_from(dst)) and self._player_has_move(opponent):
            self.turn = opponent

    def _jump_possible_from(self, src: Pos) -> bool:
        piece = self.pieces.get(src)
        if piece is None:
            return False
        return any(self.valid_jump(src, dst) for dst in self._jump_targets(src, piece))

    def _move_possible_from(self, src: Pos) -> bool:
        piece = self.pieces.get(src)
        if piece is None:
            return False
        return any(self.valid_move(src, dst) for dst in self._step_targets(src, piece))

    def _player_has_move(self, player: Player) -> bool:
        return any(
            piece.player == player
            and (self._move_possible_from(loc) or self._jump_possible_from(loc))
            for loc, piece in list(self.pieces.items())
        )

    def _player_has_jump(self, player: Player) -> bool:
        return any(
            piece.player == player and self._jump_possible_from(loc)
            for loc, piece in list(self.pieces.items())
        )

    def move(self, src: Pos, dst: Pos) -> Pos:
        """Play a move; return the captured square, or NO_POS when nothing was taken."""
        piece = self.pieces.get(src)
        if piece is None:
            raise RulesError(f"No piece at source position: {src}")
        if self.piece_at(dst):
            raise RulesError(f"Already piece at destination position: {dst}")
        if not self.turn_is(piece.player):
            raise RulesError(f"Not {piece.player}'s turn")
        if not self.valid_move(src, dst):
            raise RulesError(f"Invalid move: {src} to {dst}")

        captured = NO_POS
        if self.valid_jump(src, dst):
            captured = capture(src, dst)
            self.pieces[dst] = self.pieces.pop(src)
            del self.pieces[captured]
        else:
            self.pieces[dst] = self.pieces.pop(src)
        self._update_turn(dst, captured != NO_POS)
        self._king_piece(dst)
        return captured

    def _cell(self, pos: Pos) -> str:
        piece = self.pieces.get(pos)
        if piece is None:
            return PIECE_STRINGS[NO_PLAYER]
        text = PIECE_STRINGS.get(piece.player, "")
        return text.upper() if piece.king else text

    def __str__(self) -> str:
        return ROW_SEP.join(
            "".join(self._cell(Pos(x, y)) for x in range(BOARD_DIM))
            for y in range(BOARD_DIM)
        )


def new_game() -> Game:
    """Return a game in the starting position with black to move."""
    game = Game()
    for pos in USABLE:
        if 0 <= pos.y < 3:
            game.pieces[pos] = Piece(BLACK_PLAYER, False)
        if BOARD_DIM - 3 <= pos.y < BOARD_DIM:
            game.pieces[pos] = Piece(RED_PLAYER, False)
    return game


def parse_piece(s: str) -> Piece | None:
    """Return the piece a one-character string stands for, or None."""
    return STRING_PIECES.get(s)


def parse(s: str) -> Game:
    """Read a board string; the resulting game has black to move."""
    if len(s.encode("utf-8")) != BOARD_DIM * BOARD_DIM + (BOARD_DIM - 1):
        raise RulesError(f"invalid board string: {s}")
    game = Game()
    for y, row in enumerate(s.split(ROW_SEP)):
        for x, char in enumerate(row):
            if x >= BOARD_DIM or y >= BOARD_DIM:
                raise RulesError(f"invalid board, piece out of bounds: {x}, {y}")
            piece = parse_piece(char)
            if piece is None:
                raise RulesError(f"invalid board, invalid piece at {x}, {y}")
            if piece != NO_PIECE:
                game.pieces[Pos(x, y)] = piece
    return game