"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the movement pattern of each piece type.

A move accepted here is only pseudo-legal: it fits the piece's pattern, the path is free, and it does not land on
one of your own pieces. Whether it leaves your own king in check is decided later by Board/Game.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from lobbychess.chess.pieces import PIECE_TO_CODE, Color, Piece, PieceType, promotion_type
from lobbychess.chess.square import (
    Square,
    file_of,
    row_of,
    square_at,
    to_index,
    to_notation,
)


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Square) -> Piece: ...


Vector = tuple[int, int]


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square
    promote_to: Optional[PieceType] = None

    @classmethod
    def from_algebraic(
        cls, from_square: str, to_square: str, promotion: Optional[str] = None
    ) -> Self:
        """
        Build a move from what a client sends: two square names and optionally the letter of the promotion piece.

        ex) ("e7", "e8", "Q"): pawn moves from e7 to e8 and promotes to a queen
        """
        promote_to = promotion_type(promotion) if promotion else None
        return cls(to_index(from_square), to_index(to_square), promote_to)

    def to_uci(self) -> str:
        """Universal Chess Interface notation, handy for logging: e2e4, e7e8q"""
        piece_char = PIECE_TO_CODE[self.promote_to].lower() if self.promote_to else ""
        return f"{to_notation(self.from_square)}{to_notation(self.to_square)}{piece_char}"


# --- GEOMETRY HELPERS ---
def delta(from_square: Square, to_square: Square) -> Vector:
    """(change in file, change in row). Row counts from the top, so White moving up the board has a negative row change."""
    return (
        file_of(to_square) - file_of(from_square),
        row_of(to_square) - row_of(from_square),
    )


def squares_between(from_square: Square, to_square: Square) -> list[Square]:
    """
    Find the squares strictly in between two squares on the same rank, file or diagonal.

    Used by the sliding pieces to check if their path is blocked.
    """
    df, dr = delta(from_square, to_square)
    if (df, dr) == (0, 0) or not (df == 0 or dr == 0 or abs(df) == abs(dr)):
        raise ValueError(
            f"squares_between requires two distinct squares on one line. \n from: {to_notation(from_square)}\n to: {to_notation(to_square)}"
        )

    step_file = (df > 0) - (df < 0)
    step_row = (dr > 0) - (dr < 0)
    num_steps = max(abs(df), abs(dr))
    return [
        square_at(file_of(from_square) + step_file * i, row_of(from_square) + step_row * i)
        for i in range(1, num_steps)
    ]


def is_path_clear(from_square: Square, to_square: Square, board: Board) -> bool:
    return all(board.piece(square).is_empty for square in squares_between(from_square, to_square))


# --- MOVEMENT RULES ---
# White moves UP the board (towards row 0), Black moves DOWN.
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
PAWN_START_ROW: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}
PAWN_LAST_ROW: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 7}


def en_passant_victim_square(from_square: Square, to_square: Square) -> Square:
    """The pawn taken en passant stands behind the destination: on the destination's file, on the capturing pawn's rank."""
    return square_at(file_of(to_square), row_of(from_square))


def is_en_passant_capture(
    piece: Piece,
    from_square: Square,
    to_square: Square,
    board: Board,
    en_passant_square: Optional[Square],
) -> bool:
    """
    Diagonal pawn step onto an empty square, taking the enemy pawn that just moved two squares next to it.

    NOTE: en_passant_square holds the square of the pawn that double-stepped on the previous move (not the square
    it skipped). It is only valid for the very next move, the Game takes care of clearing it.
    """
    if en_passant_square is None or piece.type != PieceType.PAWN:
        return False
    df, dr = delta(from_square, to_square)
    if abs(df) != 1 or dr != PAWN_DIRECTION[piece.color]:
        return False
    if not board.piece(to_square).is_empty:
        return False
    victim_square = en_passant_victim_square(from_square, to_square)
    enemy_pawn = Piece(PieceType.PAWN, piece.color.opponent)
    return victim_square == en_passant_square and board.piece(victim_square) == enemy_pawn


def is_valid_pawn_move(
    piece: Piece,
    from_square: Square,
    to_square: Square,
    board: Board,
    en_passant_square: Optional[Square],
) -> bool:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally (including en passant)
    """
    direction = PAWN_DIRECTION[piece.color]
    df, dr = delta(from_square, to_square)
    target = board.piece(to_square)

    # single push
    if df == 0 and dr == direction:
        return target.is_empty

    # double push from the starting rank
    if df == 0 and dr == 2 * direction:
        if row_of(from_square) != PAWN_START_ROW[piece.color]:
            return False
        skipped_square = square_at(file_of(from_square), row_of(from_square) + direction)
        return target.is_empty and board.piece(skipped_square).is_empty

    # pawns take diagonally
    if abs(df) == 1 and dr == direction:
        if target.color == piece.color.opponent:
            return True
        return is_en_passant_capture(piece, from_square, to_square, board, en_passant_square)

    return False


def is_valid_knight_move(
    piece: Piece,
    from_square: Square,
    to_square: Square,
    board: Board,
    en_passant_square: Optional[Square],
) -> bool:
    """Knights jump (never blocked): one square along one axis and two along the other"""
    df, dr = delta(from_square, to_square)
    return {abs(df), abs(dr)} == {1, 2}


def is_valid_bishop_move(
    piece: Piece,
    from_square: Square,
    to_square: Square,
    board: Board,
    en_passant_square: Optional[Square],
) -> bool:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    df, dr = delta(from_square, to_square)
    if abs(df) != abs(dr) or df == 0:
        return False
    return is_path_clear(from_square, to_square, board)


def is_valid_rook_move(
    piece: Piece,
    from_square: Square,
    to_square: Square,
    board: Board,
    en_passant_square: Optional[Square],
) -> bool:
    """Rooks move either horizontally or vertically"""
    df, dr = delta(from_square, to_square)
    if (df == 0) == (dr == 0):
        # either no movement at all, or off the rank and file
        return False
    return is_path_clear(from_square, to_square, board)


def is_valid_queen_move(
    piece: Piece,
    from_square: Square,
    to_square: Square,
    board: Board,
    en_passant_square: Optional[Square],
) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return is_valid_rook_move(
        piece, from_square, to_square, board, en_passant_square
    ) or is_valid_bishop_move(piece, from_square, to_square, board, en_passant_square)


def is_valid_king_move(
    piece: Piece,
    from_square: Square,
    to_square: Square,
    board: Board,
    en_passant_square: Optional[Square],
) -> bool:
    """
    The king can move by a single square at the time.

    NOTE: castling is not supported.
    """
    df, dr = delta(from_square, to_square)
    return max(abs(df), abs(dr)) == 1


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MovementRuleFn = Callable[[Piece, Square, Square, Board, Optional[Square]], bool]
MOVEMENT_RULES: dict[PieceType, MovementRuleFn] = {
    PieceType.PAWN: is_valid_pawn_move,
    PieceType.KNIGHT: is_valid_knight_move,
    PieceType.BISHOP: is_valid_bishop_move,
    PieceType.ROOK: is_valid_rook_move,
    PieceType.QUEEN: is_valid_queen_move,
    PieceType.KING: is_valid_king_move,
}


def is_pseudo_legal(
    piece: Piece,
    from_square: Square,
    to_square: Square,
    board: Board,
    en_passant_square: Optional[Square] = None,
) -> bool:
    """
    Is moving `piece` from `from_square` to `to_square` consistent with how that piece moves?
    ----

    * the destination may not hold one of your own pieces
    * the piece type's movement pattern must match
    * sliding pieces need every square in between to be empty

    Does NOT consider whether your own king ends up in check.
    """
    if piece.is_empty or from_square == to_square:
        return False
    if board.piece(to_square).color == piece.color:
        return False
    movement_rule = MOVEMENT_RULES[piece.type]
    return movement_rule(piece, from_square, to_square, board, en_passant_square)


def is_promotion_square(piece: Piece, square: Square) -> bool:
    """A pawn reaching the opponent's back rank"""
    return piece.type == PieceType.PAWN and row_of(square) == PAWN_LAST_ROW[piece.color]


def is_double_step(piece: Piece, move: Move) -> bool:
    _, dr = delta(move.from_square, move.to_square)
    return piece.type == PieceType.PAWN and abs(dr) == 2
