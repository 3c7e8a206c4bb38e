"""
Turn free-text commands like "knight to c3" into a Move.

The command only names the piece type and the target square, so the board decides which of the pieces of that
type is meant: the first one (in square order, a8 -> h1) that can move there.
"""

import re
from typing import Optional

from lobbychess.chess.board import Board
from lobbychess.chess.moves import Move, is_pseudo_legal
from lobbychess.chess.pieces import Color, Piece, PieceType
from lobbychess.chess.square import Square, to_index

PIECE_NAMES: dict[str, PieceType] = {
    "PAWN": PieceType.PAWN,
    "KNIGHT": PieceType.KNIGHT,
    "BISHOP": PieceType.BISHOP,
    "ROOK": PieceType.ROOK,
    "QUEEN": PieceType.QUEEN,
    "KING": PieceType.KING,
}

COMMAND_PATTERN = re.compile(
    rf"({'|'.join(PIECE_NAMES)})\s+TO\s+([A-H][1-8])"
)


def is_natural_language_command(message: str) -> bool:
    """Quick check whether a chat message looks like a move command at all"""
    upper_message = f" {message.upper().strip()} "
    return " TO " in upper_message and any(name in upper_message for name in PIECE_NAMES)


def parse_natural_language(
    command: str,
    color: Color,
    board: Board,
    en_passant_square: Optional[Square] = None,
) -> Optional[Move]:
    """Returns None if the command cannot be read, or none of your pieces of that type can reach the square."""
    match = COMMAND_PATTERN.search(command.upper())
    if match is None:
        return None

    piece = Piece(PIECE_NAMES[match.group(1)], color)
    target_square = to_index(match.group(2).lower())
    from_square = find_source_square(piece, target_square, board, en_passant_square)
    if from_square is None:
        return None
    return Move(from_square, target_square)


def find_source_square(
    piece: Piece,
    target_square: Square,
    board: Board,
    en_passant_square: Optional[Square] = None,
) -> Optional[Square]:
    return next(
        (
            square
            for square in board.locate_color(piece.color)
            if board.piece(square) == piece
            and is_pseudo_legal(piece, square, target_square, board, en_passant_square)
        ),
        None,
    )
