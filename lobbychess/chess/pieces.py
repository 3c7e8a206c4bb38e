"""Defines the types of chess pieces"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self


class PieceType(Enum):
    EMPTY = auto()
    PAWN = auto()
    KNIGHT = auto()
    BISHOP = auto()
    ROOK = auto()
    QUEEN = auto()
    KING = auto()


class Color(Enum):
    NONE = auto()
    WHITE = auto()
    BLACK = auto()

    @property
    def opponent(self) -> "Color":
        if self == Color.WHITE:
            return Color.BLACK
        if self == Color.BLACK:
            return Color.WHITE
        return Color.NONE


AVAILABLE_COLOR_NAMES = [Color.WHITE.name, Color.BLACK.name]


CODE_TO_PIECE: dict[str, PieceType] = {
    "P": PieceType.PAWN,
    "N": PieceType.KNIGHT,
    "B": PieceType.BISHOP,
    "R": PieceType.ROOK,
    "Q": PieceType.QUEEN,
    "K": PieceType.KING,
}

PIECE_TO_CODE: dict[PieceType, str] = {value: key for key, value in CODE_TO_PIECE.items()}

CODE_TO_COLOR: dict[str, Color] = {"w": Color.WHITE, "b": Color.BLACK}
COLOR_TO_CODE: dict[Color, str] = {value: key for key, value in CODE_TO_COLOR.items()}

# -- PAWN PROMOTION --
PROMOTION_OPTIONS: list[PieceType] = [
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
]


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color

    @classmethod
    def empty(cls) -> Self:
        return cls(PieceType.EMPTY, Color.NONE)

    @classmethod
    def from_code(cls, code: str) -> Self:
        """Two characters: the color ('w' or 'b') followed by the piece letter. ex) 'wP' is a white pawn."""
        if code == "":
            return cls.empty()
        if len(code) != 2 or code[0] not in CODE_TO_COLOR or code[1] not in CODE_TO_PIECE:
            raise ValueError(f"Cannot interpret {code!r} as a piece code.")
        return cls(CODE_TO_PIECE[code[1]], CODE_TO_COLOR[code[0]])

    def to_code(self) -> str:
        # NOTE: an empty square has an empty code, so it disappears when codes get joined together
        if self.is_empty:
            return ""
        return f"{COLOR_TO_CODE[self.color]}{PIECE_TO_CODE[self.type]}"

    @property
    def is_empty(self) -> bool:
        return self.type == PieceType.EMPTY

    def promote_to(self, new_type: PieceType) -> "Piece":
        """Pieces are immutable (boards get copied for every legality probe), so promotion hands back a new piece."""
        return Piece(new_type, self.color)


def promotion_type(code: str) -> PieceType:
    """Translate the promotion letter sent by a client ('Q', 'r', ...) into a piece type."""
    piece_type = CODE_TO_PIECE.get(code.upper())
    if piece_type is None:
        raise ValueError(f"Unknown promotion piece: {code!r}")
    return piece_type
