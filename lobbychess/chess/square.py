"""
A square on the board

(placed in its own module as multiple other modules need to import it)

Squares are stored as a flat index 0 - 63. Index 0 is a8 (top-left seen from White), counting left-to-right then
top-to-bottom, so index 63 is h1. Algebraic notation ("e4") is only used at the boundary.
"""

from string import ascii_lowercase

from lobbychess.core.exceptions import InvalidNotationError

# Chess board is always 8x8.
BOARD_DIMENSIONS = (8, 8)
NUM_SQUARES = BOARD_DIMENSIONS[0] * BOARD_DIMENSIONS[1]

Square = int


def to_index(notation: str) -> Square:
    """Algebraic notation: 'a8' - 'h1' get converted to 0 - 63"""
    if not is_valid_notation(notation):
        raise InvalidNotationError(
            f"Cannot interpret {notation!r} as a square name (a1 - h8)."
        )
    file = ord(notation[0]) - ord("a")
    row = BOARD_DIMENSIONS[1] - int(notation[1])
    return square_at(file, row)


def to_notation(square: Square) -> str:
    if not 0 <= square < NUM_SQUARES:
        raise InvalidNotationError(f"Square index out of range: {square}")
    rank = BOARD_DIMENSIONS[1] - row_of(square)
    return f"{ascii_lowercase[file_of(square)]}{rank}"


def is_valid_notation(notation: str) -> bool:
    """Exactly one letter a-h followed by one digit 1-8"""
    if not isinstance(notation, str) or len(notation) != 2:
        return False
    file_char, rank_char = notation[0], notation[1]
    return (
        file_char in ascii_lowercase[: BOARD_DIMENSIONS[0]]
        and rank_char in "12345678"[: BOARD_DIMENSIONS[1]]
    )


def file_of(square: Square) -> int:
    """0 for the a-file, 7 for the h-file"""
    return square % BOARD_DIMENSIONS[0]


def row_of(square: Square) -> int:
    """Counted from the top of the board: row 0 is the 8th rank, row 7 is the 1st rank."""
    return square // BOARD_DIMENSIONS[0]


def square_at(file: int, row: int) -> Square:
    return row * BOARD_DIMENSIONS[0] + file


def is_within_bounds(file: int, row: int) -> bool:
    return (0 <= file < BOARD_DIMENSIONS[0]) and (0 <= row < BOARD_DIMENSIONS[1])


def is_light_square(square: Square) -> bool:
    # a8 is a light square and colors alternate along ranks and files
    return (file_of(square) + row_of(square)) % 2 == 0
