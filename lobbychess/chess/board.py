"""The Game board implements all rules that only depend on the `position` (in chess: the configuration of pieces on the board)"""

from dataclasses import dataclass
from typing import Optional, Self

from lobbychess.chess.moves import is_pseudo_legal
from lobbychess.chess.pieces import Color, Piece, PieceType
from lobbychess.chess.square import (
    BOARD_DIMENSIONS,
    NUM_SQUARES,
    Square,
    is_light_square,
    to_index,
    to_notation,
)

STARTING_POSITION_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
MINOR_PIECES = (PieceType.BISHOP, PieceType.KNIGHT)


@dataclass
class Board:
    squares: list[Piece]

    def __post_init__(self) -> None:
        if len(self.squares) != NUM_SQUARES:
            raise ValueError(
                f"A board holds exactly {NUM_SQUARES} squares, got {len(self.squares)}"
            )

    @classmethod
    def empty(cls) -> Self:
        return cls([Piece.empty() for _ in range(NUM_SQUARES)])

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_POSITION_FEN)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, read from the a-file to the h-file
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)

        NOTE: The FEN string reads top-left to bottom-right, exactly the order of the square indices.
        """
        squares: list[Piece] = []
        for character in fen_str.replace("/", ""):
            if character.isdigit():
                # A number denotes the amount of empty squares after each other
                squares.extend(Piece.empty() for _ in range(int(character)))
            else:
                color = "w" if character.isupper() else "b"
                squares.append(Piece.from_code(f"{color}{character.upper()}"))
        return cls(squares)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        num_files = BOARD_DIMENSIONS[0]
        ranks = [
            self.squares[start : start + num_files]
            for start in range(0, NUM_SQUARES, num_files)
        ]
        return "/".join(self._rank_to_fen(rank) for rank in ranks)

    @staticmethod
    def _rank_to_fen(rank: list[Piece]) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for piece in rank:
            if piece.is_empty:
                empty_count += 1
                continue
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            letter = piece.to_code()[1]
            fen_characters.append(letter if piece.color == Color.WHITE else letter.lower())

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    @classmethod
    def from_view(cls, view: dict[str, str]) -> Self:
        """Inverse of to_view(): squares missing from the mapping are empty."""
        board = cls.empty()
        for notation, code in view.items():
            board.place_piece(Piece.from_code(code), to_index(notation))
        return board

    def to_view(self) -> dict[str, str]:
        """What clients get to see: algebraic square -> piece code, for occupied squares only."""
        return {
            to_notation(square): piece.to_code()
            for square, piece in enumerate(self.squares)
            if not piece.is_empty
        }

    def position_key(self) -> str:
        """Normalized position: the contents of all 64 squares in one comparable string."""
        return ",".join(piece.to_code() for piece in self.squares)

    def copy(self) -> "Board":
        # Pieces are immutable, so a shallow copy of the list is a fully independent board
        return Board(list(self.squares))

    # --- BASIC ACCESS ---
    def piece(self, square: Square) -> Piece:
        return self.squares[square]

    def place_piece(self, piece: Piece, square: Square) -> None:
        self.squares[square] = piece

    def remove_piece(self, square: Square) -> None:
        self.squares[square] = Piece.empty()

    def move_piece(self, from_square: Square, to_square: Square) -> None:
        """Update the position on the board (whatever stood on the target square is captured)"""
        piece_that_moved = self.piece(from_square)
        self.remove_piece(from_square)
        self.place_piece(piece_that_moved, to_square)

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square for square, piece in enumerate(self.squares) if piece.color == color
        ]

    def locate_king(self, color: Color) -> Optional[Square]:
        king = Piece(PieceType.KING, color)
        return next(
            (square for square, piece in enumerate(self.squares) if piece == king),
            None,
        )

    def has_king(self, color: Color) -> bool:
        return self.locate_king(color) is not None

    # --- CHECK DETECTION ---
    def is_check(self, color: Color) -> bool:
        """
        Is the king of the given color attacked?
        ----

        Scan every enemy piece and ask whether it could move onto the king's square.
        Recomputed from scratch on every call: the board is only 64 squares.

        NOTE: Without a king there is nothing to attack. That board belongs to a game that already ended.
        """
        king_square = self.locate_king(color)
        if king_square is None:
            return False
        return any(
            is_pseudo_legal(self.piece(square), square, king_square, self)
            for square in self.locate_color(color.opponent)
        )

    def has_legal_move(
        self, color: Color, en_passant_square: Optional[Square] = None
    ) -> bool:
        """
        Does the player with the 'color' pieces have at least one move that does not leave them in check?
        ----

        For every own piece and every target square: if the move is pseudo-legal, try it on a copy of the board and
        check the king afterwards. Stops at the first move found.

        NOTE: Promotion and the removal of a pawn taken en passant are not simulated on the probe boards.
        Only used to tell checkmate from stalemate, never to list moves for a player.
        """
        for from_square in self.locate_color(color):
            piece = self.piece(from_square)
            for to_square in range(NUM_SQUARES):
                if self.piece(to_square).color == color:
                    continue
                if not is_pseudo_legal(piece, from_square, to_square, self, en_passant_square):
                    continue
                probe = self.copy()
                probe.move_piece(from_square, to_square)
                if not probe.is_check(color):
                    return True
        return False

    # --- MATERIAL ---
    def remaining_pieces(self, color: Color) -> list[tuple[Square, Piece]]:
        """All pieces of a given color, except for the king"""
        return [
            (square, piece)
            for square, piece in enumerate(self.squares)
            if piece.color == color and piece.type != PieceType.KING
        ]

    def is_insufficient_material(self) -> bool:
        """
        Neither side can force checkmate with what is left on the board:

        * King vs King
        * King + Bishop or King + Knight vs King
        * King + Bishop vs King + Bishop, bishops on squares of the same color
        * King + Knight vs King + Knight
        """
        white = self.remaining_pieces(Color.WHITE)
        black = self.remaining_pieces(Color.BLACK)

        if len(white) + len(black) == 0:
            return True

        if len(white) + len(black) == 1:
            _, piece = (white + black)[0]
            return piece.type in MINOR_PIECES

        if len(white) == 1 and len(black) == 1:
            (white_square, white_piece), (black_square, black_piece) = white[0], black[0]
            if white_piece.type == black_piece.type == PieceType.BISHOP:
                return is_light_square(white_square) == is_light_square(black_square)
            if white_piece.type == black_piece.type == PieceType.KNIGHT:
                return True

        return False
