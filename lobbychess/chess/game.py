"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of the board game -->
passes this information to the service layer, which can then pass it onwards to the API layer.

Every Game owns a re-entrant lock. All reads-then-writes of the board, the turn and the game status happen while
holding it, so two players submitting moves at the same time cannot interleave.
"""

import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import Optional, Self
from uuid import UUID, uuid4

from lobbychess.chess.board import Board
from lobbychess.chess.moves import (
    Move,
    en_passant_victim_square,
    is_double_step,
    is_en_passant_capture,
    is_promotion_square,
    is_pseudo_legal,
)
from lobbychess.chess.pieces import (
    AVAILABLE_COLOR_NAMES,
    PROMOTION_OPTIONS,
    Color,
    Piece,
    PieceType,
)
from lobbychess.chess.square import Square, to_notation
from lobbychess.core.config import EngineSettings
from lobbychess.core.exceptions import (
    GameOverError,
    GameStateError,
    IllegalMoveError,
    NotYourTurnError,
    SelfCheckError,
    WrongColorError,
)
from lobbychess.core.models import GameModel
from lobbychess.core.shared_types import Status, Winner

logger = logging.getLogger(__name__)

# Positions are compared within the last REPETITION_WINDOW recorded positions
REPETITION_WINDOW = 10
REPETITION_LIMIT = 3
# 50 moves by each player
FIFTY_MOVE_LIMIT = 100


def color_from_name(name: str) -> Color:
    if name.upper() not in AVAILABLE_COLOR_NAMES:
        raise GameStateError(
            f"Color {name} not in {','.join([c.lower() for c in AVAILABLE_COLOR_NAMES])}."
        )
    return Color[name.upper()]


def winner_for(color: Color) -> Winner:
    return Winner.WHITE if color == Color.WHITE else Winner.BLACK


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    id: UUID
    name: str
    board: Board
    color_to_move: Color
    players: dict[Color, str]
    status: Status
    winner: Winner
    half_move_count: int
    history: list[str]  # normalized positions, see Board.position_key()
    en_passant_square: Optional[Square]
    settings: EngineSettings = field(default_factory=EngineSettings)
    _lock: RLock = field(default_factory=RLock, init=False, repr=False, compare=False)

    @classmethod
    def new_game(
        cls,
        name: str,
        settings: Optional[EngineSettings] = None,
        board: Optional[Board] = None,
    ) -> Self:
        """Standard starting position, White to move, nobody seated yet.

        A custom board can be supplied (mainly to set up positions in tests).
        """
        return cls(
            id=uuid4(),
            name=name,
            board=board if board is not None else Board.starting_position(),
            color_to_move=Color.WHITE,
            players={},
            status=Status.IN_PROGRESS,
            winner=Winner.NONE,
            half_move_count=0,
            history=[],
            en_passant_square=None,
            settings=settings if settings is not None else EngineSettings(),
        )

    @property
    def lock(self) -> RLock:
        """For callers that need several reads to be consistent with each other."""
        return self._lock

    @property
    def is_over(self) -> bool:
        return self.status != Status.IN_PROGRESS

    @property
    def end_reason(self) -> Optional[str]:
        return str(self.status) if self.is_over else None

    def to_model(self) -> GameModel:
        """Encode into a format the Service layer uses"""
        with self._lock:
            return GameModel(
                game_id=self.id,
                name=self.name,
                board=self.board.to_view(),
                color_to_move=self.color_to_move.name.lower(),
                players={
                    color.name.lower(): player for color, player in self.players.items()
                },
                status=str(self.status),
                winner=str(self.winner),
                reason=self.end_reason,
                in_check=self.board.is_check(self.color_to_move),
                en_passant_square=(
                    to_notation(self.en_passant_square)
                    if self.en_passant_square is not None
                    else None
                ),
                half_move_count=self.half_move_count,
            )

    def board_view(self) -> dict[str, str]:
        with self._lock:
            return self.board.to_view()

    def is_in_check(self, color: Color) -> bool:
        with self._lock:
            return self.board.is_check(color)

    # --- PLAYERS ---
    def bind_color(self, player: str, color: Color) -> bool:
        """
        Seat a player on one side of the board.
        ----

        * Succeeds if the seat is free, or already taken by this player.
        * Fails if somebody else sits there, or if this player already plays the other color.
        """
        with self._lock:
            holder = self.players.get(color)
            if holder == player:
                return True
            if holder is not None:
                return False
            if self.players.get(color.opponent) == player:
                return False
            self.players[color] = player
            logger.info("game %s: %s plays %s", self.id, player, color.name.lower())
            return True

    def release_color(self, color: Color) -> Optional[str]:
        """Free a seat. Returns the player that was sitting there, if any."""
        with self._lock:
            player = self.players.pop(color, None)
            if player is not None:
                logger.info("game %s: %s left the %s seat", self.id, player, color.name.lower())
            return player

    def release_player(self, player: str) -> Optional[Color]:
        """Free whichever seat the player holds."""
        with self._lock:
            color = self.color_of(player)
            if color is not None:
                self.release_color(color)
            return color

    def color_of(self, player: str) -> Optional[Color]:
        with self._lock:
            return next(
                (color for color, name in self.players.items() if name == player), None
            )

    # --- MOVES ---
    def make_move(self, move: Move, player: str) -> dict[str, str]:
        """
        Attempt to make a move
        -----

        1. make sure the game is still running and it is your turn (and you are the one sitting on that side)
        2. make sure the piece is yours and it may move like this
        3. make sure you do not leave yourself in check
        4. update the board (capture, en passant, promotion)
        5. update the turn, en passant square and move counter
        6. update game status (if needed)
        7. record the new position

        Raises IllegalMoveError (or a subclass) when any check fails. Nothing is changed in that case.
        Returns the board view after the move.
        """
        with self._lock:
            self._assert_in_progress()
            self._assert_your_turn(player)
            piece = self._assert_valid_move(move)

            resulting_board, is_capture = self._board_after(move, piece)
            if self._is_leaving_king_in_check(resulting_board):
                raise SelfCheckError(
                    f"Move {move.to_uci()} leaves the {self.color_to_move.name.lower()} king in check."
                )

            # update the board
            self.board = resulting_board

            # update en passant square: only valid for the move directly after a double step
            self.en_passant_square = move.to_square if is_double_step(piece, move) else None

            # move counter
            if self.settings.fifty_move_resets and (is_capture or piece.type == PieceType.PAWN):
                self.half_move_count = 0
            else:
                self.half_move_count += 1

            self.color_to_move = self.color_to_move.opponent
            logger.info("game %s: %s played %s", self.id, player, move.to_uci())

            # check for end condition, then commit the new position to the history
            self._update_game_status()
            self._update_history(self.board.position_key())
            return self.board.to_view()

    # -- PRIVATE HELPERS ---
    def _assert_in_progress(self) -> None:
        if self.is_over:
            raise GameOverError(f"Game is not in progress. status: {self.status}")

    def _assert_your_turn(self, player: str) -> None:
        """The side to move must be seated, and the one asking must be sitting there."""
        player_to_move = self.players.get(self.color_to_move)
        if player_to_move is None or player != player_to_move:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self.color_to_move.name.lower()} to make a move first."
            )

    def _assert_valid_move(self, move: Move) -> Piece:
        """Checks that only need the current board. Returns the piece that is about to move."""
        piece = self.board.piece(move.from_square)
        if piece.is_empty:
            raise IllegalMoveError(f"No piece on {to_notation(move.from_square)}")

        if piece.color != self.color_to_move:
            raise WrongColorError(
                f"The piece on {to_notation(move.from_square)} does not belong to {self.color_to_move.name.lower()}"
            )

        if self.board.piece(move.to_square).color == piece.color:
            raise IllegalMoveError(f"Cannot capture your own piece on {to_notation(move.to_square)}")

        if not is_pseudo_legal(
            piece, move.from_square, move.to_square, self.board, self.en_passant_square
        ):
            raise IllegalMoveError(f"Move not allowed: {move.to_uci()}")

        if (
            move.promote_to is not None
            and is_promotion_square(piece, move.to_square)
            and move.promote_to not in PROMOTION_OPTIONS
        ):
            raise IllegalMoveError(f"Cannot promote to {move.promote_to.name.lower()}")
        return piece

    def _board_after(self, move: Move, piece: Piece) -> tuple[Board, bool]:
        """
        Play the move on a copy of the board.
        ---

        1. clear the starting square, put the piece (or the piece it promotes into) on the target square
        2. en passant: remove the pawn that got taken (it stands behind the target square)

        Also reports whether something got captured.
        """
        board = self.board.copy()
        is_capture = not board.piece(move.to_square).is_empty

        takes_en_passant = is_en_passant_capture(
            piece, move.from_square, move.to_square, board, self.en_passant_square
        )

        board.move_piece(move.from_square, move.to_square)
        if move.promote_to is not None and is_promotion_square(piece, move.to_square):
            board.place_piece(piece.promote_to(move.promote_to), move.to_square)

        if takes_en_passant:
            board.remove_piece(en_passant_victim_square(move.from_square, move.to_square))
            is_capture = True
        return board, is_capture

    def _is_leaving_king_in_check(self, resulting_board: Board) -> bool:
        """
        Default: only reject the move if you are in check now and still are after the move.
        strict_self_check: reject any move after which your king is attacked (so also moving a pinned piece).
        """
        color = self.color_to_move
        if self.settings.strict_self_check:
            return resulting_board.is_check(color)
        return self.board.is_check(color) and resulting_board.is_check(color)

    def _update_history(self, position: str) -> None:
        self.history.append(position)
        del self.history[:-REPETITION_WINDOW]

    # --- CHECKS FOR ENDING THE GAME ---
    def _update_game_status(self) -> None:
        """Performs checks to see if game has ended and changes status accordingly.

        NOTE the turn has already been passed on. At this point the color to move is the opponent of the player that just moved.
        The first condition that holds decides the outcome.
        """
        next_color = self.color_to_move

        captured_king = next(
            (color for color in (Color.WHITE, Color.BLACK) if not self.board.has_king(color)),
            None,
        )
        if captured_king is not None:
            self._end_game(Status.KING_CAPTURED, winner_for(captured_king.opponent))
        elif self._is_check_mate(next_color):
            self._end_game(Status.CHECKMATE, winner_for(next_color.opponent))
        elif self._is_stale_mate(next_color):
            self._end_game(Status.STALEMATE, Winner.DRAW)
        elif self.board.is_insufficient_material():
            self._end_game(Status.DRAW_INSUFFICIENT_MATERIAL, Winner.DRAW)
        elif self._is_three_fold_repetition():
            self._end_game(Status.DRAW_REPETITION, Winner.DRAW)
        elif self._is_fifty_move_draw():
            self._end_game(Status.DRAW_FIFTY_MOVE_RULE, Winner.DRAW)

    def _end_game(self, status: Status, winner: Winner) -> None:
        self.status = status
        self.winner = winner
        logger.info("game %s ended: %s (winner: %s)", self.id, status, winner)

    def _has_legal_move(self, color: Color) -> bool:
        return self.board.has_legal_move(color, self.en_passant_square)

    def _is_check_mate(self, color: Color) -> bool:
        return self.board.is_check(color) and not self._has_legal_move(color)

    def _is_stale_mate(self, color: Color) -> bool:
        return not self.board.is_check(color) and not self._has_legal_move(color)

    def _is_three_fold_repetition(self) -> bool:
        """The current position plus its earlier occurrences in the (trimmed) history"""
        current = self.board.position_key()
        return self.history.count(current) + 1 >= REPETITION_LIMIT

    def _is_fifty_move_draw(self) -> bool:
        return self.half_move_count >= FIFTY_MOVE_LIMIT
