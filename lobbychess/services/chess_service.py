"""Orchestration of communication from the transport layer to business logic and the game registry (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID

from lobbychess.api.models import (
    BindColorRequest,
    CreateGameRequest,
    DisconnectRequest,
    GameStateResponse,
    GameSummary,
    MoveRequest,
    NaturalMoveRequest,
    PlayersResponse,
    TerminationResponse,
)
from lobbychess.chess.game import Game, color_from_name
from lobbychess.chess.move_parser import (
    is_natural_language_command,
    parse_natural_language,
)
from lobbychess.chess.moves import Move
from lobbychess.core.config import EngineSettings
from lobbychess.core.exceptions import IllegalMoveError
from lobbychess.core.models import GameModel
from lobbychess.core.shared_types import Color, DisconnectPolicy, Winner
from lobbychess.storage.repository import GameRepository

logger = logging.getLogger(__name__)

BoardView = dict[str, str]


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(
        self, repository: GameRepository, settings: Optional[EngineSettings] = None
    ) -> None:
        self.repo = repository
        self.settings = settings if settings is not None else EngineSettings()

    # -- Lobby ---
    def create_game(self, request: CreateGameRequest) -> GameSummary:
        game = self.repo.create_game(request.name)
        return GameSummary(game_id=game.id, name=game.name)

    def list_games(self) -> list[GameSummary]:
        return [
            GameSummary(game_id=game.id, name=game.name)
            for game in self.repo.list_games()
        ]

    # -- Board ---
    def get_board_view(self, game_id: UUID) -> BoardView:
        """Occupied squares only: a square missing from the mapping is empty."""
        return self.repo.get_game(game_id).board_view()

    def apply_move(self, request: MoveRequest) -> BoardView:
        """
        Make a move attempt.
        ----

        A rejected move is a normal outcome (players double-click, messages arrive twice): the board is
        returned unchanged, so clients can simply re-render.
        """
        game = self.repo.get_game(request.game_id)
        move = Move.from_algebraic(request.from_square, request.to_square, request.promotion)
        return self._attempt_move(game, move, request.player_id)

    def apply_natural_move(self, request: NaturalMoveRequest) -> Optional[BoardView]:
        """
        Move command typed in the chat (ex. "knight to c3").

        Returns None if the text is not a move command or no piece fits, so the caller can treat it as plain chat.
        """
        if not is_natural_language_command(request.command):
            return None

        game = self.repo.get_game(request.game_id)
        with game.lock:
            move = parse_natural_language(
                request.command, game.color_to_move, game.board, game.en_passant_square
            )
            if move is None:
                logger.info("game %s: could not resolve %r", game.id, request.command)
                return None
            return self._attempt_move(game, move, request.player_id)

    # -- Players ---
    def bind_color(self, request: BindColorRequest) -> bool:
        game = self.repo.get_game(request.game_id)
        return game.bind_color(request.player_id, color_from_name(request.color))

    def get_bound_players(self, game_id: UUID) -> PlayersResponse:
        game = self.repo.get_game(game_id)
        return self._players_response(game.to_model())

    def disconnect(self, request: DisconnectRequest) -> None:
        """Release the seat of the player that disconnected (or drop the whole game, depending on the settings)."""
        game = self.repo.get_game(request.game_id)
        if self.settings.disconnect_policy == DisconnectPolicy.DELETE_GAME:
            # only a seated player can end the game for everyone
            if game.color_of(request.player_id) is not None:
                self.repo.remove_game(request.game_id)
            return

        game.release_player(request.player_id)

    # -- Game status ---
    def is_white_turn(self, game_id: UUID) -> bool:
        return self.repo.get_game(game_id).to_model().color_to_move == Color.WHITE

    def is_in_check(self, game_id: UUID, color: Color) -> bool:
        game = self.repo.get_game(game_id)
        return game.is_in_check(color_from_name(color))

    def is_terminated(self, game_id: UUID) -> TerminationResponse:
        game = self.repo.get_game(game_id)
        return self._termination_response(game.to_model())

    def get_game_state(self, game_id: UUID) -> GameStateResponse:
        """Everything a client needs to render the game, taken from one consistent snapshot."""
        model = self.repo.get_game(game_id).to_model()
        return GameStateResponse(
            game_id=model.game_id,
            name=model.name,
            board=model.board,
            white_turn=model.color_to_move == Color.WHITE,
            in_check=model.in_check,
            players=self._players_response(model),
            termination=self._termination_response(model),
        )

    # -- Internal helpers --
    def _attempt_move(self, game: Game, move: Move, player_id: str) -> BoardView:
        with game.lock:
            try:
                return game.make_move(move, player_id)
            except IllegalMoveError as e:
                logger.info("game %s: rejected %s from %s: %s", game.id, move.to_uci(), player_id, e)
                return game.board_view()

    def _players_response(self, model: GameModel) -> PlayersResponse:
        return PlayersResponse(
            white=model.players.get(Color.WHITE, ""),
            black=model.players.get(Color.BLACK, ""),
        )

    def _termination_response(self, model: GameModel) -> TerminationResponse:
        return TerminationResponse(
            over=model.reason is not None,
            winner=Winner(model.winner),
            reason=model.reason,
        )
