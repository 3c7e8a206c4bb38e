"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Optional

import pytest

from lobbychess.chess.board import Board
from lobbychess.chess.game import Game
from lobbychess.chess.pieces import Color
from lobbychess.core.config import EngineSettings
from lobbychess.services.chess_service import ChessService
from lobbychess.storage.registry import GameRegistry

WHITE_PLAYER = "player_white"
BLACK_PLAYER = "player_black"

GameFactory = Callable[..., Game]


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings()


@pytest.fixture
def registry(settings: EngineSettings) -> GameRegistry:
    return GameRegistry(settings)


@pytest.fixture
def service(registry: GameRegistry, settings: EngineSettings) -> ChessService:
    return ChessService(registry, settings)


@pytest.fixture
def seated_game() -> GameFactory:
    """
    Call the inner function to get a game with both players seated.
    Optionally start from a custom position (placement part of a FEN string) with the given color to move.
    """

    def _create_game(
        fen: Optional[str] = None,
        color_to_move: Color = Color.WHITE,
        settings: Optional[EngineSettings] = None,
    ) -> Game:
        board = Board.from_fen(fen) if fen else None
        game = Game.new_game("test game", settings=settings, board=board)
        game.color_to_move = color_to_move
        game.bind_color(WHITE_PLAYER, Color.WHITE)
        game.bind_color(BLACK_PLAYER, Color.BLACK)
        return game

    return _create_game
