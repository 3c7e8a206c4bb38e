"""Implementation of (Game)Repository that keeps every game in memory for as long as the process runs"""

import logging
from threading import Lock
from typing import Optional
from uuid import UUID

from lobbychess.chess.game import Game
from lobbychess.core.config import EngineSettings
from lobbychess.core.exceptions import GameNotFoundError

logger = logging.getLogger(__name__)


class GameRegistry:
    """
    Keyed collection of games (one per lobby).

    NOTE: The registry lock only guards the dictionary itself (insert/lookup/remove).
    Each Game has its own lock for everything that happens on its board.
    """

    def __init__(self, settings: Optional[EngineSettings] = None) -> None:
        self.settings = settings if settings is not None else EngineSettings()
        self._games: dict[UUID, Game] = {}
        self._lock = Lock()

    def create_game(self, name: str) -> Game:
        game = Game.new_game(name, settings=self.settings)
        with self._lock:
            self._games[game.id] = game
        logger.info("game %s created: %r", game.id, name)
        return game

    def get_game(self, game_id: UUID) -> Game:
        with self._lock:
            game = self._games.get(game_id)
        if game is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return game

    def remove_game(self, game_id: UUID) -> Optional[Game]:
        with self._lock:
            game = self._games.pop(game_id, None)
        if game is not None:
            logger.info("game %s removed", game_id)
        return game

    def list_games(self) -> list[Game]:
        with self._lock:
            return list(self._games.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)
