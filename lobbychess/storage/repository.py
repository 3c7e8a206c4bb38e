"""Protocol repository (the service only depends on this, not on how games are kept)"""

from typing import Optional, Protocol
from uuid import UUID

from lobbychess.chess.game import Game


class GameRepository(Protocol):
    """Keeps track of the games that are currently being played"""

    def create_game(self, name: str) -> Game:
        """Start a new game and return it (with its newly created game ID)."""
        ...

    def get_game(self, game_id: UUID) -> Game:
        """Get game by ID. Raises GameNotFoundError if there is none."""
        ...

    def remove_game(self, game_id: UUID) -> Optional[Game]:
        """Remove a game. Returns the removed game, if it existed."""
        ...

    def list_games(self) -> list[Game]:
        """All games, in the order they were created."""
        ...
