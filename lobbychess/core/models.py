"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/storage layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the API layer or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

# Type aliases to make GameModel easier to read
PieceColor = str
PlayerId = str
SquareName = str
PieceCode = str


@dataclass
class GameModel:
    """Transport-safe snapshot of a chess game used between API, Service, and Game layers."""

    game_id: UUID
    name: str
    board: dict[SquareName, PieceCode]
    color_to_move: PieceColor
    players: dict[PieceColor, PlayerId]
    status: str
    winner: str
    reason: Optional[str]
    in_check: bool
    en_passant_square: Optional[SquareName]
    half_move_count: int
