"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from lobbychess.chess.pieces import PROMOTION_OPTIONS, PIECE_TO_CODE
from lobbychess.chess.square import is_valid_notation
from lobbychess.core.exceptions import InvalidRequestError
from lobbychess.core.shared_types import Color, Winner

PROMOTION_CODES = {PIECE_TO_CODE[piece_type] for piece_type in PROMOTION_OPTIONS}


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise InvalidRequestError("A game needs a (non-blank) name.")
        return value


class MovePayload(BaseModel):
    """What a client sends to make a move: two square names + optionally the letter of the piece to promote into."""

    from_square: str
    to_square: str
    promotion: Optional[str] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not is_valid_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value

    @field_validator("promotion")
    @classmethod
    def validate_promotion(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        code = value.strip().upper()
        if code not in PROMOTION_CODES:
            raise InvalidRequestError(
                f"Cannot promote to {value!r}. Pick one from {','.join(sorted(PROMOTION_CODES))}"
            )
        return code


class MoveRequest(MovePayload):
    game_id: UUID
    player_id: str


class ColorPayload(BaseModel):
    color: Color


class BindColorRequest(ColorPayload):
    game_id: UUID
    player_id: str


class CommandPayload(BaseModel):
    command: str


class NaturalMoveRequest(CommandPayload):
    """Free text move command, ex) 'knight to c3'"""

    game_id: UUID
    player_id: str


class DisconnectRequest(BaseModel):
    game_id: UUID
    player_id: str


# --- RESPONSE MODELS ---
class GameSummary(BaseModel):
    game_id: UUID
    name: str


class PlayersResponse(BaseModel):
    """Player ids per color, empty string for a free seat"""

    white: str = ""
    black: str = ""


class TerminationResponse(BaseModel):
    over: bool
    winner: Winner
    reason: Optional[str]


class BindColorResponse(BaseModel):
    success: bool
    players: PlayersResponse


class GameStateResponse(BaseModel):
    game_id: UUID
    name: str
    board: dict[str, str]
    white_turn: bool
    in_check: bool
    players: PlayersResponse
    termination: TerminationResponse
