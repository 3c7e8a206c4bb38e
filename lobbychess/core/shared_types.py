"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    KING_CAPTURED = "king captured"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW_INSUFFICIENT_MATERIAL = "insufficient material"
    DRAW_REPETITION = "threefold repetition"
    DRAW_FIFTY_MOVE_RULE = "fifty-move rule"


class Winner(StrEnum):
    NONE = "none"
    WHITE = "white"
    BLACK = "black"
    DRAW = "draw"


# --- NOTE: the domain layer has its own Color enum (lobbychess/chess/pieces.py) that includes the empty square.
# --- This one is what crosses the boundary, so only the two sides a player can sit on.
class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class DisconnectPolicy(StrEnum):
    RELEASE_SEAT = "release_seat"
    DELETE_GAME = "delete_game"
