"""
FastAPI transport for the lobby server.

Thin layer only: every route hands its payload to ChessService. The registry of games is created once per app and
kept on `app.state`, so nothing lives in module-level state and tests can build as many independent apps as they like.

The caller's identity (one per connection/session) travels in the X-Player-Id header.
"""

import logging
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, FastAPI, Header, Request
from fastapi.responses import JSONResponse

from lobbychess.api.models import (
    BindColorRequest,
    BindColorResponse,
    ColorPayload,
    CommandPayload,
    CreateGameRequest,
    DisconnectRequest,
    GameStateResponse,
    GameSummary,
    MovePayload,
    MoveRequest,
    NaturalMoveRequest,
    PlayersResponse,
    TerminationResponse,
)
from lobbychess.core.config import EngineSettings
from lobbychess.core.exceptions import (
    GameNotFoundError,
    GameStateError,
    InvalidNotationError,
    InvalidRequestError,
)
from lobbychess.core.shared_types import Color
from lobbychess.services.chess_service import ChessService
from lobbychess.storage.registry import GameRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/games", tags=["games"])

PlayerId = Annotated[str, Header(alias="X-Player-Id")]


def get_service(request: Request) -> ChessService:
    return request.app.state.chess_service


Service = Annotated[ChessService, Depends(get_service)]


# --- LOBBY ---
@router.post("", status_code=201)
def create_game(payload: CreateGameRequest, service: Service) -> GameSummary:
    return service.create_game(payload)


@router.get("")
def list_games(service: Service) -> list[GameSummary]:
    return service.list_games()


# --- BOARD ---
@router.get("/{game_id}")
def get_game_state(game_id: UUID, service: Service) -> GameStateResponse:
    return service.get_game_state(game_id)


@router.get("/{game_id}/board")
def get_board(game_id: UUID, service: Service) -> dict[str, str]:
    return service.get_board_view(game_id)


@router.post("/{game_id}/moves")
def make_move(
    game_id: UUID, payload: MovePayload, player_id: PlayerId, service: Service
) -> GameStateResponse:
    """The board in the response is unchanged when the move got rejected."""
    request = MoveRequest(game_id=game_id, player_id=player_id, **payload.model_dump())
    service.apply_move(request)
    return service.get_game_state(game_id)


@router.post("/{game_id}/commands")
def natural_language_move(
    game_id: UUID, payload: CommandPayload, player_id: PlayerId, service: Service
) -> Optional[GameStateResponse]:
    """Returns null when the command could not be turned into a move."""
    request = NaturalMoveRequest(game_id=game_id, player_id=player_id, command=payload.command)
    if service.apply_natural_move(request) is None:
        return None
    return service.get_game_state(game_id)


# --- PLAYERS ---
@router.post("/{game_id}/players")
def bind_color(
    game_id: UUID, payload: ColorPayload, player_id: PlayerId, service: Service
) -> BindColorResponse:
    request = BindColorRequest(game_id=game_id, player_id=player_id, color=payload.color)
    success = service.bind_color(request)
    return BindColorResponse(success=success, players=service.get_bound_players(game_id))


@router.get("/{game_id}/players")
def get_players(game_id: UUID, service: Service) -> PlayersResponse:
    return service.get_bound_players(game_id)


@router.delete("/{game_id}/players/me", status_code=204)
def disconnect(game_id: UUID, player_id: PlayerId, service: Service) -> None:
    service.disconnect(DisconnectRequest(game_id=game_id, player_id=player_id))


# --- STATUS ---
@router.get("/{game_id}/turn")
def is_white_turn(game_id: UUID, service: Service) -> bool:
    return service.is_white_turn(game_id)


@router.get("/{game_id}/check/{color}")
def is_in_check(game_id: UUID, color: Color, service: Service) -> bool:
    return service.is_in_check(game_id, color)


@router.get("/{game_id}/termination")
def is_terminated(game_id: UUID, service: Service) -> TerminationResponse:
    return service.is_terminated(game_id)


# --- ERROR HANDLING ---
def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


async def game_not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    return _error_response(404, exc)


async def invalid_request_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.info("rejected request to %s: %s", request.url.path, exc)
    return _error_response(422, exc)


async def game_state_handler(request: Request, exc: Exception) -> JSONResponse:
    return _error_response(409, exc)


def create_app(settings: Optional[EngineSettings] = None) -> FastAPI:
    settings = settings if settings is not None else EngineSettings.from_env()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(title="Lobby Chess")
    app.state.chess_service = ChessService(GameRegistry(settings), settings)
    app.include_router(router)

    app.add_exception_handler(GameNotFoundError, game_not_found_handler)
    app.add_exception_handler(InvalidRequestError, invalid_request_handler)
    app.add_exception_handler(InvalidNotationError, invalid_request_handler)
    app.add_exception_handler(GameStateError, game_state_handler)
    return app
