"""REST API route handlers for game lifecycle management."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response

from tile_snake.server.models import CreateGameRequest, GameSummary

router = APIRouter(prefix="/games", tags=["games"])


def _get_manager(request: Request):
    return request.app.state.game_manager


@router.post("", status_code=201)
async def create_game(body: CreateGameRequest, request: Request) -> GameSummary:
    """Create and start a new game."""
    manager = _get_manager(request)
    try:
        game = manager.create_game(**body.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return game.summary()


@router.get("")
async def list_games(request: Request) -> list[GameSummary]:
    """List hosted games."""
    return _get_manager(request).list_games()


@router.get("/{game_id}")
async def get_game(game_id: str, request: Request) -> dict:
    """Get game metadata and the current session snapshot."""
    game = _get_manager(request).get_game(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="Game not found.")
    result = game.summary().model_dump(mode="json")
    async with game.lock:
        result["session"] = game.session.snapshot()
    return result


@router.post("/{game_id}/restart", status_code=200)
async def restart_game(game_id: str, request: Request) -> dict:
    """Start a new round once the game-over cooldown has passed."""
    manager = _get_manager(request)
    try:
        await manager.restart(game_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return {"status": "restarted", "game_id": game_id}


@router.delete("/{game_id}", status_code=204)
async def delete_game(game_id: str, request: Request) -> Response:
    """Stop a game and disconnect its clients."""
    try:
        await _get_manager(request).remove_game(game_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=204)
