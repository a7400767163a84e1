"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from tile_snake.session import SessionStatus


class CreateGameRequest(BaseModel):
    """Request body for POST /games."""

    board_width: int | None = Field(default=None, ge=1, le=256)
    board_height: int | None = Field(default=None, ge=1, le=256)
    viewport_width: int | None = Field(default=None, ge=1)
    viewport_height: int | None = Field(default=None, ge=1)
    tile_size: int | None = Field(default=None, ge=1)
    starting_length: int | None = Field(default=None, ge=1)
    frame_ms: int | None = Field(default=None, ge=1, le=1000)
    movement_delay: int | None = Field(default=None, ge=1, le=60)
    game_over_cooldown_ms: int | None = Field(default=None, ge=0, le=60_000)
    seed: int | None = None


class GameSummary(BaseModel):
    """Compact game info for list endpoints."""

    game_id: str
    status: SessionStatus
    score: int
    board_width: int
    board_height: int
    frame_ms: int
    movement_delay: int
