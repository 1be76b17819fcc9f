"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from grid_snake.session import SessionState


class CreateSessionRequest(BaseModel):
    """Request body for POST /sessions."""

    seed: int | None = Field(default=None, ge=0)


class DirectionRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/direction.

    Unknown direction names are accepted and ignored by the session.
    """

    direction: str = Field(min_length=1, max_length=16)


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    state: SessionState
    score: int
    tick: int


class SnapshotResponse(BaseModel):
    """Renderable session state."""

    session_id: str
    state: SessionState
    snake: list[list[int]]
    food: list[int] | None
    score: int
    tick: int
    tile_count: int
    final_score: int | None = None


class BoardResponse(BaseModel):
    """Occupancy grid, one row per y coordinate."""

    tile_count: int
    cells: list[list[int]]


class DirectionResponse(BaseModel):
    """Whether a direction input was queued."""

    accepted: bool


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    detail: str
