"""REST API route handlers for session lifecycle management."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response

from grid_snake.server.models import (
    BoardResponse,
    CreateSessionRequest,
    DirectionRequest,
    DirectionResponse,
    SessionSummary,
    SnapshotResponse,
)
from grid_snake.server.session_manager import SessionEntry, SessionManager

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def _get_entry(request: Request, session_id: str) -> SessionEntry:
    try:
        return _get_manager(request).get(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Session not found.") from exc


def snapshot_response(entry: SessionEntry) -> SnapshotResponse:
    return SnapshotResponse(
        session_id=entry.session_id, **entry.session.snapshot().to_dict(),
    )


@router.post("", status_code=201)
async def create_session(
    request: Request, body: CreateSessionRequest | None = None,
) -> SessionSummary:
    """Create a new idle session."""
    manager = _get_manager(request)
    seed = body.seed if body is not None else None
    entry = manager.create_session(seed=seed)
    return manager.summary(entry)


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    """List known sessions."""
    return _get_manager(request).list_sessions()


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> SnapshotResponse:
    """Get the current renderable state."""
    return snapshot_response(_get_entry(request, session_id))


@router.get("/{session_id}/board")
async def get_board(session_id: str, request: Request) -> BoardResponse:
    """Get the board as rows of cell codes (0 empty, 1 body, 2 head, 3 food)."""
    entry = _get_entry(request, session_id)
    cells = entry.session.occupancy()
    return BoardResponse(tile_count=cells.shape[0], cells=cells.tolist())


@router.post("/{session_id}/start")
async def start_session(session_id: str, request: Request) -> SnapshotResponse:
    """Start (or restart) the session's game."""
    entry = _get_entry(request, session_id)
    entry.session.start()
    return snapshot_response(entry)


@router.post("/{session_id}/restart")
async def restart_session(session_id: str, request: Request) -> SnapshotResponse:
    """Restart the session's game from its initial state."""
    entry = _get_entry(request, session_id)
    entry.session.restart()
    return snapshot_response(entry)


@router.post("/{session_id}/direction", status_code=202)
async def queue_direction(
    session_id: str, body: DirectionRequest, request: Request,
) -> DirectionResponse:
    """Queue a direction; invalid or ill-timed input is silently ignored."""
    entry = _get_entry(request, session_id)
    return DirectionResponse(
        accepted=entry.session.dispatch_direction(body.direction),
    )


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, request: Request) -> Response:
    """Stop and remove a session."""
    try:
        _get_manager(request).remove(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Session not found.") from exc
    return Response(status_code=204)
