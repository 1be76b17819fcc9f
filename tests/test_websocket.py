"""WebSocket integration tests for real-time play."""

from __future__ import annotations

import json

import pytest
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from grid_snake.config import GameConfig
from grid_snake.server.app import create_app


@pytest.fixture()
def tc():
    """Starlette TestClient used as a context manager so REST calls, the
    WebSocket and the tick tasks share one event loop."""
    application = create_app(GameConfig(tick_interval_ms=20))
    with TestClient(application) as client:
        yield client


def _create_session(tc, seed=0) -> str:
    resp = tc.post("/sessions", json={"seed": seed})
    assert resp.status_code == 201
    return resp.json()["session_id"]


def _receive_until(ws, state: str, limit: int = 200) -> list[dict]:
    """Collect snapshots until one reports *state*."""
    seen: list[dict] = []
    for _ in range(limit):
        snap = json.loads(ws.receive_text())
        seen.append(snap)
        if snap["state"] == state:
            return seen
    raise AssertionError(f"state {state!r} never reached")


class TestPlayWebSocket:
    def test_connect_and_receive_initial_state(self, tc):
        session_id = _create_session(tc)
        with tc.websocket_connect(f"/sessions/{session_id}/play") as ws:
            state = json.loads(ws.receive_text())
            assert state["state"] == "idle"
            assert state["snake"] == [[5, 12], [4, 12], [3, 12]]
            assert state["tile_count"] == 20

    def test_start_streams_ticks_until_game_over(self, tc):
        session_id = _create_session(tc)
        with tc.websocket_connect(f"/sessions/{session_id}/play") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"action": "start"}))
            snaps = _receive_until(ws, "stopped")

        running = [s for s in snaps if s["state"] == "running"]
        assert running[0]["tick"] == 0
        ticks = [s["tick"] for s in running]
        assert ticks == sorted(ticks)
        final = snaps[-1]
        assert final["final_score"] == final["score"]
        # Heading right from x=5, the wall is hit on tick 15.
        assert final["tick"] == 15

    def test_direction_message_turns_snake(self, tc):
        session_id = _create_session(tc)
        with tc.websocket_connect(f"/sessions/{session_id}/play") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"action": "start", "direction": "up"}))
            snaps = _receive_until(ws, "stopped")

        final = snaps[-1]
        # Straight up from y=12 reaches the top wall on tick 13.
        assert final["tick"] == 13
        assert final["snake"][0][0] == 5

    def test_restart_after_game_over(self, tc):
        session_id = _create_session(tc)
        with tc.websocket_connect(f"/sessions/{session_id}/play") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"action": "start"}))
            _receive_until(ws, "stopped")
            ws.send_text(json.dumps({"action": "restart"}))
            snap = json.loads(ws.receive_text())
            assert snap["state"] == "running"
            assert snap["score"] == 0
            assert snap["snake"] == [[5, 12], [4, 12], [3, 12]]

    def test_malformed_messages_ignored(self, tc):
        session_id = _create_session(tc)
        with tc.websocket_connect(f"/sessions/{session_id}/play") as ws:
            ws.receive_text()
            ws.send_text("not json")
            ws.send_text(json.dumps([1, 2, 3]))
            ws.send_text(json.dumps({"direction": 5}))
            ws.send_text(json.dumps({"action": "start"}))
            snap = json.loads(ws.receive_text())
            assert snap["state"] == "running"

    def test_nonexistent_session_rejected(self, tc):
        with pytest.raises(WebSocketDisconnect), tc.websocket_connect(
            "/sessions/nonexistent/play",
        ) as ws:
            ws.receive_text()
