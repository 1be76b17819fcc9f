"""Tests for the in-memory session registry."""

from __future__ import annotations

import asyncio

import pytest

from grid_snake.config import GameConfig
from grid_snake.scheduler import ManualScheduler
from grid_snake.server.session_manager import SessionManager
from grid_snake.session import SessionState


class TestSessionRegistry:
    def test_create_and_get(self):
        manager = SessionManager(scheduler=ManualScheduler())
        entry = manager.create_session(seed=1)
        assert manager.get(entry.session_id) is entry
        assert entry.session.state is SessionState.IDLE
        assert len(manager) == 1

    def test_get_unknown(self):
        manager = SessionManager(scheduler=ManualScheduler())
        with pytest.raises(KeyError, match="not found"):
            manager.get("missing")

    def test_list_sessions(self):
        manager = SessionManager(scheduler=ManualScheduler())
        manager.create_session()
        manager.create_session()
        summaries = manager.list_sessions()
        assert len(summaries) == 2
        assert all(s.state is SessionState.IDLE for s in summaries)

    def test_remove_stops_session(self):
        scheduler = ManualScheduler()
        manager = SessionManager(scheduler=scheduler)
        entry = manager.create_session()
        entry.session.start()
        manager.remove(entry.session_id)
        assert entry.session.state is SessionState.STOPPED
        assert scheduler.active == []
        with pytest.raises(KeyError):
            manager.remove(entry.session_id)

    def test_invalid_retention(self):
        with pytest.raises(ValueError, match=">= 0"):
            SessionManager(max_stopped_sessions=-1)

    def test_stopped_sessions_pruned(self):
        scheduler = ManualScheduler()
        manager = SessionManager(scheduler=scheduler, max_stopped_sessions=2)
        entries = [manager.create_session(seed=i) for i in range(4)]
        for entry in entries:
            entry.session.start()
        for entry in entries:
            entry.session.stop()
        remaining = {s.session_id for s in manager.list_sessions()}
        assert remaining == {entries[2].session_id, entries[3].session_id}

    def test_restarted_session_not_pruned(self):
        scheduler = ManualScheduler()
        manager = SessionManager(scheduler=scheduler, max_stopped_sessions=0)
        keep = manager.create_session()
        keep.session.start()
        other = manager.create_session()
        other.session.start()
        other.session.stop()
        assert [s.session_id for s in manager.list_sessions()] == [keep.session_id]

    def test_cleanup(self):
        scheduler = ManualScheduler()
        manager = SessionManager(scheduler=scheduler)
        for _ in range(3):
            manager.create_session().session.start()
        manager.cleanup()
        assert len(manager) == 0
        assert scheduler.active == []


class TestConcurrentSessions:
    @pytest.mark.asyncio
    async def test_50_concurrent_sessions(self):
        """Spin up 50 real-time sessions; verify all reach the wall."""
        manager = SessionManager(GameConfig(tick_interval_ms=5))
        entries = [manager.create_session(seed=i) for i in range(50)]
        for entry in entries:
            entry.session.start()

        for _ in range(200):
            await asyncio.sleep(0.02)
            if all(e.session.state is SessionState.STOPPED for e in entries):
                break

        stopped = sum(1 for e in entries if e.session.state is SessionState.STOPPED)
        assert stopped == 50, f"Only {stopped}/50 sessions finished"
        assert all(e.session.tick_count == 15 for e in entries)
        manager.cleanup()
