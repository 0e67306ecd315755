"""EditorSessionManager handles editor session lifecycle and storage."""

import asyncio
import logging
import os
from datetime import datetime, timedelta
from typing import Any

from flowcanvas.models.editor import EditorSessionInfo
from flowcanvas.models.workflow import Network, WorkflowDefinition
from flowcanvas.services.editor import EditorSession

logger = logging.getLogger(__name__)

# Singleton manager instance
_manager: "EditorSessionManager | None" = None


class EditorSessionManager:
    """Manages editor session lifecycle.

    Responsibilities:
    - Open sessions seeded from a stored workflow definition
    - Store active sessions (in-memory, one GraphStore each)
    - Cleanup idle sessions
    - Get/close sessions by ID
    """

    def __init__(self, session_timeout_minutes: int = 30):
        """Initialize the session manager.

        Args:
            session_timeout_minutes: How long idle sessions live before cleanup.
        """
        self._sessions: dict[str, EditorSession] = {}
        self._session_timeout = timedelta(minutes=session_timeout_minutes)
        self._cleanup_task: asyncio.Task | None = None

    @property
    def active_session_count(self) -> int:
        """Number of active sessions."""
        return len(self._sessions)

    def create_session(
        self,
        workflow_id: str,
        definition: WorkflowDefinition | None = None,
        network: Network = Network.MAINNET,
    ) -> EditorSession:
        """Open a new editor session for a workflow.

        Args:
            workflow_id: The workflow being edited.
            definition: The persisted definition to seed the graph from.
            network: Network the workflow runs against, for warnings.

        Returns:
            The new EditorSession.
        """
        session = EditorSession(workflow_id, definition, network)
        self._sessions[session.session_id] = session
        logger.info(
            f"Opened editor session {session.session_id} for workflow {workflow_id} "
            f"(total sessions: {len(self._sessions)})"
        )
        return session

    def get_session(self, session_id: str) -> EditorSession | None:
        """Get a session by ID, refreshing its last activity."""
        session = self._sessions.get(session_id)
        if session:
            session.touch()
        return session

    def get_sessions_for_workflow(self, workflow_id: str) -> list[EditorSession]:
        return [s for s in self._sessions.values() if s.workflow_id == workflow_id]

    def list_sessions(self) -> list[EditorSessionInfo]:
        return [s.info() for s in self._sessions.values()]

    def close_session(self, session_id: str) -> bool:
        """Close and discard a session, unsaved changes included.

        Returns:
            True if session was found and closed, False otherwise.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        if session.dirty:
            logger.info(f"Discarding unsaved changes of editor session {session_id}")
        logger.info(f"Closed editor session {session_id}")
        return True

    def close_workflow_sessions(self, workflow_id: str) -> int:
        """Close all sessions for a workflow.

        Returns:
            Number of sessions closed.
        """
        session_ids = [
            sid for sid, s in self._sessions.items() if s.workflow_id == workflow_id
        ]
        for session_id in session_ids:
            self.close_session(session_id)
        return len(session_ids)

    def cleanup_expired(self) -> int:
        """Close sessions that have been idle too long.

        Returns:
            Number of sessions cleaned up.
        """
        now = datetime.now()
        expired_ids = [
            sid
            for sid, s in self._sessions.items()
            if now - s.last_activity > self._session_timeout
        ]

        for session_id in expired_ids:
            logger.info(f"Cleaning up expired editor session {session_id}")
            self.close_session(session_id)

        if expired_ids:
            logger.info(f"Cleaned up {len(expired_ids)} expired editor session(s)")

        return len(expired_ids)

    async def start_cleanup_task(self) -> None:
        """Start the background cleanup task."""
        if self._cleanup_task is None:
            self._cleanup_task = asyncio.create_task(self._cleanup_loop())
            logger.info("Started editor session cleanup background task")

    async def stop_cleanup_task(self) -> None:
        """Stop the background cleanup task."""
        if self._cleanup_task:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None
            logger.info("Stopped editor session cleanup background task")

    async def _cleanup_loop(self) -> None:
        """Background loop that cleans up expired sessions."""
        while True:
            try:
                await asyncio.sleep(60)  # Check every minute
                self.cleanup_expired()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.exception(f"Error in editor session cleanup task: {e}")

    async def shutdown(self) -> None:
        """Stop background work and close all sessions."""
        await self.stop_cleanup_task()
        for session_id in list(self._sessions.keys()):
            self.close_session(session_id)
        logger.info("Editor session manager shutdown complete")

    def get_stats(self) -> dict[str, Any]:
        """Get manager statistics."""
        counts: dict[str, int] = {}
        for s in self._sessions.values():
            counts[s.workflow_id] = counts.get(s.workflow_id, 0) + 1
        return {
            "active_sessions": len(self._sessions),
            "sessions_by_workflow": counts,
            "unsaved_sessions": sum(1 for s in self._sessions.values() if s.dirty),
            "cleanup_task_running": self._cleanup_task is not None,
        }


def get_session_manager() -> EditorSessionManager:
    """Get the singleton session manager instance."""
    global _manager
    if _manager is None:
        timeout = int(os.getenv("EDITOR_SESSION_TIMEOUT_MINUTES", "30"))
        _manager = EditorSessionManager(session_timeout_minutes=timeout)
    return _manager


async def init_session_manager() -> EditorSessionManager:
    """Initialize the session manager and start background tasks."""
    manager = get_session_manager()
    await manager.start_cleanup_task()
    return manager


async def shutdown_session_manager() -> None:
    """Shutdown the session manager."""
    global _manager
    if _manager:
        await _manager.shutdown()
        _manager = None
