from __future__ import annotations

import logging
import secrets
import time
from typing import Dict, Optional

from pdf_compressor.errors import SessionNotFound
from pdf_compressor.processor.document import DocumentModel
from pdf_compressor.session import CompressionSession


class SessionRegistry:
    """
    Ephemeral in-memory sessions, keyed by an opaque token.

    Nothing is persisted: a session holds at most the latest output in RAM
    and is dropped once it has been idle longer than `ttl_seconds`.
    """

    def __init__(self, ttl_seconds: int, model: Optional[DocumentModel] = None):
        self.ttl_seconds = ttl_seconds
        self.model = model
        self.log = logging.getLogger("pdf_compressor.storage.sessions")
        self._sessions: Dict[str, CompressionSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    @staticmethod
    def new_session_id() -> str:
        return secrets.token_urlsafe(16)

    def create(self) -> CompressionSession:
        session = CompressionSession(self.new_session_id(), model=self.model)
        self._sessions[session.session_id] = session
        self.log.info("Session created", extra={"session_id": session.session_id})
        return session

    def get(self, session_id: str) -> CompressionSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound()
        session.touch()
        return session

    def get_or_create(self, session_id: Optional[str]) -> CompressionSession:
        if session_id and session_id in self._sessions:
            return self.get(session_id)
        return self.create()

    def drop(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def purge_expired(self, now: Optional[float] = None) -> int:
        """Drop idle sessions older than the TTL. Running sessions are kept."""
        if self.ttl_seconds <= 0:
            return 0
        now = time.time() if now is None else now
        expired = [
            sid for sid, s in self._sessions.items()
            if not s.is_loading and now - s.touched_at > self.ttl_seconds
        ]
        for sid in expired:
            self._sessions.pop(sid, None)
            self.log.info("Session expired", extra={"session_id": sid})
        return len(expired)
