"""Invocation lock serializing overlapping matching-lines commands.

Each command invocation holds the lock (global unless ``per_document`` is
set) from the moment matching starts until its effects (clipboard,
deletion, new document) have been applied, so two invocations never
interleave on the same buffer or the clipboard.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, AsyncIterator

LOGGER = logging.getLogger(__name__)

GLOBAL_KEY = "*"


@dataclass
class LockSession:
    """Represents one held invocation lock."""

    session_id: str
    key: str
    command: str | None = None
    acquired_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: dict[str, Any] = field(default_factory=dict)


class InvocationLock:
    """Registry of ``asyncio.Lock`` objects keyed by document.

    By default every invocation shares the :data:`GLOBAL_KEY` lock, which also
    serializes clipboard access across documents. ``per_document=True`` gives
    each document its own lock.
    """

    def __init__(self, *, per_document: bool = False, enabled: bool = True) -> None:
        self._per_document = per_document
        self._enabled = enabled
        self._locks: dict[str, asyncio.Lock] = {}
        self._sessions: dict[str, LockSession] = {}
        self._session_counter = 0

    @property
    def enabled(self) -> bool:
        return self._enabled

    def active_session(self, document_id: str | None = None) -> LockSession | None:
        """Return the session currently holding the lock for ``document_id``."""

        return self._sessions.get(self._key(document_id))

    def is_locked(self, document_id: str | None = None) -> bool:
        lock = self._locks.get(self._key(document_id))
        return bool(lock and lock.locked())

    @asynccontextmanager
    async def hold(self, document_id: str | None = None, *, command: str | None = None) -> AsyncIterator[LockSession]:
        """Hold the lock for the duration of the ``async with`` block."""

        key = self._key(document_id)
        self._session_counter += 1
        session = LockSession(session_id=f"invocation-{self._session_counter}", key=key, command=command)
        if not self._enabled:
            yield session
            return

        lock = self._locks.setdefault(key, asyncio.Lock())
        if lock.locked():
            LOGGER.debug("Invocation %s waiting for lock %s", session.session_id, key)
        async with lock:
            self._sessions[key] = session
            LOGGER.debug("Lock acquired: session=%s, key=%s, command=%s", session.session_id, key, command)
            try:
                yield session
            finally:
                self._sessions.pop(key, None)
                LOGGER.debug("Lock released: session=%s", session.session_id)

    def _key(self, document_id: str | None) -> str:
        if not self._per_document or not document_id:
            return GLOBAL_KEY
        return document_id


__all__ = ["GLOBAL_KEY", "LockSession", "InvocationLock"]
