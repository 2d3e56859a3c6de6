from __future__ import annotations

import threading
import time
import uuid
from typing import Any

from barbershop.application.ports.flow_store import FlowStorePort


class MemoryFlowStore(FlowStorePort):
    """Drafts of in-progress flows; abandoned flows expire after `ttl_seconds` without activity."""

    def __init__(self, ttl_seconds: float = 3600.0) -> None:
        self._drafts: dict[str, tuple[Any, float]] = {}
        self._ttl_seconds = ttl_seconds
        self._lock = threading.Lock()

    def create(self, draft: Any) -> str:
        flow_id = uuid.uuid4().hex
        self.save(flow_id, draft)
        return flow_id

    def get(self, flow_id: str) -> Any | None:
        with self._lock:
            self._expire(time.monotonic())
            entry = self._drafts.get(flow_id)
        return entry[0] if entry else None

    def save(self, flow_id: str, draft: Any) -> None:
        with self._lock:
            self._drafts[flow_id] = (draft, time.monotonic())

    def delete(self, flow_id: str) -> None:
        with self._lock:
            self._drafts.pop(flow_id, None)

    def _expire(self, now: float) -> None:
        stale = [flow_id for flow_id, (_, touched) in self._drafts.items() if now - touched > self._ttl_seconds]
        for flow_id in stale:
            del self._drafts[flow_id]
