from abc import ABC, abstractmethod
from typing import Any


class FlowStorePort(ABC):
    """Holds in-progress flow drafts between HTTP requests."""

    @abstractmethod
    def create(self, draft: Any) -> str:
        """Store a new draft and return its flow id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, flow_id: str) -> Any | None:
        raise NotImplementedError

    @abstractmethod
    def save(self, flow_id: str, draft: Any) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, flow_id: str) -> None:
        raise NotImplementedError
