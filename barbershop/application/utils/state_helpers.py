from __future__ import annotations

from enum import Enum

from barbershop.application.exceptions import InvalidTransition


def require_step(current: Enum, operation: str, *allowed: Enum) -> None:
    """Raise InvalidTransition unless the flow is in one of the allowed steps."""
    if current not in allowed:
        raise InvalidTransition(f"Cannot {operation} from {current.value}")
