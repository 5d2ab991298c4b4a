"""Drawing package: the polygon digitizing state machine."""

from .state_machine import (
    Cancelled,
    Completed,
    DrawingSession,
    DrawingState,
    DrawingStateMachine,
    default_region_id,
)

__all__ = [
    "Cancelled",
    "Completed",
    "DrawingSession",
    "DrawingState",
    "DrawingStateMachine",
    "default_region_id",
]
