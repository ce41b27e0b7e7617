"""FastAPI dependencies shared by the task routes."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from unfric.services.clock import Clock, SystemClock


def get_clock() -> Clock:
    """Clock used when a request does not pin `now`; overridden in tests."""
    return SystemClock()


def resolve_now(requested: Optional[datetime], clock: Clock) -> datetime:
    """Capture the single `now` used for a whole request."""
    return requested if requested is not None else clock.now()
