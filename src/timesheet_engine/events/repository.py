from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import TimeEvent


class EventStore(Protocol):
    """Read side of the append-only clock event store.

    Events come back in any order; callers sort.
    """

    def list_events(self, *, employee_id: str, range_start: datetime, range_end: datetime) -> Sequence[TimeEvent]:
        """Events with ``range_start <= timestamp <= range_end``."""

        raise NotImplementedError
