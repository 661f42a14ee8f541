from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from ...common.datetime_utils import round_hours
from ...core.constants import REGULAR_HOURS_PER_DAY
from ...core.enums import AnomalyReason, TimeEventKind
from ...events.model import TimeEvent
from ..model import DailyHours, EventAnomaly
from .base import HoursCalculator


def _elapsed_seconds(start: datetime, end: datetime) -> float:
    # Aware instants are compared in UTC so a DST switch inside the interval is not lost.
    if start.tzinfo is not None and end.tzinfo is not None:
        start = start.astimezone(timezone.utc)
        end = end.astimezone(timezone.utc)
    return max((end - start).total_seconds(), 0.0)


class DailyHoursCalculator(HoursCalculator):
    """Standard rule: sum closed in/out and in/break intervals, split at 8h.

    Events that do not fit the current state (a second clock-in, a break end
    without a break...) are skipped and reported as anomalies; totals never fail.
    An open clock-in at the end of the day earns nothing.
    """

    def __init__(self, *, regular_hours_per_day: float = REGULAR_HOURS_PER_DAY):
        self._threshold = float(regular_hours_per_day)

    def calculate(self, events: Iterable[TimeEvent]) -> DailyHours:
        ordered = sorted(events, key=TimeEvent.sort_key)

        worked_seconds = 0.0
        open_clock_in: Optional[datetime] = None
        opened_by: Optional[TimeEvent] = None
        on_break = False
        anomalies: list[EventAnomaly] = []

        for event in ordered:
            ts = event.timestamp
            kind = event.kind

            if kind == TimeEventKind.CLOCK_IN:
                if open_clock_in is not None and not on_break:
                    anomalies.append(EventAnomaly(event, AnomalyReason.DUPLICATE_CLOCK_IN))
                open_clock_in = ts
                opened_by = event
                on_break = False

            elif kind == TimeEventKind.BREAK_START:
                if open_clock_in is None:
                    anomalies.append(EventAnomaly(event, AnomalyReason.BREAK_WITHOUT_CLOCK_IN))
                elif on_break:
                    anomalies.append(EventAnomaly(event, AnomalyReason.DUPLICATE_BREAK_START))
                else:
                    worked_seconds += _elapsed_seconds(open_clock_in, ts)
                    on_break = True

            elif kind == TimeEventKind.BREAK_END:
                if not on_break:
                    anomalies.append(EventAnomaly(event, AnomalyReason.BREAK_END_WITHOUT_BREAK))
                else:
                    open_clock_in = ts
                    opened_by = event
                    on_break = False

            elif kind == TimeEventKind.CLOCK_OUT:
                if open_clock_in is None:
                    anomalies.append(EventAnomaly(event, AnomalyReason.CLOCK_OUT_WITHOUT_CLOCK_IN))
                elif on_break:
                    anomalies.append(EventAnomaly(event, AnomalyReason.CLOCK_OUT_DURING_BREAK))
                else:
                    worked_seconds += _elapsed_seconds(open_clock_in, ts)
                    open_clock_in = None
                    opened_by = None

        if open_clock_in is not None and not on_break and opened_by is not None:
            anomalies.append(EventAnomaly(opened_by, AnomalyReason.UNCLOSED_CLOCK_IN))

        total = worked_seconds / 3600
        return DailyHours(
            total_hours=round_hours(total),
            regular_hours=round_hours(min(total, self._threshold)),
            overtime_hours=round_hours(max(0.0, total - self._threshold)),
            anomalies=tuple(anomalies),
        )
