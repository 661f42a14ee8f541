from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import KIND_PRECEDENCE, TimeEventKind


@dataclass(frozen=True)
class TimeEvent:
    """Thực thể miền (domain): một lần bấm giờ (vào/ra/nghỉ) của nhân viên.

    Lưu ý: Bất biến, chỉ được đọc bởi engine; ``timestamp`` là một thời điểm (instant).
    """

    employee_id: str
    kind: TimeEventKind
    timestamp: datetime
    note: Optional[str] = None
    event_id: Optional[str] = None

    def sort_key(self) -> tuple[datetime, int]:
        return self.timestamp, KIND_PRECEDENCE[self.kind]

    def to_dict(self) -> dict:
        return {
            "event_id": self.event_id,
            "employee_id": self.employee_id,
            "kind": self.kind.value,
            "timestamp": self.timestamp.isoformat(),
            "note": self.note,
        }
