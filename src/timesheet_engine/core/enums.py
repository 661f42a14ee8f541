from __future__ import annotations

from enum import Enum


class TimeEventKind(str, Enum):
    """Loại sự kiện chấm công ghi nhận từ máy/ứng dụng chấm công."""

    CLOCK_IN = "CLOCK_IN"
    CLOCK_OUT = "CLOCK_OUT"
    BREAK_START = "BREAK_START"
    BREAK_END = "BREAK_END"


# Tie-break for identical timestamps: close an interval before opening the next one.
KIND_PRECEDENCE = {
    TimeEventKind.CLOCK_OUT: 0,
    TimeEventKind.CLOCK_IN: 1,
    TimeEventKind.BREAK_START: 2,
    TimeEventKind.BREAK_END: 3,
}


class AnomalyReason(str, Enum):
    """Lý do một sự kiện bị bỏ qua khi tính giờ công."""

    DUPLICATE_CLOCK_IN = "DUPLICATE_CLOCK_IN"
    BREAK_WITHOUT_CLOCK_IN = "BREAK_WITHOUT_CLOCK_IN"
    DUPLICATE_BREAK_START = "DUPLICATE_BREAK_START"
    BREAK_END_WITHOUT_BREAK = "BREAK_END_WITHOUT_BREAK"
    CLOCK_OUT_WITHOUT_CLOCK_IN = "CLOCK_OUT_WITHOUT_CLOCK_IN"
    CLOCK_OUT_DURING_BREAK = "CLOCK_OUT_DURING_BREAK"
    UNCLOSED_CLOCK_IN = "UNCLOSED_CLOCK_IN"


class TriggerSource(str, Enum):
    PERIODIC = "periodic"
    MANUAL = "manual"
