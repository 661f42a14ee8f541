from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Directory entry; the engine only needs the id and a display name."""

    employee_id: str
    full_name: str
    email: Optional[str] = None
    is_active: bool = True
