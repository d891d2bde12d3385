from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Naive UTC wall clock, matching how timestamps are stored."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)


def compute_deadline(created_at: datetime, offer_days: int) -> datetime:
    return created_at + timedelta(days=offer_days)
