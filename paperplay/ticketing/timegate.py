from datetime import datetime, timedelta
from typing import Optional

from paperplay import schemas
from paperplay.utils.dates import as_naive_utc

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR


def countdown_of(remaining: timedelta) -> schemas.Countdown:
    """
    Whole days, hours and minutes left. Every part is truncated, so a gate that opens
    in 23h59m shows "0d 23h 59m" and never rounds up to a day it has not reached.
    """
    total = max(int(remaining.total_seconds()), 0)
    return schemas.Countdown(
        days=total // SECONDS_PER_DAY,
        hours=(total % SECONDS_PER_DAY) // SECONDS_PER_HOUR,
        minutes=(total % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE,
    )


def evaluate(now: datetime, unlock_at: Optional[datetime]) -> schemas.GateResult:
    if unlock_at is None:
        return schemas.GateResult(is_open=True)

    now = as_naive_utc(now)
    unlock_at = as_naive_utc(unlock_at)
    if now >= unlock_at:
        return schemas.GateResult(is_open=True)

    remaining = unlock_at - now
    return schemas.GateResult(is_open=False, remaining=remaining, countdown=countdown_of(remaining))
