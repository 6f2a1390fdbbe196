"""
Business hours evaluation service.
Answers whether an establishment is open at a given instant and when that
changes, from weekly rules, date overrides and the establishment timezone.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence, Union
from zoneinfo import ZoneInfo

from .intervals import (
    REASON_WEEKLY,
    Override,
    WeeklyRule,
    materialize_intervals,
    resolve_intervals,
)

logger = logging.getLogger(__name__)

# days scanned by find_next_open, today included
NEXT_OPEN_HORIZON_DAYS = 14

ACCEPTED = "accepted"
QUEUED = "queued"
REJECTED = "rejected"


@dataclass(frozen=True)
class Status:
    """result of evaluating business hours at one instant."""
    is_open: bool
    reason: str
    next_open_at: Optional[datetime] = None
    next_close_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "isOpen": self.is_open,
            "nextOpenAt": self.next_open_at.isoformat() if self.next_open_at else None,
            "nextCloseAt": self.next_close_at.isoformat() if self.next_close_at else None,
            "reason": self.reason,
        }


def _localize(now: datetime, zone: ZoneInfo) -> datetime:
    # naive datetimes are taken as wall-clock time in the business timezone
    if now.tzinfo is None:
        return now.replace(tzinfo=zone)
    return now.astimezone(zone)


def _zone_or_none(tz: Union[str, ZoneInfo, None]) -> Optional[ZoneInfo]:
    if not tz:
        return None
    return tz if isinstance(tz, ZoneInfo) else ZoneInfo(tz)


def find_next_open(
    now: datetime,
    tz: Union[str, ZoneInfo, None],
    weekly: Sequence[WeeklyRule],
    overrides: Sequence[Override],
    horizon: int = NEXT_OPEN_HORIZON_DAYS,
) -> Optional[datetime]:
    """
    Find the next opening instant after `now`, scanning at most `horizon`
    local calendar days starting with today.

    Returns None when nothing opens within the horizon. That is a normal
    outcome, not an error.
    """
    zone = _zone_or_none(tz)
    if zone is None:
        return None

    local_now = _localize(now, zone)
    today = local_now.date()

    for day_offset in range(horizon):
        candidate = today + timedelta(days=day_offset)
        resolved = resolve_intervals(candidate, weekly, overrides)
        if resolved.closed_by_override or not resolved.intervals:
            continue

        starts = sorted(m.start for m in materialize_intervals(resolved.intervals, zone, candidate))
        if day_offset == 0:
            starts = [start for start in starts if start > local_now]
        if starts:
            return starts[0]

    logger.debug("no opening within %d days of %s", horizon, local_now.isoformat())
    return None


def evaluate_status(
    now: datetime,
    tz: Union[str, ZoneInfo, None],
    weekly: Sequence[WeeklyRule],
    overrides: Sequence[Override],
) -> Status:
    """
    Evaluate open/closed status at `now`.

    Today's intervals are checked in the order supplied; the first one that
    contains `now` wins and its end becomes next_close_at. If today is not
    closed by an override, an interval from the previous day that crosses
    midnight can still hold the establishment open. When closed,
    next_open_at comes from find_next_open.

    A missing timezone reports closed with no next opening.
    """
    zone = _zone_or_none(tz)
    if zone is None:
        return Status(is_open=False, reason=REASON_WEEKLY)

    local_now = _localize(now, zone)
    today = local_now.date()
    resolved = resolve_intervals(today, weekly, overrides)

    for interval in materialize_intervals(resolved.intervals, zone, today):
        if interval.contains(local_now):
            return Status(is_open=True, reason=resolved.reason, next_close_at=interval.end)

    if not resolved.closed_by_override:
        yesterday = today - timedelta(days=1)
        previous = resolve_intervals(yesterday, weekly, overrides)
        for interval in materialize_intervals(previous.intervals, zone, yesterday):
            if interval.contains(local_now):
                return Status(is_open=True, reason=previous.reason, next_close_at=interval.end)

    return Status(
        is_open=False,
        reason=resolved.reason,
        next_open_at=find_next_open(local_now, zone, weekly, overrides),
    )


def order_acceptance(status: Status, allow_orders_when_closed: bool = False) -> str:
    """decide what happens to an order placed at the evaluated instant."""
    if status.is_open:
        return ACCEPTED
    if allow_orders_when_closed:
        return QUEUED
    return REJECTED


def can_accept_orders(status: Status, allow_orders_when_closed: bool = False) -> bool:
    """check if an order can be taken, either now or queued for opening."""
    return order_acceptance(status, allow_orders_when_closed) != REJECTED
