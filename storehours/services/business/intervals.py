"""
Interval resolution and materialization.
Picks the effective intervals for one local date and turns "HH:MM" wall-clock
intervals into timezone-aware instants for that date.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Mapping, Optional, Tuple, Union
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

REASON_WEEKLY = "weekly"
REASON_OVERRIDE = "override"


@dataclass(frozen=True)
class TimeInterval:
    """wall-clock interval, both ends as HH:MM in the establishment timezone."""
    open: str
    close: str

    @classmethod
    def from_dict(cls, data: Mapping) -> "TimeInterval":
        return cls(open=data["open"], close=data["close"])

    def to_dict(self) -> dict:
        return {"open": self.open, "close": self.close}

    @property
    def crosses_midnight(self) -> bool:
        return _minutes(self.close) < _minutes(self.open)


@dataclass(frozen=True)
class WeeklyRule:
    """default schedule for one weekday."""
    day_of_week: int  # 0=Monday, 6=Sunday
    enabled: bool
    intervals: Tuple[TimeInterval, ...] = ()


@dataclass(frozen=True)
class Override:
    """date-specific exception to the weekly rule."""
    date: date
    is_closed: bool = False
    intervals: Optional[Tuple[TimeInterval, ...]] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class ResolvedIntervals:
    """effective intervals for one local date and where they came from."""
    intervals: Tuple[TimeInterval, ...]
    reason: str
    closed_by_override: bool = False


@dataclass(frozen=True)
class MaterializedInterval:
    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        # half-open: a zero-length interval never matches
        return self.start <= instant < self.end


def _minutes(hhmm: str) -> int:
    hour, minute = map(int, hhmm.split(":"))
    return hour * 60 + minute


def _parse_time(hhmm: str) -> time:
    hour, minute = map(int, hhmm.split(":"))
    return time(hour, minute)


def _as_zone(tz: Union[str, ZoneInfo]) -> ZoneInfo:
    return tz if isinstance(tz, ZoneInfo) else ZoneInfo(tz)


def find_override(day: date, overrides: Iterable[Override]) -> Optional[Override]:
    """return the override for a local date, if any."""
    for override in overrides:
        if override.date == day:
            return override
    return None


def find_weekly_rule(weekday: int, weekly: Iterable[WeeklyRule]) -> Optional[WeeklyRule]:
    for rule in weekly:
        if rule.day_of_week == weekday:
            return rule
    return None


def resolve_intervals(
    day: date,
    weekly: Iterable[WeeklyRule],
    overrides: Iterable[Override],
) -> ResolvedIntervals:
    """
    Select the effective intervals for a local calendar date.

    Precedence:
      1. override with is_closed -> no intervals (override)
      2. override with custom intervals -> those intervals (override)
      3. override with neither -> the weekly rule's intervals, still reported
         as override when the rule supplies any
      4. weekly rule when enabled and non-empty, else nothing (weekly)
    """
    override = find_override(day, overrides)
    if override is not None:
        if override.is_closed:
            return ResolvedIntervals((), REASON_OVERRIDE, closed_by_override=True)
        if override.intervals:
            return ResolvedIntervals(tuple(override.intervals), REASON_OVERRIDE)
        logger.debug("empty override on %s, using weekly rule", day.isoformat())

    rule = find_weekly_rule(day.weekday(), weekly)
    if rule is None or not rule.enabled or not rule.intervals:
        return ResolvedIntervals((), REASON_WEEKLY)
    reason = REASON_OVERRIDE if override is not None else REASON_WEEKLY
    return ResolvedIntervals(tuple(rule.intervals), reason)


def materialize_intervals(
    intervals: Iterable[TimeInterval],
    tz: Union[str, ZoneInfo],
    day: date,
) -> List[MaterializedInterval]:
    """
    Resolve wall-clock intervals into UTC instants for `day` in `tz`.

    The UTC offset is looked up for the date being materialized, so the result
    stays correct across daylight-saving changes. An interval whose close
    precedes its open ends on the following calendar day. open == close yields
    a zero-length interval. Order of the input is kept.
    """
    zone = _as_zone(tz)
    results: List[MaterializedInterval] = []
    for interval in intervals:
        start = datetime.combine(day, _parse_time(interval.open), tzinfo=zone)
        end_day = day + timedelta(days=1) if interval.crosses_midnight else day
        end = datetime.combine(end_day, _parse_time(interval.close), tzinfo=zone)
        results.append(MaterializedInterval(
            start=start.astimezone(timezone.utc),
            end=end.astimezone(timezone.utc),
        ))
    return results
