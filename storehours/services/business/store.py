"""
Schedule loading.
Reads an establishment's settings, weekly hours and upcoming overrides from the
database and hands them to the evaluator as an immutable snapshot.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional, Tuple
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from storehours import models
from storehours.core.config import settings
from .intervals import Override, TimeInterval, WeeklyRule

logger = logging.getLogger(__name__)


def local_today(tz: Optional[str], now: Optional[datetime] = None) -> date:
    """current calendar date in `tz`, or in UTC when no timezone is set."""
    if now is None:
        now = datetime.now(timezone.utc)
    return now.astimezone(ZoneInfo(tz) if tz else timezone.utc).date()


@dataclass(frozen=True)
class ScheduleSnapshot:
    """everything the evaluator needs for one establishment, read at one moment."""
    timezone: Optional[str]
    weekly: Tuple[WeeklyRule, ...]
    overrides: Tuple[Override, ...]
    allow_orders_when_closed: bool = False
    show_schedule_on_menu: bool = True

    @property
    def has_schedule(self) -> bool:
        return bool(self.weekly) or bool(self.overrides)


def _to_intervals(raw: Optional[Iterable[dict]]) -> Tuple[TimeInterval, ...]:
    # rows are trusted as written by the admin api
    return tuple(TimeInterval.from_dict(item) for item in (raw or []))


def weekly_rule_from_row(row: models.EstablishmentHours) -> WeeklyRule:
    return WeeklyRule(
        day_of_week=row.day_of_week,
        enabled=row.enabled,
        intervals=_to_intervals(row.intervals),
    )


def override_from_row(row: models.EstablishmentHoursOverride) -> Override:
    return Override(
        date=row.date,
        is_closed=row.is_closed,
        intervals=_to_intervals(row.intervals) if row.intervals is not None else None,
        note=row.note,
    )


class ScheduleStore:
    """loads schedule snapshots for establishments."""

    def __init__(self, db: Session, lookahead_days: Optional[int] = None):
        self.db = db
        self.lookahead_days = lookahead_days if lookahead_days is not None else settings.OVERRIDE_LOOKAHEAD_DAYS

    def get_establishment(self, estab_id: int) -> Optional[models.Establishment]:
        return self.db.get(models.Establishment, estab_id)

    def get_establishment_by_slug(self, slug: str) -> Optional[models.Establishment]:
        return (
            self.db.query(models.Establishment)
            .filter(models.Establishment.slug == slug)
            .first()
        )

    def list_weekly(self, estab_id: int) -> list:
        return (
            self.db.query(models.EstablishmentHours)
            .filter(models.EstablishmentHours.estab_id == estab_id)
            .order_by(models.EstablishmentHours.day_of_week.asc())
            .all()
        )

    def list_overrides(self, estab_id: int, start: date, end: date) -> list:
        return (
            self.db.query(models.EstablishmentHoursOverride)
            .filter(
                models.EstablishmentHoursOverride.estab_id == estab_id,
                models.EstablishmentHoursOverride.date >= start,
                models.EstablishmentHoursOverride.date <= end,
            )
            .order_by(models.EstablishmentHoursOverride.date.asc())
            .all()
        )

    def snapshot(self, establishment: models.Establishment, today: Optional[date] = None) -> ScheduleSnapshot:
        """build a snapshot; overrides cover yesterday through today + lookahead."""
        if today is None:
            today = local_today(establishment.timezone)
        # yesterday is needed for intervals that run past midnight
        start = today - timedelta(days=1)
        end = today + timedelta(days=self.lookahead_days)

        weekly = tuple(weekly_rule_from_row(row) for row in self.list_weekly(establishment.id))
        overrides = tuple(override_from_row(row) for row in self.list_overrides(establishment.id, start, end))

        logger.debug(
            "loaded schedule for establishment %s: %d weekly rules, %d overrides",
            establishment.id, len(weekly), len(overrides),
        )
        return ScheduleSnapshot(
            timezone=establishment.timezone,
            weekly=weekly,
            overrides=overrides,
            allow_orders_when_closed=establishment.allow_orders_when_closed,
            show_schedule_on_menu=establishment.show_schedule_on_menu,
        )

    def load(self, estab_id: int, today: Optional[date] = None) -> Optional[ScheduleSnapshot]:
        """load a snapshot by establishment id; None if the establishment doesn't exist."""
        establishment = self.get_establishment(estab_id)
        if establishment is None:
            return None
        return self.snapshot(establishment, today)
