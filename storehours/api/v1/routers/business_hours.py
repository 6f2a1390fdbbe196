from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storehours.core.config import settings
from storehours.db.session import get_db
from storehours.schemas.hours import PublicHoursStatus, StatusOut
from storehours.services.business import ScheduleStore, evaluate_status, order_acceptance
from storehours.services.business.formatting import day_name, format_datetime, format_optional

router = APIRouter(prefix="/establishments", tags=["business-hours"])


def _load(slug: str, db: Session):
    store = ScheduleStore(db)
    establishment = store.get_establishment_by_slug(slug)
    if not establishment:
        raise HTTPException(status_code=404, detail="Establishment not found")
    return establishment, store.snapshot(establishment)


@router.get("/{slug}/hours/status", response_model=PublicHoursStatus)
def get_hours_status(slug: str, db: Session = Depends(get_db)):
    """current open/closed status for the storefront."""
    establishment, snapshot = _load(slug, db)
    now = datetime.now(timezone.utc)
    status = evaluate_status(now, snapshot.timezone, snapshot.weekly, snapshot.overrides)
    tz = snapshot.timezone

    return PublicHoursStatus(
        slug=establishment.slug,
        name=establishment.name,
        timezone=tz,
        current_time=format_datetime(now, tz, settings.DEFAULT_LOCALE) if tz else None,
        has_schedule=snapshot.has_schedule,
        show_schedule_on_menu=snapshot.show_schedule_on_menu,
        accepting_orders=order_acceptance(status, snapshot.allow_orders_when_closed),
        status=StatusOut.from_status(status, tz),
        next_open_display=format_optional(status.next_open_at, tz, settings.DEFAULT_LOCALE) if tz else None,
        next_close_display=format_optional(status.next_close_at, tz, settings.DEFAULT_LOCALE) if tz else None,
    )


@router.get("/{slug}/hours", response_model=Dict[str, Any])
def get_weekly_schedule(slug: str, db: Session = Depends(get_db)):
    """weekly schedule for display on the menu, when the establishment shows it."""
    establishment, snapshot = _load(slug, db)
    if not snapshot.show_schedule_on_menu:
        raise HTTPException(status_code=404, detail="Schedule is not public")

    rules = {rule.day_of_week: rule for rule in snapshot.weekly}
    days = []
    for weekday in range(7):
        rule = rules.get(weekday)
        days.append({
            "day_of_week": weekday,
            "day_name": day_name(weekday, settings.DEFAULT_LOCALE),
            "enabled": bool(rule and rule.enabled),
            "intervals": [i.to_dict() for i in rule.intervals] if rule else [],
        })

    return {
        "slug": establishment.slug,
        "timezone": snapshot.timezone,
        "weekly_hours": days,
        "overrides": [
            {
                "date": o.date.isoformat(),
                "is_closed": o.is_closed,
                "intervals": [i.to_dict() for i in o.intervals] if o.intervals is not None else None,
                "note": o.note,
            }
            for o in snapshot.overrides
        ],
    }
