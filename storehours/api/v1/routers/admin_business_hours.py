import logging
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storehours.core.security import require_admin
from storehours.db.session import get_db
from storehours import models
from storehours.schemas.hours import (
    AdminHoursOut,
    EstablishmentSettingsOut,
    EstablishmentSettingsUpdate,
    OverrideCreate,
    OverrideOut,
    OverrideUpdate,
    StatusOut,
    WeeklyHoursOut,
    WeeklyHoursUpdate,
)
from storehours.services.business import ScheduleStore, evaluate_status
from storehours.services.business.store import local_today

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/business-hours", tags=["admin"], dependencies=[Depends(require_admin)])


def _get_establishment(db: Session, estab_id: int) -> models.Establishment:
    establishment = db.get(models.Establishment, estab_id)
    if not establishment:
        raise HTTPException(status_code=404, detail="Establishment not found")
    return establishment


def _get_override(db: Session, estab_id: int, override_id: int) -> models.EstablishmentHoursOverride:
    override = db.get(models.EstablishmentHoursOverride, override_id)
    if not override or override.estab_id != estab_id:
        raise HTTPException(status_code=404, detail="Override not found")
    return override


def _intervals_payload(intervals):
    if intervals is None:
        return None
    return [i.model_dump() for i in intervals]


@router.get("/{estab_id}", response_model=AdminHoursOut)
def get_business_hours(estab_id: int, db: Session = Depends(get_db)):
    """get settings, weekly hours, upcoming overrides and current status."""
    establishment = _get_establishment(db, estab_id)
    store = ScheduleStore(db)
    snapshot = store.snapshot(establishment)
    today = local_today(establishment.timezone)
    status = evaluate_status(datetime.now(timezone.utc), snapshot.timezone, snapshot.weekly, snapshot.overrides)

    return AdminHoursOut(
        establishment=EstablishmentSettingsOut.model_validate(establishment),
        weekly_hours=[WeeklyHoursOut.model_validate(row) for row in store.list_weekly(estab_id)],
        overrides=[
            OverrideOut.model_validate(row)
            for row in store.list_overrides(estab_id, today, today + timedelta(days=366))
        ],
        current_status=StatusOut.from_status(status, snapshot.timezone),
    )


@router.put("/{estab_id}/settings", response_model=EstablishmentSettingsOut)
def update_settings(estab_id: int, payload: EstablishmentSettingsUpdate, db: Session = Depends(get_db)):
    """update timezone and order/display flags."""
    establishment = _get_establishment(db, estab_id)

    # update only provided fields
    update_data = payload.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(establishment, key, value)

    db.add(establishment)
    db.commit()
    db.refresh(establishment)
    logger.info(f"Updated business hours settings for establishment {estab_id}: {sorted(update_data)}")
    return establishment


@router.put("/{estab_id}/weekly", response_model=list[WeeklyHoursOut])
def update_weekly_hours(estab_id: int, payload: WeeklyHoursUpdate, db: Session = Depends(get_db)):
    """upsert weekly hours for the given days; days not sent are left alone."""
    _get_establishment(db, estab_id)
    existing = {
        row.day_of_week: row
        for row in db.query(models.EstablishmentHours).filter(models.EstablishmentHours.estab_id == estab_id)
    }

    for day in payload.days:
        row = existing.get(day.day_of_week)
        if row is None:
            row = models.EstablishmentHours(estab_id=estab_id, day_of_week=day.day_of_week)
        row.enabled = day.enabled
        row.intervals = _intervals_payload(day.intervals)
        db.add(row)

    db.commit()
    logger.info(f"Updated weekly hours for establishment {estab_id}: days {[d.day_of_week for d in payload.days]}")
    return ScheduleStore(db).list_weekly(estab_id)


@router.post("/{estab_id}/overrides", response_model=OverrideOut)
def create_override(estab_id: int, payload: OverrideCreate, db: Session = Depends(get_db)):
    """add an exception for a specific date."""
    _get_establishment(db, estab_id)

    duplicate = (
        db.query(models.EstablishmentHoursOverride)
        .filter(
            models.EstablishmentHoursOverride.estab_id == estab_id,
            models.EstablishmentHoursOverride.date == payload.date,
        )
        .first()
    )
    if duplicate:
        raise HTTPException(status_code=409, detail=f"Override for {payload.date.isoformat()} already exists")

    override = models.EstablishmentHoursOverride(
        estab_id=estab_id,
        date=payload.date,
        is_closed=payload.is_closed,
        intervals=_intervals_payload(payload.intervals),
        note=payload.note,
    )
    db.add(override)
    db.commit()
    db.refresh(override)
    return override


@router.put("/{estab_id}/overrides/{override_id}", response_model=OverrideOut)
def update_override(estab_id: int, override_id: int, payload: OverrideUpdate, db: Session = Depends(get_db)):
    """update an exception"""
    override = _get_override(db, estab_id, override_id)

    update_data = payload.model_dump(exclude_unset=True)
    if "intervals" in update_data:
        update_data["intervals"] = _intervals_payload(payload.intervals)
    for key, value in update_data.items():
        setattr(override, key, value)

    db.add(override)
    db.commit()
    db.refresh(override)
    return override


@router.delete("/{estab_id}/overrides/{override_id}")
def delete_override(estab_id: int, override_id: int, db: Session = Depends(get_db)):
    """delete an exception"""
    override = _get_override(db, estab_id, override_id)
    db.delete(override)
    db.commit()
    return {"message": "Override deleted successfully"}
