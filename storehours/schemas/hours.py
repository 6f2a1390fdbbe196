from typing import Optional, List
from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator, model_validator

from storehours.services.business import Status

HHMM_PATTERN = "^([01]?[0-9]|2[0-3]):[0-5][0-9]$"


class TimeIntervalIn(BaseModel):
    open: str = Field(..., description="Opening time in HH:MM format", pattern=HHMM_PATTERN)
    close: str = Field(..., description="Closing time in HH:MM format", pattern=HHMM_PATTERN)

    @model_validator(mode="after")
    def check_not_equal(self):
        # a close before open is fine (runs past midnight), equal is not
        if self.open == self.close:
            raise ValueError("Opening and closing time can't be the same")
        return self


class TimeIntervalOut(BaseModel):
    open: str
    close: str


class WeeklyHoursIn(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6, description="0=Monday, 6=Sunday")
    enabled: bool = False
    intervals: List[TimeIntervalIn] = []


class WeeklyHoursUpdate(BaseModel):
    """schema for replacing the weekly schedule, one entry per weekday."""
    days: List[WeeklyHoursIn]

    @field_validator("days")
    @classmethod
    def unique_days(cls, days: List[WeeklyHoursIn]) -> List[WeeklyHoursIn]:
        seen = [d.day_of_week for d in days]
        if len(seen) != len(set(seen)):
            raise ValueError("Each day_of_week can appear only once")
        return days


class WeeklyHoursOut(BaseModel):
    id: int
    day_of_week: int
    enabled: bool
    intervals: List[TimeIntervalOut] = []

    class Config:
        from_attributes = True


class OverrideCreate(BaseModel):
    date: date
    is_closed: bool = False
    intervals: Optional[List[TimeIntervalIn]] = None
    note: Optional[str] = Field(None, max_length=500)


class OverrideUpdate(BaseModel):
    # not nullable; leave it out to keep the stored value
    is_closed: bool = False
    intervals: Optional[List[TimeIntervalIn]] = None
    note: Optional[str] = Field(None, max_length=500)


class OverrideOut(BaseModel):
    id: int
    date: date
    is_closed: bool
    intervals: Optional[List[TimeIntervalOut]] = None
    note: Optional[str] = None

    class Config:
        from_attributes = True


class EstablishmentSettingsUpdate(BaseModel):
    timezone: Optional[str] = Field(None, description="IANA timezone, e.g. America/Sao_Paulo")
    allow_orders_when_closed: Optional[bool] = None
    show_schedule_on_menu: Optional[bool] = None

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {value}")
        return value


class EstablishmentSettingsOut(BaseModel):
    id: int
    name: str
    slug: str
    timezone: Optional[str] = None
    allow_orders_when_closed: bool
    show_schedule_on_menu: bool

    class Config:
        from_attributes = True


class StatusOut(BaseModel):
    """engine output as exposed to clients."""
    is_open: bool = Field(..., serialization_alias="isOpen")
    next_open_at: Optional[datetime] = Field(None, serialization_alias="nextOpenAt")
    next_close_at: Optional[datetime] = Field(None, serialization_alias="nextCloseAt")
    reason: str

    @classmethod
    def from_status(cls, status: Status, tz: Optional[str] = None) -> "StatusOut":
        # render instants in the establishment zone when we know it
        zone = ZoneInfo(tz) if tz else None
        return cls(
            is_open=status.is_open,
            next_open_at=status.next_open_at.astimezone(zone) if status.next_open_at and zone else status.next_open_at,
            next_close_at=status.next_close_at.astimezone(zone) if status.next_close_at and zone else status.next_close_at,
            reason=status.reason,
        )


class PublicHoursStatus(BaseModel):
    """storefront view of an establishment's hours."""
    slug: str
    name: str
    timezone: Optional[str] = None
    current_time: Optional[str] = Field(None, description="Current time in establishment timezone")
    has_schedule: bool
    show_schedule_on_menu: bool
    accepting_orders: str = Field(..., description="accepted|queued|rejected")
    status: StatusOut
    next_open_display: Optional[str] = None
    next_close_display: Optional[str] = None


class AdminHoursOut(BaseModel):
    establishment: EstablishmentSettingsOut
    weekly_hours: List[WeeklyHoursOut]
    overrides: List[OverrideOut]
    current_status: StatusOut
