"""Display helpers: render instants as local date/time text. No scheduling logic here."""
from datetime import datetime
from typing import Optional, Union
from zoneinfo import ZoneInfo

DAY_NAMES = {
    "pt-BR": ["Segunda-feira", "Terça-feira", "Quarta-feira", "Quinta-feira", "Sexta-feira", "Sábado", "Domingo"],
    "en": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"],
}

# (date, time) patterns per locale
_PATTERNS = {
    "pt-BR": ("%d/%m/%Y", "%H:%M"),
    "en": ("%m/%d/%Y", "%H:%M"),
}

DEFAULT_LOCALE = "pt-BR"


def _local(instant: datetime, tz: Union[str, ZoneInfo]) -> datetime:
    zone = tz if isinstance(tz, ZoneInfo) else ZoneInfo(tz)
    return instant.astimezone(zone)


def _patterns(locale: str):
    return _PATTERNS.get(locale, _PATTERNS[DEFAULT_LOCALE])


def format_datetime(instant: datetime, tz: Union[str, ZoneInfo], locale: str = DEFAULT_LOCALE) -> str:
    """short local date and time, e.g. 25/12/2025 18:00."""
    date_fmt, time_fmt = _patterns(locale)
    return _local(instant, tz).strftime(f"{date_fmt} {time_fmt}")


def format_date(instant: datetime, tz: Union[str, ZoneInfo], locale: str = DEFAULT_LOCALE) -> str:
    return _local(instant, tz).strftime(_patterns(locale)[0])


def format_time(instant: datetime, tz: Union[str, ZoneInfo], locale: str = DEFAULT_LOCALE) -> str:
    return _local(instant, tz).strftime(_patterns(locale)[1])


def day_name(day_of_week: int, locale: str = DEFAULT_LOCALE) -> str:
    """weekday name for 0=Monday .. 6=Sunday; empty string when out of range."""
    names = DAY_NAMES.get(locale, DAY_NAMES[DEFAULT_LOCALE])
    if 0 <= day_of_week < len(names):
        return names[day_of_week]
    return ""


def format_weekday(instant: datetime, tz: Union[str, ZoneInfo], locale: str = DEFAULT_LOCALE) -> str:
    return day_name(_local(instant, tz).weekday(), locale)


def format_optional(instant: Optional[datetime], tz: Union[str, ZoneInfo], locale: str = DEFAULT_LOCALE) -> Optional[str]:
    if instant is None:
        return None
    return format_datetime(instant, tz, locale)
