"""Schedule builders shared by the tests."""

from datetime import datetime
from zoneinfo import ZoneInfo

from storehours.services.business import Override, TimeInterval, WeeklyRule

SAO_PAULO = ZoneInfo("America/Sao_Paulo")
NEW_YORK = ZoneInfo("America/New_York")


def local(year, month, day, hour=0, minute=0, tz=SAO_PAULO):
    return datetime(year, month, day, hour, minute, tzinfo=tz)


def intervals(*pairs):
    return tuple(TimeInterval(o, c) for o, c in pairs)


def rule(day_of_week, *pairs, enabled=True):
    return WeeklyRule(day_of_week=day_of_week, enabled=enabled, intervals=intervals(*pairs))


def every_day(*pairs):
    return [rule(day, *pairs) for day in range(7)]


def closed_on(day):
    return Override(date=day, is_closed=True)
