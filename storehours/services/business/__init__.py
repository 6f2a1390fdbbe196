"""
Business hours services package.

This package contains the business hours engine and its collaborators:
- Interval resolution and materialization
- Open/closed status evaluation and next opening search
- Order acceptance rules
- Schedule loading and periodic refresh
"""

from .intervals import (
    TimeInterval,
    WeeklyRule,
    Override,
    ResolvedIntervals,
    MaterializedInterval,
    REASON_WEEKLY,
    REASON_OVERRIDE,
    resolve_intervals,
    materialize_intervals,
)
from .hours import (
    NEXT_OPEN_HORIZON_DAYS,
    Status,
    evaluate_status,
    find_next_open,
    order_acceptance,
    can_accept_orders,
)
from .store import ScheduleSnapshot, ScheduleStore
from .poller import StatusPoller

__all__ = [
    'TimeInterval',
    'WeeklyRule',
    'Override',
    'ResolvedIntervals',
    'MaterializedInterval',
    'REASON_WEEKLY',
    'REASON_OVERRIDE',
    'resolve_intervals',
    'materialize_intervals',
    'NEXT_OPEN_HORIZON_DAYS',
    'Status',
    'evaluate_status',
    'find_next_open',
    'order_acceptance',
    'can_accept_orders',
    'ScheduleSnapshot',
    'ScheduleStore',
    'StatusPoller',
]
