"""
Availability planning.

Builds the traffic-light calendar for one staff member: each day in the
horizon is `blocked` (leave or full), `partial` (some slots booked) or `open`.
"""

from datetime import date, timedelta
from typing import Iterable, Sequence

from fieldsales.models import DayState, DayStatus, LeaveRecord, Visit
from fieldsales.scheduling.leave_calendar import effective_leave

DEFAULT_DAILY_CAP = 3


def booked_count(staff_id: str, day: date, visits: Iterable[Visit]) -> int:
    """Count visits that still hold a slot for `staff_id` on `day`."""
    return sum(
        1
        for visit in visits
        if visit.visit_date == day and visit.staff_id == staff_id and visit.is_active
    )


def classify_day(has_leave: bool, count: int, daily_cap: int = DEFAULT_DAILY_CAP) -> DayState:
    """Leave or a full day blocks; any booking makes the day partial."""
    if has_leave or count >= daily_cap:
        return DayState.BLOCKED
    if count > 0:
        return DayState.PARTIAL
    return DayState.OPEN


def plan_horizon(
    staff_id: str,
    start_date: date,
    horizon_days: int,
    leave_records: Sequence[LeaveRecord],
    existing_visits: Sequence[Visit],
    daily_cap: int = DEFAULT_DAILY_CAP,
) -> list[DayStatus]:
    """
    Classify each of `horizon_days` consecutive days starting at `start_date`.

    Returns:
        list[DayStatus] ordered by date, one entry per day. The effective leave
        is attached to a day whenever one exists.
    """
    if horizon_days < 0:
        raise ValueError(f"horizon_days must be >= 0, got {horizon_days}")

    days = []
    for offset in range(horizon_days):
        day = start_date + timedelta(days=offset)
        leave = effective_leave(day, staff_id, leave_records)
        count = booked_count(staff_id, day, existing_visits)
        days.append(DayStatus(date=day, status=classify_day(leave is not None, count, daily_cap), leave=leave))

    return days
