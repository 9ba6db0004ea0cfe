from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from fieldsales import calendar_store
from fieldsales.config import config
from fieldsales.models import CalendarDayResponse, SlotAvailability, StaffMember
from fieldsales.scheduling import leave_reason_for, plan_horizon, slots_for

router = APIRouter(prefix="/staff", tags=["Scheduling"])


def _require_staff(staff_id: str) -> StaffMember:
    member = calendar_store.get_staff_by_id(staff_id)
    if not member:
        raise HTTPException(status_code=404, detail=f"Staff {staff_id} not found")
    return member


# GET /staff/{staff_id}/availability?viewer_id=u2&start=2024-05-20&days=14
# Gets: path param staff_id; query params viewer_id (required), start (default today), days (default 14)
# Returns: JSON array of {date, status, leave_reason?}; leave_reason is masked for viewers
#          who may not read a personal reason
# Example:
#   curl 'http://localhost:8000/staff/u1/availability?viewer_id=u2&start=2024-05-20'
@router.get("/{staff_id}/availability", response_model=list[CalendarDayResponse])
async def staff_availability(
    staff_id: str,
    viewer_id: str,
    start: Optional[date] = None,
    days: Optional[int] = Query(default=None, ge=0, le=366),
):
    """Traffic-light calendar for one staff member."""
    _require_staff(staff_id)
    viewer = _require_staff(viewer_id)

    horizon = plan_horizon(
        staff_id=staff_id,
        start_date=start or date.today(),
        horizon_days=config.PLANNER_HORIZON_DAYS if days is None else days,
        leave_records=calendar_store.list_leaves(),
        existing_visits=calendar_store.list_visits(),
        daily_cap=config.DAILY_VISIT_CAP,
    )

    return [
        CalendarDayResponse(
            date=day.date,
            status=day.status,
            leave_reason=leave_reason_for(day.leave, viewer) if day.leave else None,
        )
        for day in horizon
    ]


# GET /staff/{staff_id}/slots?date=2024-05-20
# Gets: path param staff_id; query param date
# Returns: JSON array of {slot, taken} in display order
# Example:
#   curl 'http://localhost:8000/staff/u2/slots?date=2024-05-20'
@router.get("/{staff_id}/slots", response_model=list[SlotAvailability])
async def staff_slots(staff_id: str, day: date = Query(..., alias="date")):
    """Free and taken slots for a staff member on one day."""
    _require_staff(staff_id)
    return slots_for(staff_id, day, calendar_store.list_visits(), config.TIME_SLOTS)
