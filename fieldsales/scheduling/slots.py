"""Slot occupancy and booking validation for a single staff member and day."""

from datetime import date
from typing import Optional, Sequence

from fieldsales.config import config
from fieldsales.models import (
    BookingRejection,
    LeaveRecord,
    RejectionReason,
    SlotAvailability,
    Visit,
)
from fieldsales.scheduling.availability import DEFAULT_DAILY_CAP, booked_count
from fieldsales.scheduling.leave_calendar import effective_leave


def _is_taken(staff_id: str, day: date, slot: str, visits: Sequence[Visit]) -> bool:
    return any(
        visit.staff_id == staff_id
        and visit.visit_date == day
        and visit.time_slot == slot
        and visit.is_active
        for visit in visits
    )


def slots_for(
    staff_id: str,
    day: date,
    existing_visits: Sequence[Visit],
    slots: Optional[Sequence[str]] = None,
) -> list[SlotAvailability]:
    """List every configured slot for the day, in display order, with its taken flag."""
    slots = config.TIME_SLOTS if slots is None else slots
    return [
        SlotAvailability(slot=slot, taken=_is_taken(staff_id, day, slot, existing_visits))
        for slot in slots
    ]


def validate_booking(
    staff_id: str,
    day: date,
    slot: str,
    leave_records: Sequence[LeaveRecord],
    existing_visits: Sequence[Visit],
    daily_cap: int = DEFAULT_DAILY_CAP,
) -> Optional[BookingRejection]:
    """
    Check a booking against leave, the daily cap and slot exclusivity.

    The first failing check wins. Returns None when the booking is allowed.
    Run this again at commit time: the snapshot may have changed since the
    calendar was shown.
    """
    leave = effective_leave(day, staff_id, leave_records)
    if leave is not None:
        return BookingRejection(
            reason=RejectionReason.LEAVE_UNAVAILABLE,
            message=f"Staff {staff_id} is unavailable on {day.isoformat()}",
        )

    if booked_count(staff_id, day, existing_visits) >= daily_cap:
        return BookingRejection(
            reason=RejectionReason.CAPACITY_EXCEEDED,
            message=f"Staff {staff_id} already has {daily_cap} visits on {day.isoformat()}",
        )

    if _is_taken(staff_id, day, slot, existing_visits):
        return BookingRejection(
            reason=RejectionReason.SLOT_TAKEN,
            message=f"Slot '{slot}' on {day.isoformat()} is already booked",
        )

    return None
