"""Leave lookups and the leave-reason privacy policy."""

from datetime import date
from typing import Iterable, Optional

from fieldsales.models import (
    FullReason,
    LeaveReason,
    LeaveRecord,
    LeaveScope,
    MaskedReason,
    StaffMember,
)


def effective_leave(day: date, staff_id: str, records: Iterable[LeaveRecord]) -> Optional[LeaveRecord]:
    """
    Return the leave that governs `staff_id` on `day`, if any.

    An office-wide (Global) record wins over a Personal one for the same day.
    """
    personal = None
    for record in records:
        if record.date != day:
            continue
        if record.scope == LeaveScope.GLOBAL:
            return record
        if personal is None and record.staff_id == staff_id:
            personal = record
    return personal


def leave_reason_for(record: LeaveRecord, viewer: StaffMember) -> LeaveReason:
    """
    Decide how much of a leave reason `viewer` may see.

    Office closures are public. A personal reason is visible only to admins
    and to the staff member on leave; everyone else gets a masked reason.
    """
    if record.scope == LeaveScope.GLOBAL:
        return FullReason(text=f"Office Closed: {record.reason}")

    if viewer.is_admin or viewer.id == record.staff_id:
        return FullReason(text=f"Unavailable: {record.reason}")

    return MaskedReason()
