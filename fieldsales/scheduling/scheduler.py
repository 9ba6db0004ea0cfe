"""
Visit scheduling.

`request_visit` is the only place a Visit is created. It is a pure function of
its inputs: the caller supplies the office, radius, leave calendar and visit
snapshot, and is responsible for persisting the returned visit atomically
(see `calendar_store.book_visit`).
"""

import uuid
from datetime import date
from typing import Callable, Iterable, Optional, Sequence

from fieldsales.config import config
from fieldsales.logging_config import get_logger
from fieldsales.models import (
    OPEN_LEAD_STATUSES,
    BookingOutcome,
    BookingRejection,
    Coordinate,
    Lead,
    LeadStatus,
    LeaveRecord,
    RejectionReason,
    StaffMember,
    Visit,
)
from fieldsales.scheduling.availability import DEFAULT_DAILY_CAP
from fieldsales.scheduling.geo import distance_km
from fieldsales.scheduling.slots import validate_booking

logger = get_logger(__name__)


def new_visit_id() -> str:
    """Generate a collision-resistant visit id."""
    return uuid.uuid4().hex


def _reject(reason: RejectionReason, message: str, lead: Lead, staff_id: str, **extra) -> BookingOutcome:
    logger.info("booking_rejected", reason=reason.value, lead_id=lead.id, staff_id=staff_id, **extra)
    return BookingOutcome(rejection=BookingRejection(reason=reason, message=message, **extra))


def request_visit(
    lead: Lead,
    staff_id: str,
    visit_date: date,
    time_slot: str,
    office: Coordinate,
    max_radius_km: float,
    leave_records: Sequence[LeaveRecord],
    existing_visits: Sequence[Visit],
    roster: Optional[Iterable[StaffMember]] = None,
    slots: Optional[Sequence[str]] = None,
    daily_cap: int = DEFAULT_DAILY_CAP,
    id_factory: Callable[[], str] = new_visit_id,
) -> BookingOutcome:
    """
    Validate a visit request and, if allowed, build the new Visit.

    Order of checks:
    1. The lead must have a location and be inside the service radius. This
       gate runs before anything about staff, date or slot is looked at.
    2. The lead must still be open (New, Call Later or Old Lead), so a lead
       holds at most one scheduled visit.
    3. The staff id must be on the roster (when a roster is given) and the
       slot must be one of the configured slots.
    4. Leave, daily cap and slot exclusivity (`validate_booking`).

    Returns:
        BookingOutcome with either `visit` (plus the lead status the caller
        should apply) or `rejection`.
    """
    if lead.location is None:
        return _reject(
            RejectionReason.MISSING_LOCATION,
            f"Lead {lead.id} has no location",
            lead,
            staff_id,
        )

    distance = distance_km(office, lead.location)
    if distance > max_radius_km:
        return _reject(
            RejectionReason.OUT_OF_SERVICE_AREA,
            f"Lead is {distance:.1f} km away, beyond the {max_radius_km:g} km visit radius",
            lead,
            staff_id,
            distance_km=distance,
        )

    if lead.status not in OPEN_LEAD_STATUSES:
        return _reject(
            RejectionReason.LEAD_NOT_OPEN,
            f"Lead {lead.id} is {lead.status.value}; only open leads can be booked",
            lead,
            staff_id,
        )

    if roster is not None and staff_id not in {member.id for member in roster}:
        return _reject(
            RejectionReason.UNKNOWN_STAFF,
            f"Staff {staff_id} is not on the roster",
            lead,
            staff_id,
        )

    slots = config.TIME_SLOTS if slots is None else slots
    if time_slot not in slots:
        return _reject(
            RejectionReason.UNKNOWN_SLOT,
            f"'{time_slot}' is not a bookable slot",
            lead,
            staff_id,
        )

    rejection = validate_booking(staff_id, visit_date, time_slot, leave_records, existing_visits, daily_cap)
    if rejection is not None:
        logger.info("booking_rejected", reason=rejection.reason.value, lead_id=lead.id, staff_id=staff_id)
        return BookingOutcome(rejection=rejection)

    visit = Visit(
        id=id_factory(),
        lead_id=lead.id,
        staff_id=staff_id,
        visit_date=visit_date,
        time_slot=time_slot,
    )
    logger.info(
        "visit_scheduled",
        visit_id=visit.id,
        lead_id=lead.id,
        staff_id=staff_id,
        visit_date=visit_date.isoformat(),
        time_slot=time_slot,
    )
    return BookingOutcome(visit=visit, lead_status=LeadStatus.VISIT_SCHEDULED)
