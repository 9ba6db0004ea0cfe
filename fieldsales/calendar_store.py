"""
In-memory storage for the staff roster, leave calendar and visits.

Reads hand out snapshots to the scheduling engine. Writes go through
`_lock` so that validation and insert happen as one step: two callers
racing for the same (staff, date, slot) cannot both see it free. Lead
status changes that follow from a booking, a cancellation or a deal outcome
are made while the same lock is held.
"""

import threading
from datetime import date
from typing import Optional

import structlog

from fieldsales import leads_store
from fieldsales.config import config
from fieldsales.logging_config import get_logger
from fieldsales.models import (
    BookingOutcome,
    Lead,
    LeadStatus,
    LeaveRecord,
    LeaveScope,
    StaffMember,
    StaffRole,
    Visit,
)
from fieldsales.scheduling import cancel_visit, mark_done, record_deal, request_visit

logger = get_logger(__name__)

# In-memory storage
_staff_db: dict[str, StaffMember] = {}
_leaves_db: list[LeaveRecord] = []
_visits_db: dict[str, Visit] = {}
_lock = threading.Lock()


def list_staff() -> list[StaffMember]:
    """List the staff roster."""
    return list(_staff_db.values())


def get_staff_by_id(staff_id: str) -> Optional[StaffMember]:
    """Get a staff member by ID."""
    return _staff_db.get(staff_id)


def add_staff(member: StaffMember) -> StaffMember:
    """Add a staff member to the roster, replacing any member with the same id."""
    with _lock:
        _staff_db[member.id] = member
    logger.info("staff_added", staff_id=member.id, role=member.role.value)
    return member


def list_leaves() -> list[LeaveRecord]:
    """Snapshot of the leave calendar."""
    return list(_leaves_db)


def add_leave(record: LeaveRecord) -> LeaveRecord:
    with _lock:
        _leaves_db.append(record)
    logger.info("leave_added", date=record.date.isoformat(), scope=record.scope.value, staff_id=record.staff_id)
    return record


def list_visits() -> list[Visit]:
    """Snapshot of every visit, including cancelled ones."""
    return list(_visits_db.values())


def get_visit_by_id(visit_id: str) -> Optional[Visit]:
    """Get a visit by ID."""
    return _visits_db.get(visit_id)


def book_visit(lead: Lead, staff_id: str, visit_date: date, time_slot: str) -> BookingOutcome:
    """
    Validate and store a visit as a single step.

    The lead is re-read under the lock, so a lead that another request has
    just booked or converted is refused with LeadNotOpen. On success the lead
    is moved to the status the scheduler asks for before the lock is released.
    """
    with structlog.contextvars.bound_contextvars(lead_id=lead.id, staff_id=staff_id), _lock:
        current = leads_store.get_lead_by_id(lead.id) or lead
        outcome = request_visit(
            lead=current,
            staff_id=staff_id,
            visit_date=visit_date,
            time_slot=time_slot,
            office=config.office_coordinate(),
            max_radius_km=config.MAX_DISTANCE_KM,
            leave_records=list(_leaves_db),
            existing_visits=list(_visits_db.values()),
            roster=_staff_db.values(),
            slots=config.TIME_SLOTS,
            daily_cap=config.DAILY_VISIT_CAP,
        )
        if outcome.ok:
            _visits_db[outcome.visit.id] = outcome.visit
            if outcome.lead_status is not None:
                leads_store.update_lead_status(current.id, outcome.lead_status)

    return outcome


def complete_visit(visit_id: str, proof_of_presence: str) -> Optional[Visit]:
    """Mark a visit done. Returns None if the visit does not exist."""
    with _lock:
        visit = _visits_db.get(visit_id)
        if visit is None:
            return None
        done = mark_done(visit, proof_of_presence)
        _visits_db[visit_id] = done
    return done


def cancel(visit_id: str) -> Optional[Visit]:
    """
    Cancel a visit. Returns None if the visit does not exist.

    A lead still waiting on this visit goes back to Call Later so it can be
    booked again.
    """
    with _lock:
        visit = _visits_db.get(visit_id)
        if visit is None:
            return None
        cancelled = cancel_visit(visit)
        _visits_db[visit_id] = cancelled

        lead = leads_store.get_lead_by_id(visit.lead_id)
        if lead is not None and lead.status == LeadStatus.VISIT_SCHEDULED:
            leads_store.update_lead_status(lead.id, LeadStatus.CALL_LATER)
    return cancelled


def record_deal_outcome(visit_id: str, deal_confirmed: bool) -> Optional[Lead]:
    """
    Apply the post-visit deal decision to the visited lead.

    Each Done visit takes one outcome; a second attempt raises DealOutcomeError
    and leaves the lead untouched.
    """
    with _lock:
        visit = _visits_db.get(visit_id)
        if visit is None:
            return None
        sealed, status = record_deal(visit, deal_confirmed)
        _visits_db[visit_id] = sealed
        lead = leads_store.update_lead_status(visit.lead_id, status)

    logger.info("deal_outcome_recorded", visit_id=visit_id, lead_id=visit.lead_id, status=status.value)
    return lead


def reset():
    """Drop all staff, leave and visits and reseed the sample data if enabled."""
    with _lock:
        _staff_db.clear()
        _leaves_db.clear()
        _visits_db.clear()
    if config.SEED_SAMPLE_DATA:
        _init_sample_data()


def _init_sample_data():
    """Initialize the demo roster and leave calendar."""
    add_staff(StaffMember(id="u1", name="Vicky Kumar", role=StaffRole.ADMIN, phone="9999999999"))
    add_staff(StaffMember(id="u2", name="Staff A", role=StaffRole.STAFF, phone="8888888888"))
    add_staff(StaffMember(id="u3", name="Staff B", role=StaffRole.STAFF, phone="7777777777"))

    add_leave(LeaveRecord(date=date(2024, 5, 25), reason="Diwali", scope=LeaveScope.GLOBAL))
    add_leave(LeaveRecord(date=date(2024, 5, 26), reason="Wedding", scope=LeaveScope.PERSONAL, staff_id="u1"))


reset()
