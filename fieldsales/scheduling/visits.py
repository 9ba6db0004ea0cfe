"""Visit lifecycle: Scheduled -> Done | Cancelled, and the post-visit deal outcome."""

from typing import Iterable, Optional

from fieldsales.logging_config import get_logger
from fieldsales.models import LeadStatus, StaffMember, Visit, VisitStatus

logger = get_logger(__name__)

VALID_VISIT_TRANSITIONS = {
    VisitStatus.SCHEDULED: [VisitStatus.DONE, VisitStatus.CANCELLED],
    VisitStatus.DONE: [],  # TERMINAL
    VisitStatus.CANCELLED: [],  # TERMINAL
}


class VisitTransitionError(ValueError):
    """Raised when a visit is moved along a transition the state machine does not allow."""

    def __init__(self, visit: Visit, target: VisitStatus, message: Optional[str] = None):
        self.visit = visit
        self.target = target
        super().__init__(message or f"Visit {visit.id} is {visit.status.value}; cannot move to {target.value}")


class DealOutcomeError(VisitTransitionError):
    """Raised when a deal outcome is recorded for a visit that is not done, or twice."""

    def __init__(self, visit: Visit, message: str):
        super().__init__(visit, VisitStatus.DONE, message)


def _check_transition(visit: Visit, target: VisitStatus) -> None:
    if target not in VALID_VISIT_TRANSITIONS[visit.status]:
        raise VisitTransitionError(visit, target)


def mark_done(visit: Visit, proof_of_presence: str) -> Visit:
    """Complete a visit, storing where the staff member was when they checked in."""
    _check_transition(visit, VisitStatus.DONE)
    if not proof_of_presence or not proof_of_presence.strip():
        raise ValueError("proof_of_presence is required to mark a visit done")

    done = visit.model_copy(update={"status": VisitStatus.DONE, "proof_of_presence": proof_of_presence.strip()})
    logger.info("visit_done", visit_id=visit.id, staff_id=visit.staff_id)
    return done


def cancel_visit(visit: Visit) -> Visit:
    """Cancel a scheduled visit, freeing its slot."""
    _check_transition(visit, VisitStatus.CANCELLED)
    cancelled = visit.model_copy(update={"status": VisitStatus.CANCELLED})
    logger.info("visit_cancelled", visit_id=visit.id, staff_id=visit.staff_id)
    return cancelled


def deal_outcome_status(visit: Visit, deal_confirmed: bool) -> LeadStatus:
    """
    Lead status to apply after a completed visit.

    The outcome is decided by a person after the visit; this only maps it.
    """
    if visit.status != VisitStatus.DONE:
        raise DealOutcomeError(
            visit,
            f"Visit {visit.id} is {visit.status.value}; a deal outcome can only be recorded once it is Done",
        )
    return LeadStatus.CONVERTED if deal_confirmed else LeadStatus.NOT_INTERESTED


def record_deal(visit: Visit, deal_confirmed: bool) -> tuple[Visit, LeadStatus]:
    """Seal a Done visit with its deal outcome. Each visit takes exactly one outcome."""
    status = deal_outcome_status(visit, deal_confirmed)
    if visit.deal_recorded:
        raise DealOutcomeError(visit, f"Visit {visit.id} already has a recorded deal outcome")
    return visit.model_copy(update={"deal_recorded": True}), status


def visits_for_viewer(visits: Iterable[Visit], viewer: StaffMember) -> list[Visit]:
    """Admins see every visit; staff see their own. Sorted by visit date."""
    mine = [v for v in visits if viewer.is_admin or v.staff_id == viewer.id]
    return sorted(mine, key=lambda v: v.visit_date)
