from fastapi import APIRouter, HTTPException
from prometheus_client import Counter

from fieldsales import calendar_store, leads_store
from fieldsales.logging_config import get_logger
from fieldsales.models import BookVisitRequest, DealOutcomeRequest, Lead, MarkDoneRequest, Visit
from fieldsales.scheduling import VisitTransitionError, visits_for_viewer

logger = get_logger(__name__)

router = APIRouter(prefix="/visits", tags=["Visits"])

visits_booked = Counter('visits_booked_total', 'Total visits booked')
booking_rejections = Counter('booking_rejections_total', 'Booking requests refused', ['reason'])


# POST /visits
# Gets: JSON body {lead_id, staff_id, visit_date: YYYY-MM-DD, time_slot}
# Returns: 201 with the new Visit; 409 with {"detail": {reason, message, distance_km?}} when refused
# Example:
#   curl -X POST http://localhost:8000/visits \
#     -H 'Content-Type: application/json' \
#     -d '{"lead_id": "l1", "staff_id": "u2", "visit_date": "2024-05-20", "time_slot": "10:30 AM - 11:30 AM"}'
@router.post("", response_model=Visit, status_code=201)
async def book_visit(request: BookVisitRequest):
    """Book an in-person visit for a lead."""
    lead = leads_store.get_lead_by_id(request.lead_id)
    if not lead:
        raise HTTPException(status_code=404, detail=f"Lead {request.lead_id} not found")

    outcome = calendar_store.book_visit(lead, request.staff_id, request.visit_date, request.time_slot)
    if not outcome.ok:
        booking_rejections.labels(reason=outcome.rejection.reason.value).inc()
        raise HTTPException(status_code=409, detail=outcome.rejection.model_dump(mode="json"))

    visits_booked.inc()
    return outcome.visit


# GET /visits?viewer_id=u2
# Gets: query param viewer_id
# Returns: JSON array of visits the viewer may see (admins: all, staff: own), by date
# Example:
#   curl 'http://localhost:8000/visits?viewer_id=u1'
@router.get("", response_model=list[Visit])
async def list_visits(viewer_id: str):
    """List visits visible to a staff member."""
    viewer = calendar_store.get_staff_by_id(viewer_id)
    if not viewer:
        raise HTTPException(status_code=404, detail=f"Staff {viewer_id} not found")
    return visits_for_viewer(calendar_store.list_visits(), viewer)


# POST /visits/{visit_id}/done
# Gets: JSON body {proof_of_presence: "lat,lng"}
# Returns: the completed Visit; 409 if the visit is not Scheduled
# Example:
#   curl -X POST http://localhost:8000/visits/<id>/done \
#     -H 'Content-Type: application/json' -d '{"proof_of_presence": "25.5901,85.1499"}'
@router.post("/{visit_id}/done", response_model=Visit)
async def mark_visit_done(visit_id: str, request: MarkDoneRequest):
    """Mark a visit done with the location captured on site."""
    try:
        visit = calendar_store.complete_visit(visit_id, request.proof_of_presence)
    except VisitTransitionError as e:
        logger.warning("visit_transition_refused", visit_id=visit_id, error=str(e))
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if not visit:
        raise HTTPException(status_code=404, detail=f"Visit {visit_id} not found")
    return visit


# POST /visits/{visit_id}/cancel
# Gets: nothing
# Returns: the cancelled Visit; 409 if the visit is not Scheduled
# Example:
#   curl -X POST http://localhost:8000/visits/<id>/cancel
@router.post("/{visit_id}/cancel", response_model=Visit)
async def cancel_visit(visit_id: str):
    """Cancel a scheduled visit and free its slot."""
    try:
        visit = calendar_store.cancel(visit_id)
    except VisitTransitionError as e:
        logger.warning("visit_transition_refused", visit_id=visit_id, error=str(e))
        raise HTTPException(status_code=409, detail=str(e))

    if not visit:
        raise HTTPException(status_code=404, detail=f"Visit {visit_id} not found")
    return visit


# POST /visits/{visit_id}/deal
# Gets: JSON body {deal_confirmed: bool}
# Returns: the visited Lead with its new status (Converted or Not Interested); 409 if the visit is not Done or already has an outcome
# Example:
#   curl -X POST http://localhost:8000/visits/<id>/deal \
#     -H 'Content-Type: application/json' -d '{"deal_confirmed": true}'
@router.post("/{visit_id}/deal", response_model=Lead)
async def record_deal(visit_id: str, request: DealOutcomeRequest):
    """Record whether the visit closed a deal."""
    try:
        lead = calendar_store.record_deal_outcome(visit_id, request.deal_confirmed)
    except VisitTransitionError as e:
        logger.warning("deal_outcome_refused", visit_id=visit_id, error=str(e))
        raise HTTPException(status_code=409, detail=str(e))

    if not lead:
        raise HTTPException(status_code=404, detail=f"Visit {visit_id} or its lead not found")
    return lead
