from fastapi import APIRouter, HTTPException

from fieldsales.models import DistanceCheckResponse, Lead, LeadStatusUpdate, StaffMember
from fieldsales import leads_store, calendar_store
from fieldsales.config import config
from fieldsales.scheduling import distance_km, is_within_radius

router = APIRouter(tags=["Core"])


# GET /
# Gets: nothing
# Returns: basic API metadata and a map of key endpoints
# Example:
#   curl http://localhost:8000/
@router.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Field Sales CRM API - visit scheduling and availability",
        "version": "1.0.0",
        "description": "Schedules in-person sales visits within the office service radius, respecting leave and slot capacity",
        "endpoints": {
            "staff": "/staff",
            "leads": "/leads",
            "distance": "/leads/{lead_id}/distance",
            "availability": "/staff/{staff_id}/availability",
            "slots": "/staff/{staff_id}/slots",
            "visits": "/visits",
            "clients": "/clients",
        },
        "features": [
            "Service radius gate",
            "Traffic-light availability calendar",
            "Slot booking with daily cap",
            "Private personal leave reasons",
            "Neglected client alerts",
        ],
    }


# GET /staff
# Gets: nothing
# Returns: JSON array of StaffMember objects
# Example:
#   curl http://localhost:8000/staff
@router.get("/staff", response_model=list[StaffMember])
async def list_staff():
    """List the staff roster."""
    return calendar_store.list_staff()


# GET /leads
# Gets: nothing
# Returns: JSON array of leads still on the calling list (New, Call Later, Old Lead)
# Example:
#   curl http://localhost:8000/leads
@router.get("/leads", response_model=list[Lead])
async def list_leads():
    """List open leads."""
    return leads_store.list_open_leads()


# PATCH /leads/{lead_id}/status
# Gets: JSON body {status: LeadStatus}
# Returns: the updated Lead
# Example:
#   curl -X PATCH http://localhost:8000/leads/l1/status \
#     -H 'Content-Type: application/json' -d '{"status": "Call Later"}'
@router.patch("/leads/{lead_id}/status", response_model=Lead)
async def update_lead_status(lead_id: str, update: LeadStatusUpdate):
    """Set a lead's status from the calling list."""
    lead = leads_store.update_lead_status(lead_id, update.status)
    if not lead:
        raise HTTPException(status_code=404, detail=f"Lead {lead_id} not found")
    return lead


# GET /leads/{lead_id}/distance
# Gets: path param lead_id
# Returns: DistanceCheckResponse {lead_id, distance_km, max_distance_km, within_range}
# Example:
#   curl http://localhost:8000/leads/l1/distance
@router.get("/leads/{lead_id}/distance", response_model=DistanceCheckResponse)
async def check_distance(lead_id: str):
    """Whether a lead is close enough to the office for an in-person visit."""
    lead = leads_store.get_lead_by_id(lead_id)
    if not lead:
        raise HTTPException(status_code=404, detail=f"Lead {lead_id} not found")
    if lead.location is None:
        raise HTTPException(status_code=422, detail=f"Lead {lead_id} has no location")

    office = config.office_coordinate()
    return DistanceCheckResponse(
        lead_id=lead_id,
        distance_km=round(distance_km(office, lead.location), 3),
        max_distance_km=config.MAX_DISTANCE_KM,
        within_range=is_within_radius(office, lead.location, config.MAX_DISTANCE_KM),
    )
