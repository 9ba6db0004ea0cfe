from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException

from fieldsales import leads_store
from fieldsales.clients import client_summaries
from fieldsales.models import ClientSummary, Lead, LeadStatus

router = APIRouter(prefix="/clients", tags=["Clients"])


def _require_client(lead_id: str) -> Lead:
    lead = leads_store.get_lead_by_id(lead_id)
    if not lead or lead.status != LeadStatus.CONVERTED:
        raise HTTPException(status_code=404, detail=f"Client {lead_id} not found")
    return lead


# GET /clients
# Gets: nothing
# Returns: JSON array of {lead, days_since_contact, neglected}, longest without contact first
# Example:
#   curl http://localhost:8000/clients
@router.get("", response_model=list[ClientSummary])
async def list_clients():
    """Converted clients with their follow-up state."""
    return client_summaries(leads_store.list_leads(), datetime.now(timezone.utc))


# POST /clients/{lead_id}/new-order
# Gets: path param lead_id
# Returns: the client Lead with last_contact reset to now
# Example:
#   curl -X POST http://localhost:8000/clients/l4/new-order
@router.post("/{lead_id}/new-order", response_model=Lead)
async def new_work_order(lead_id: str):
    """Record a new work order, which counts as contact."""
    _require_client(lead_id)
    return leads_store.update_lead_status(lead_id, LeadStatus.CONVERTED)


# POST /clients/{lead_id}/demote
# Gets: path param lead_id
# Returns: the Lead moved back to Old Lead
# Example:
#   curl -X POST http://localhost:8000/clients/l4/demote
@router.post("/{lead_id}/demote", response_model=Lead)
async def demote_client(lead_id: str):
    """Client placed no order; return them to the calling list."""
    _require_client(lead_id)
    return leads_store.update_lead_status(lead_id, LeadStatus.OLD_LEAD)
