"""In-memory storage for leads and clients."""

from datetime import datetime, timedelta, timezone
from typing import Optional
from fieldsales.config import config
from fieldsales.logging_config import get_logger
from fieldsales.models import OPEN_LEAD_STATUSES, Coordinate, Lead, LeadStatus

logger = get_logger(__name__)

# In-memory storage
_leads_db: dict[str, Lead] = {}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def add_lead(lead: Lead) -> Lead:
    """Store a lead, replacing any lead with the same id."""
    _leads_db[lead.id] = lead
    return lead


def get_lead_by_id(lead_id: str) -> Optional[Lead]:
    """Get a lead by ID."""
    return _leads_db.get(lead_id)


def list_leads() -> list[Lead]:
    """List all leads."""
    return list(_leads_db.values())


def list_open_leads() -> list[Lead]:
    """Leads still waiting for a call or a visit."""
    return [lead for lead in _leads_db.values() if lead.status in OPEN_LEAD_STATUSES]


def update_lead_status(lead_id: str, status: LeadStatus) -> Optional[Lead]:
    """Change a lead's status. Any status change counts as contact."""
    lead = _leads_db.get(lead_id)
    if lead is None:
        return None

    updated = lead.model_copy(update={"status": status, "last_contact": _now()})
    _leads_db[lead_id] = updated
    logger.info("lead_status_updated", lead_id=lead_id, status=status.value)
    return updated


def reset():
    """Drop all leads and reseed the sample data if enabled."""
    _leads_db.clear()
    if config.SEED_SAMPLE_DATA:
        _init_sample_leads()


def _init_sample_leads():
    """Initialize some sample leads for testing."""
    now = _now()
    samples = [
        Lead(id="l1", business_name="Gupta Offset", owner_name="Ravi Gupta", phone="9876543210",
             address="Kankarbagh, Patna", location=Coordinate(latitude=25.5900, longitude=85.1500),
             last_contact=now),
        Lead(id="l2", business_name="City Printers", owner_name="Amit Singh", phone="9876543211",
             address="Danapur, Patna", location=Coordinate(latitude=25.6200, longitude=85.0400),
             last_contact=now),
        Lead(id="l3", business_name="Far Away Press", owner_name="John Doe", phone="9876543212",
             address="Muzaffarpur", location=Coordinate(latitude=26.1200, longitude=85.3900),
             last_contact=now),
        Lead(id="l4", business_name="Converted Client 1", owner_name="Suresh", phone="1231231233",
             address="Patna", location=Coordinate(latitude=25.6000, longitude=85.1000),
             status=LeadStatus.CONVERTED, last_contact=now - timedelta(days=11)),
        Lead(id="l5", business_name="Converted Client 2", owner_name="Mahesh", phone="1231231234",
             address="Patna", location=Coordinate(latitude=25.6000, longitude=85.1000),
             status=LeadStatus.CONVERTED, last_contact=now - timedelta(days=2)),
    ]
    for lead in samples:
        add_lead(lead)


reset()
