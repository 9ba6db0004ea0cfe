"""Client follow-up: converted leads that have gone too long without contact."""

from datetime import datetime, timedelta
from typing import Iterable, Optional

from fieldsales.config import config
from fieldsales.models import ClientSummary, Lead, LeadStatus


def days_since_contact(last_contact: datetime, now: datetime) -> int:
    """Whole days elapsed since last contact (floored, as shown on the client card)."""
    return (now - last_contact).days


def is_neglected(last_contact: datetime, now: datetime, threshold_days: Optional[int] = None) -> bool:
    """A client is neglected once last contact is strictly more than `threshold_days` ago."""
    threshold_days = config.CLIENT_NEGLECT_DAYS if threshold_days is None else threshold_days
    return now - last_contact > timedelta(days=threshold_days)


def client_summaries(leads: Iterable[Lead], now: datetime, threshold_days: Optional[int] = None) -> list[ClientSummary]:
    """Summaries for converted clients, most neglected first."""
    summaries = [
        ClientSummary(
            lead=lead,
            days_since_contact=days_since_contact(lead.last_contact, now),
            neglected=is_neglected(lead.last_contact, now, threshold_days),
        )
        for lead in leads
        if lead.status == LeadStatus.CONVERTED
    ]
    return sorted(summaries, key=lambda s: s.lead.last_contact)
