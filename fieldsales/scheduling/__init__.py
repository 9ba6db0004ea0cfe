"""Visit-scheduling and availability engine.

This package provides:
- Distance gate around the office (geo.py)
- Leave lookups and leave-reason privacy (leave_calendar.py)
- The day-status calendar (availability.py)
- Slot occupancy and booking validation (slots.py)
- Visit creation (scheduler.py) and lifecycle (visits.py)

Every function works on snapshots passed in by the caller; nothing here keeps state.
"""

from .geo import distance_km, is_within_radius
from .leave_calendar import effective_leave, leave_reason_for
from .availability import booked_count, plan_horizon
from .slots import slots_for, validate_booking
from .scheduler import request_visit
from .visits import (
    DealOutcomeError,
    VisitTransitionError,
    cancel_visit,
    deal_outcome_status,
    mark_done,
    record_deal,
    visits_for_viewer,
)

__all__ = [
    'distance_km',
    'is_within_radius',
    'effective_leave',
    'leave_reason_for',
    'booked_count',
    'plan_horizon',
    'slots_for',
    'validate_booking',
    'request_visit',
    'DealOutcomeError',
    'VisitTransitionError',
    'cancel_visit',
    'deal_outcome_status',
    'mark_done',
    'record_deal',
    'visits_for_viewer',
]
