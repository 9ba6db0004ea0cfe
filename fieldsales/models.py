"""Data models for the field-sales visit engine."""

import enum
from datetime import date, datetime
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, model_validator


class StaffRole(str, enum.Enum):
    """Staff role. Only affects who may read personal leave reasons."""
    ADMIN = "admin"
    STAFF = "staff"


class LeaveScope(str, enum.Enum):
    """Leave scope enum."""
    GLOBAL = "Global"
    PERSONAL = "Personal"


class VisitStatus(str, enum.Enum):
    """Visit status enum. Done and Cancelled are terminal."""
    SCHEDULED = "Scheduled"
    DONE = "Done"
    CANCELLED = "Cancelled"


class LeadStatus(str, enum.Enum):
    """Lead status enum."""
    NEW = "New"
    CALL_LATER = "Call Later"
    NOT_INTERESTED = "Not Interested"
    OLD_LEAD = "Old Lead"
    VISIT_SCHEDULED = "Visit Scheduled"
    CONVERTED = "Converted"


class DayState(str, enum.Enum):
    """Calendar classification of a single day for one staff member."""
    OPEN = "open"
    PARTIAL = "partial"
    BLOCKED = "blocked"


class RejectionReason(str, enum.Enum):
    """Why a booking request was refused."""
    OUT_OF_SERVICE_AREA = "OutOfServiceArea"
    LEAVE_UNAVAILABLE = "LeaveUnavailable"
    CAPACITY_EXCEEDED = "CapacityExceeded"
    SLOT_TAKEN = "SlotTaken"
    UNKNOWN_STAFF = "UnknownStaff"
    UNKNOWN_SLOT = "UnknownSlot"
    MISSING_LOCATION = "MissingLocation"
    LEAD_NOT_OPEN = "LeadNotOpen"


class Coordinate(BaseModel):
    """A latitude/longitude pair in decimal degrees."""
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class StaffMember(BaseModel):
    """A member of the field team."""
    id: str
    name: str
    role: StaffRole = StaffRole.STAFF
    phone: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == StaffRole.ADMIN


class LeaveRecord(BaseModel):
    """
    A day on which one staff member (Personal) or the whole office (Global)
    is unavailable.
    """
    model_config = ConfigDict(frozen=True)

    date: date
    reason: str
    scope: LeaveScope
    staff_id: Optional[str] = None

    @model_validator(mode="after")
    def _check_scope(self):
        if self.scope == LeaveScope.GLOBAL and self.staff_id is not None:
            raise ValueError("Global leave must not name a staff member")
        if self.scope == LeaveScope.PERSONAL and not self.staff_id:
            raise ValueError("Personal leave requires staff_id")
        return self


class Visit(BaseModel):
    """A scheduled in-person visit. Transitions produce a new instance."""
    model_config = ConfigDict(frozen=True)

    id: str
    lead_id: str
    staff_id: str
    visit_date: date
    time_slot: str
    status: VisitStatus = VisitStatus.SCHEDULED
    proof_of_presence: Optional[str] = None  # "lat,lng" captured on site
    deal_recorded: bool = False

    @property
    def is_active(self) -> bool:
        """Whether the visit still occupies its slot and counts toward the daily cap."""
        return self.status != VisitStatus.CANCELLED


# Statuses that may still be called or booked for a visit
OPEN_LEAD_STATUSES = (LeadStatus.NEW, LeadStatus.CALL_LATER, LeadStatus.OLD_LEAD)


class Lead(BaseModel):
    """Lead model representing a prospect or, once converted, a client."""
    id: str
    business_name: str
    owner_name: str
    phone: str
    address: str = ""
    location: Optional[Coordinate] = None
    status: LeadStatus = LeadStatus.NEW
    last_contact: datetime


class DayStatus(BaseModel):
    """One cell of the availability calendar."""
    date: date
    status: DayState
    leave: Optional[LeaveRecord] = None


class SlotAvailability(BaseModel):
    """One row of the slot picker."""
    slot: str
    taken: bool


class FullReason(BaseModel):
    """Leave reason the viewer is allowed to read."""
    kind: Literal["full"] = "full"
    text: str


class MaskedReason(BaseModel):
    """Leave reason hidden from the viewer."""
    kind: Literal["masked"] = "masked"
    text: str = "Unavailable: Busy"


LeaveReason = Annotated[Union[FullReason, MaskedReason], Field(discriminator="kind")]


class BookingRejection(BaseModel):
    """A refused booking. This is an expected outcome, not an error."""
    reason: RejectionReason
    message: str
    distance_km: Optional[float] = None


class BookingOutcome(BaseModel):
    """
    Result of a visit request.

    Exactly one of `visit` or `rejection` is set. On success `lead_status`
    tells the lead-management side which status the lead should move to.
    """
    visit: Optional[Visit] = None
    rejection: Optional[BookingRejection] = None
    lead_status: Optional[LeadStatus] = None

    @property
    def ok(self) -> bool:
        return self.visit is not None


# --- API request / response models ---


class BookVisitRequest(BaseModel):
    """Request model for POST /visits."""
    lead_id: str
    staff_id: str
    visit_date: date
    time_slot: str


class MarkDoneRequest(BaseModel):
    """Request model for POST /visits/{visit_id}/done."""
    proof_of_presence: str = Field(..., min_length=1)


class DealOutcomeRequest(BaseModel):
    """Request model for POST /visits/{visit_id}/deal."""
    deal_confirmed: bool


class LeadStatusUpdate(BaseModel):
    """Request model for PATCH /leads/{lead_id}/status."""
    status: LeadStatus


class DistanceCheckResponse(BaseModel):
    """Response model for GET /leads/{lead_id}/distance."""
    lead_id: str
    distance_km: float
    max_distance_km: float
    within_range: bool


class CalendarDayResponse(BaseModel):
    """A DayStatus as shown to a particular viewer."""
    date: date
    status: DayState
    leave_reason: Optional[LeaveReason] = None


class ClientSummary(BaseModel):
    """Converted client with its follow-up state."""
    lead: Lead
    days_since_contact: int
    neglected: bool
