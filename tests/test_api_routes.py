"""Tests for API routes."""

from datetime import date

from fastapi.testclient import TestClient
from fieldsales import calendar_store, leads_store
from fieldsales.config import Config, config
from fieldsales.main import app
from fieldsales.models import LeaveRecord, LeaveScope
from fieldsales.scheduling import distance_km
from tests.conftest import SLOTS

client = TestClient(app)



def _book(lead_id="l1", staff_id="u2", visit_date="2024-05-20", slot=SLOTS[0]):
    return client.post(
        "/visits",
        json={"lead_id": lead_id, "staff_id": staff_id, "visit_date": visit_date, "time_slot": slot},
    )


def test_root_endpoint():
    """Test root endpoint returns API info."""
    response = client.get("/")
    assert response.status_code == 200

    data = response.json()
    assert "message" in data
    assert "endpoints" in data


def test_list_staff_endpoint():
    """Test that the roster is listed in id order."""
    response = client.get("/staff")
    assert response.status_code == 200
    assert [s["id"] for s in response.json()] == ["u1", "u2", "u3"]


def test_list_leads_only_open():
    """Test that only open leads are on the calling list."""
    response = client.get("/leads")
    assert response.status_code == 200
    assert {lead["id"] for lead in response.json()} == {"l1", "l2", "l3"}


def test_update_lead_status():
    """Test that a lead status can be changed and bad ids or statuses are refused."""
    response = client.patch("/leads/l2/status", json={"status": "Call Later"})
    assert response.status_code == 200
    assert response.json()["status"] == "Call Later"

    assert client.patch("/leads/l99/status", json={"status": "New"}).status_code == 404
    assert client.patch("/leads/l2/status", json={"status": "Maybe"}).status_code == 422


def test_distance_check():
    """Test that the distance check reports km and whether the lead is in range."""
    near = client.get("/leads/l1/distance").json()
    assert near["within_range"] is True
    assert 1.0 < near["distance_km"] < 1.5
    assert near["max_distance_km"] == 16

    far = client.get("/leads/l3/distance").json()
    assert far["within_range"] is False
    assert far["distance_km"] > 60

    assert client.get("/leads/l99/distance").status_code == 404


def test_availability_grid_masks_personal_leave_for_peers():
    """Test that peers see office closures but not personal leave reasons."""
    # u1 has a Personal "Wedding" leave on 2024-05-26 in the sample data
    peer = client.get("/staff/u1/availability", params={"viewer_id": "u2", "start": "2024-05-20"})
    assert peer.status_code == 200
    days = {d["date"]: d for d in peer.json()}
    assert len(days) == 14

    assert days["2024-05-25"]["status"] == "blocked"
    assert days["2024-05-25"]["leave_reason"] == {"kind": "full", "text": "Office Closed: Diwali"}

    assert days["2024-05-26"]["status"] == "blocked"
    assert days["2024-05-26"]["leave_reason"] == {"kind": "masked", "text": "Unavailable: Busy"}
    assert "Wedding" not in peer.text

    assert days["2024-05-20"]["status"] == "open"
    assert days["2024-05-20"]["leave_reason"] is None


def test_availability_grid_shows_reason_to_owner_and_admin():
    """Test that the owner and admins read a personal leave reason."""
    calendar_store.add_leave(
        LeaveRecord(date=date(2024, 5, 28), reason="Exam", scope=LeaveScope.PERSONAL, staff_id="u2")
    )
    params = {"start": "2024-05-28", "days": 1}

    for viewer in ("u1", "u2"):
        resp = client.get("/staff/u2/availability", params={**params, "viewer_id": viewer})
        assert resp.json()[0]["leave_reason"] == {"kind": "full", "text": "Unavailable: Exam"}

    resp = client.get("/staff/u2/availability", params={**params, "viewer_id": "u3"})
    assert resp.json()[0]["leave_reason"] == {"kind": "masked", "text": "Unavailable: Busy"}


def test_availability_unknown_staff_or_viewer():
    """Test that unknown staff or viewers get 404."""
    assert client.get("/staff/u9/availability", params={"viewer_id": "u1"}).status_code == 404
    assert client.get("/staff/u1/availability", params={"viewer_id": "u9"}).status_code == 404


def test_availability_zero_days():
    """Test that a zero-day grid is empty."""
    resp = client.get("/staff/u2/availability", params={"viewer_id": "u2", "days": 0})
    assert resp.status_code == 200
    assert resp.json() == []


def test_book_then_slot_is_taken():
    """Test that a booked slot shows as taken and refuses another lead."""
    response = _book()
    assert response.status_code == 201
    visit = response.json()
    assert visit["status"] == "Scheduled"
    assert visit["time_slot"] == SLOTS[0]

    slots = client.get("/staff/u2/slots", params={"date": "2024-05-20"}).json()
    assert slots == [
        {"slot": SLOTS[0], "taken": True},
        {"slot": SLOTS[1], "taken": False},
        {"slot": SLOTS[2], "taken": False},
    ]

    again = _book(lead_id="l2")
    assert again.status_code == 409
    assert again.json()["detail"]["reason"] == "SlotTaken"

    assert _book(lead_id="l2", slot=SLOTS[1]).status_code == 201


def test_full_day_is_blocked_and_rejects_capacity(make_open_lead):
    """Test that a full day is blocked and refuses further bookings."""
    for n, slot in enumerate(SLOTS):
        assert _book(lead_id=make_open_lead(f"n{n}").id, slot=slot).status_code == 201

    day = client.get("/staff/u2/availability", params={"viewer_id": "u2", "start": "2024-05-20", "days": 1}).json()
    assert day[0]["status"] == "blocked"
    assert _book(lead_id="l2").json()["detail"]["reason"] == "CapacityExceeded"


def test_book_out_of_range_lead():
    """Test that a distant lead is refused with its distance."""
    response = _book(lead_id="l3")
    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["reason"] == "OutOfServiceArea"
    assert detail["distance_km"] > 60


def test_book_on_leave_and_unknown_lead():
    """Test that leave days are refused and unknown leads get 404."""
    assert _book(visit_date="2024-05-25").json()["detail"]["reason"] == "LeaveUnavailable"
    assert _book(lead_id="l99").status_code == 404


def test_book_marks_lead_visit_scheduled():
    """Test that a booked lead leaves the calling list."""
    _book()
    assert "l1" not in {lead["id"] for lead in client.get("/leads").json()}


def test_visit_lifecycle_and_deal():
    """Test the Scheduled, Done and deal outcome flow through the API."""
    visit_id = _book(staff_id="u3").json()["id"]

    assert client.post(f"/visits/{visit_id}/deal", json={"deal_confirmed": True}).status_code == 409

    done = client.post(f"/visits/{visit_id}/done", json={"proof_of_presence": "25.5901,85.1499"})
    assert done.status_code == 200
    assert done.json()["status"] == "Done"
    assert done.json()["proof_of_presence"] == "25.5901,85.1499"

    assert client.post(f"/visits/{visit_id}/cancel").status_code == 409
    assert client.post(f"/visits/{visit_id}/done", json={"proof_of_presence": "1,2"}).status_code == 409

    lead = client.post(f"/visits/{visit_id}/deal", json={"deal_confirmed": False})
    assert lead.status_code == 200
    assert lead.json()["status"] == "Not Interested"


def test_mark_done_requires_proof():
    """Test that blank proof of presence is refused with 422."""
    visit_id = _book().json()["id"]
    assert client.post(f"/visits/{visit_id}/done", json={"proof_of_presence": ""}).status_code == 422
    assert client.post(f"/visits/{visit_id}/done", json={"proof_of_presence": "  "}).status_code == 422


def test_cancel_then_rebook():
    """Test that a cancelled slot can be booked again."""
    visit_id = _book().json()["id"]
    assert client.post(f"/visits/{visit_id}/cancel").json()["status"] == "Cancelled"
    assert _book(lead_id="l2").status_code == 201
    assert _book(lead_id="l1", slot=SLOTS[1]).status_code == 201
    assert client.post("/visits/unknown/cancel").status_code == 404


def test_visits_listing_respects_viewer():
    """Test that admins see every visit and staff see their own."""
    _book(staff_id="u2")
    _book(lead_id="l2", staff_id="u3", visit_date="2024-05-19")

    admin = client.get("/visits", params={"viewer_id": "u1"}).json()
    assert [v["staff_id"] for v in admin] == ["u3", "u2"]

    staff = client.get("/visits", params={"viewer_id": "u2"}).json()
    assert [v["staff_id"] for v in staff] == ["u2"]

    assert client.get("/visits", params={"viewer_id": "u9"}).status_code == 404


def test_clients_neglect_flags():
    """Test that clients untouched for over ten days are flagged."""
    clients = client.get("/clients").json()
    flags = {c["lead"]["id"]: c["neglected"] for c in clients}
    assert flags == {"l4": True, "l5": False}


def test_new_order_resets_neglect_and_demote_moves_to_leads():
    """Test that a new order clears neglect and demoting returns the client to leads."""
    assert client.post("/clients/l4/new-order").status_code == 200
    flags = {c["lead"]["id"]: c["neglected"] for c in client.get("/clients").json()}
    assert flags["l4"] is False

    assert client.post("/clients/l5/demote").json()["status"] == "Old Lead"
    assert "l5" in {lead["id"] for lead in client.get("/leads").json()}
    assert client.post("/clients/l5/demote").status_code == 404


def test_distance_check_radius_is_inclusive(monkeypatch):
    """Test that a lead exactly on the radius is reported in range."""
    lead = leads_store.get_lead_by_id("l1")
    d = distance_km(config.office_coordinate(), lead.location)

    monkeypatch.setattr(Config, "MAX_DISTANCE_KM", d)
    monkeypatch.setattr(config, "MAX_DISTANCE_KM", d, raising=False)
    assert client.get("/leads/l1/distance").json()["within_range"] is True

    monkeypatch.setattr(Config, "MAX_DISTANCE_KM", d - 1e-6)
    monkeypatch.setattr(config, "MAX_DISTANCE_KM", d - 1e-6, raising=False)
    assert client.get("/leads/l1/distance").json()["within_range"] is False


def test_book_converted_client_is_refused():
    """Test that a converted client cannot be booked as a lead."""
    response = _book(lead_id="l4")
    assert response.status_code == 409
    assert response.json()["detail"]["reason"] == "LeadNotOpen"
    assert calendar_store.list_visits() == []


def test_lead_is_booked_only_once():
    """Test that a lead with a scheduled visit cannot be booked again."""
    assert _book(lead_id="l2").status_code == 201

    again = _book(lead_id="l2", staff_id="u3", slot=SLOTS[1])
    assert again.status_code == 409
    assert again.json()["detail"]["reason"] == "LeadNotOpen"
    assert len(calendar_store.list_visits()) == 1


def test_deal_outcome_is_recorded_once():
    """Test that a visit takes one deal outcome, even after the client is demoted."""
    visit_id = _book().json()["id"]
    client.post(f"/visits/{visit_id}/done", json={"proof_of_presence": "25.5901,85.1499"})

    first = client.post(f"/visits/{visit_id}/deal", json={"deal_confirmed": True})
    assert first.status_code == 200
    assert first.json()["status"] == "Converted"

    assert client.post("/clients/l1/demote").json()["status"] == "Old Lead"

    for confirmed in (True, False):
        again = client.post(f"/visits/{visit_id}/deal", json={"deal_confirmed": confirmed})
        assert again.status_code == 409
        assert "already has a recorded deal outcome" in again.json()["detail"]
    assert leads_store.get_lead_by_id("l1").status.value == "Old Lead"


def test_deal_before_done_explains_why():
    """Test that a deal outcome on a Scheduled visit says the visit is not done."""
    visit_id = _book().json()["id"]
    response = client.post(f"/visits/{visit_id}/deal", json={"deal_confirmed": True})
    assert response.status_code == 409
    assert "only be recorded once it is Done" in response.json()["detail"]
