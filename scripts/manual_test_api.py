#!/usr/bin/env python3
"""
Quick test script to walk through a booking against a running server.
Run the server first: uvicorn fieldsales.main:app --reload
"""

from datetime import date, timedelta

import requests

BASE_URL = "http://127.0.0.1:8000"


def test_api():
    print("Testing Field Sales CRM API...\n")

    # Test 1: Distance gate
    print("1. Checking distance for a nearby and a far lead...")
    for lead_id in ("l1", "l3"):
        data = requests.get(f"{BASE_URL}/leads/{lead_id}/distance").json()
        print(f"   {lead_id}: {data['distance_km']:.1f} km, within range: {data['within_range']}")
    print()

    # Test 2: Calendar
    print("2. Fetching the 14-day calendar for Staff A...")
    response = requests.get(f"{BASE_URL}/staff/u2/availability", params={"viewer_id": "u2"})
    days = response.json()
    print(f"   Status: {response.status_code}")
    print(f"   {sum(1 for d in days if d['status'] == 'open')} open days\n")

    # Test 3: Slots
    visit_date = (date.today() + timedelta(days=1)).isoformat()
    print(f"3. Slots for Staff A on {visit_date}...")
    slots = requests.get(f"{BASE_URL}/staff/u2/slots", params={"date": visit_date}).json()
    for slot in slots:
        print(f"   {slot['slot']}: {'taken' if slot['taken'] else 'free'}")
    print()

    # Test 4: Book
    free = [s["slot"] for s in slots if not s["taken"]]
    if free:
        print("4. Booking the first free slot for lead l1...")
        response = requests.post(
            f"{BASE_URL}/visits",
            json={"lead_id": "l1", "staff_id": "u2", "visit_date": visit_date, "time_slot": free[0]},
        )
        print(f"   Status: {response.status_code}")
        print(f"   Response: {response.json()}\n")

    # Test 5: Out of range booking
    print("5. Trying to book the far lead l3...")
    response = requests.post(
        f"{BASE_URL}/visits",
        json={"lead_id": "l3", "staff_id": "u2", "visit_date": visit_date, "time_slot": "10:30 AM - 11:30 AM"},
    )
    print(f"   Status: {response.status_code}")
    print(f"   Rejection: {response.json()['detail']['reason']}\n")

    # Test 6: Clients
    print("6. Checking clients for neglect...")
    for client in requests.get(f"{BASE_URL}/clients").json():
        flag = "TIME UP!" if client["neglected"] else "ok"
        print(f"   {client['lead']['business_name']}: {client['days_since_contact']} days ({flag})")

    print("\n✅ All API tests completed!")


if __name__ == "__main__":
    try:
        test_api()
    except requests.exceptions.ConnectionError:
        print("❌ Error: Could not connect to server.")
        print("Please start the server first:")
        print("  uvicorn fieldsales.main:app --reload")
