from datetime import datetime, timezone

import pytest


SLOTS = ["10:30 AM - 11:30 AM", "12:00 PM - 01:00 PM", "01:30 PM - 03:00 PM"]


@pytest.fixture(autouse=True)
def _safe_test_config(monkeypatch):
    """Force deterministic config for tests and start every test from the sample data.

    The repo loads .env on import; these overrides keep a developer's local
    settings from changing radius, slots or caps under the tests.
    """
    from fieldsales.config import config, Config
    from fieldsales import calendar_store, leads_store

    overrides = {
        "OFFICE_LATITUDE": 25.5940,
        "OFFICE_LONGITUDE": 85.1375,
        "MAX_DISTANCE_KM": 16.0,
        "TIME_SLOTS": list(SLOTS),
        "DAILY_VISIT_CAP": 3,
        "PLANNER_HORIZON_DAYS": 14,
        "CLIENT_NEGLECT_DAYS": 10,
        "SEED_SAMPLE_DATA": True,
    }
    for name, value in overrides.items():
        monkeypatch.setattr(Config, name, value, raising=False)
        # Keep the instance in sync for any code that reads instance attributes directly.
        monkeypatch.setattr(config, name, value, raising=False)

    leads_store.reset()
    calendar_store.reset()

    return config


@pytest.fixture
def now():
    """Fixed clock for neglect and horizon tests."""
    return datetime(2024, 5, 20, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_open_lead():
    """Factory that stores a New lead about 1.5 km from the office and returns it."""
    from fieldsales import leads_store
    from fieldsales.models import Coordinate, Lead

    def _make(lead_id: str) -> Lead:
        return leads_store.add_lead(
            Lead(
                id=lead_id,
                business_name=f"Press {lead_id}",
                owner_name="Owner",
                phone="9000000000",
                location=Coordinate(latitude=25.6000, longitude=85.1500),
                last_contact=datetime(2024, 5, 1, tzinfo=timezone.utc),
            )
        )

    return _make
