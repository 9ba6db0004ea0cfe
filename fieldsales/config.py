"""Configuration management for the field-sales visit engine."""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


_DEFAULT_TIME_SLOTS = "10:30 AM - 11:30 AM|12:00 PM - 01:00 PM|01:30 PM - 03:00 PM"


class Config:
    """Application configuration."""

    # Office location (Patna) and service radius for in-person visits
    OFFICE_LATITUDE: float = float(os.getenv("OFFICE_LATITUDE", "25.5940"))
    OFFICE_LONGITUDE: float = float(os.getenv("OFFICE_LONGITUDE", "85.1375"))
    MAX_DISTANCE_KM: float = float(os.getenv("MAX_DISTANCE_KM", "16"))

    # Bookable time slots, in display order. Separated by "|" in the environment.
    TIME_SLOTS: list[str] = [
        slot.strip()
        for slot in os.getenv("TIME_SLOTS", _DEFAULT_TIME_SLOTS).split("|")
        if slot.strip()
    ]

    # Scheduling rules
    DAILY_VISIT_CAP: int = int(os.getenv("DAILY_VISIT_CAP", "3"))
    PLANNER_HORIZON_DAYS: int = int(os.getenv("PLANNER_HORIZON_DAYS", "14"))

    # A converted client is flagged once last contact is strictly older than this
    CLIENT_NEGLECT_DAYS: int = int(os.getenv("CLIENT_NEGLECT_DAYS", "10"))

    # Application Settings
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Populate the in-memory stores with the demo roster, leads and leave calendar
    SEED_SAMPLE_DATA: bool = os.getenv("SEED_SAMPLE_DATA", "True").lower() == "true"

    @classmethod
    def office_coordinate(cls):
        """Return the configured office location as a Coordinate."""
        from fieldsales.models import Coordinate

        return Coordinate(latitude=cls.OFFICE_LATITUDE, longitude=cls.OFFICE_LONGITUDE)


# Create a global config instance
config = Config()
