"""
Shared fixtures: an in-memory MongoDB (mongomock) wired into a fresh app.
"""

import mongomock
import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import Database
from main import create_app


@pytest.fixture
def settings():
    return Settings(
        port=5000,
        mongo_uri="mongodb://localhost:27017/rail_records_test",
        database_name="rail_records_test",
        app_env="production",
        log_level="INFO",
    )


@pytest.fixture
def db():
    return Database(mongomock.MongoClient(), "rail_records_test")


@pytest.fixture
def client(settings, db):
    app = create_app(settings=settings, db=db)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_data():
    """One document of each rail entity, as a client would post them."""
    return {
        "section_controllers": [
            {"id": "SC1", "name": "R. Kumar", "section": "BZA-GDR", "control_office": "Vijayawada"},
        ],
        "stations": [
            {
                "code": "BZA",
                "name": "Vijayawada Jn",
                "section_controller_id": "SC1",
                "station_master": {"id": "SM1", "name": "P. Rao"},
            },
        ],
        "trains": [
            {
                "train_no": "12711",
                "name": "Pinakini Express",
                "route": ["BZA", "TEL", "GDR"],
                "schedule": [
                    {"station": "BZA", "arrival": "06:00", "departure": "06:10", "section_controller_id": "SC1"},
                    {"station": "GDR", "arrival": "08:30", "departure": "08:32", "section_controller_id": "SC1"},
                ],
            },
        ],
    }
