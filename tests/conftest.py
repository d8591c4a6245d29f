"""
Pytest configuration and shared fixtures.
"""

import sqlite3
from pathlib import Path
from typing import Any, Dict, List

import pytest
import requests

from civicfix.config import Settings
from civicfix.db_connection import create_schema


OFFICIALS = [
    # user_id, full_name, role, is_verified, phone, email, city, state, district, pincode, ward, area, n, s, e, w
    ("off-ward5", "Asha Verma", "official", 1, "+911100000001", "asha@delhi.gov.in",
     "Delhi", "Delhi", "New Delhi", "110001", "Ward 5", "Connaught Place",
     28.65, 28.60, 77.25, 77.20),
    ("off-delhi", "Rahul Mehta", "official", 1, "+911100000002", None,
     "Delhi", "Delhi", None, None, None, None,
     None, None, None, None),
    ("off-mumbai", "Priya Nair", "official", 1, None, "priya@mumbai.gov.in",
     "Mumbai", "Maharashtra", "Mumbai City", "400001", None, "Fort",
     None, None, None, None),
    ("off-unverified", "Vikram Rao", "official", 0, "+911100000004", "vikram@delhi.gov.in",
     "Delhi", "Delhi", "New Delhi", "110001", "Ward 5", "Connaught Place",
     None, None, None, None),
    ("citizen-1", "Meera Iyer", "citizen", 1, "+919800000000", "meera@example.com",
     "Delhi", "Delhi", None, "110001", None, None,
     None, None, None, None),
]

ISSUES = [
    ("issue-1", "Pothole on Janpath", "pothole_repair", "Delhi", "Delhi", "Ward 5",
     "Connaught Place", "110001", "pending"),
    ("issue-2", "Streetlight out", "street_light", "Delhi", "Delhi", None,
     None, None, "in_progress"),
]


@pytest.fixture
def directory_db(tmp_path) -> Path:
    """Profile directory with a handful of officials and issues."""
    db_path = tmp_path / "civicfix.db"
    create_schema(db_path)

    with sqlite3.connect(str(db_path)) as conn:
        conn.executemany(
            """
            INSERT INTO profiles (
                user_id, full_name, role, is_verified, phone, email,
                city, state, district, pincode, ward, area,
                geo_north, geo_south, geo_east, geo_west
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            OFFICIALS,
        )
        conn.executemany(
            """
            INSERT INTO issues (
                issue_id, title, issue_type, city, state, ward, area, pincode, status
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            ISSUES,
        )
    return db_path


@pytest.fixture
def test_settings(directory_db) -> Settings:
    """Settings with every notification channel configured."""
    return Settings(
        _env_file=None,
        database_path=directory_db,
        twilio_account_sid="AC123",
        twilio_auth_token="secret",
        twilio_phone_number="+15550000000",
        sendgrid_api_key="SG.key",
        site_url="https://civicfix.test",
    )


class FakeResponse:
    def __init__(self, status_code: int = 200):
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Stands in for requests.Session, recording every POST."""

    def __init__(self, status_code: int = 200, error: Exception = None):
        self.status_code = status_code
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def post(self, url: str, **kwargs) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status_code)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()
