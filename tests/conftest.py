from datetime import datetime, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

from funrun.client.api import APIClient
from funrun.client.session import SessionContext
from funrun.config import Settings
from funrun.main import create_app
from funrun.models import Participant, PaymentStatus

ADMIN_EMAIL = "admin@taurun.test"
ADMIN_PASSWORD = "runfast123"
BASE_URL = "http://testserver/api/v1"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        env="test",
        token_secret="x" * 40,
        token_expiration_hours=1,
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
        smtp_host="",
        smtp_username="",
        smtp_password="",
        event_name="Test Run 5K",
        cors_allowed_origins=["http://localhost:3000"],
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def admin_token(client) -> str:
    resp = client.post("/api/v1/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return resp.json()["data"]["token"]


@pytest.fixture
def make_api(app):
    """
    APIClient talking to the in-process app over ASGI.
    """

    def _make(session: SessionContext = None) -> APIClient:
        return APIClient(BASE_URL, session or SessionContext(), transport=httpx.ASGITransport(app=app))

    return _make


def make_participant(pid: str, status: PaymentStatus = PaymentStatus.UNPAID, **kw) -> Participant:
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    fields = dict(
        id=pid,
        name=f"Runner {pid}",
        email=f"{pid}@example.com",
        phone="081234567890",
        address="Jl. Sudirman No. 1, Jakarta",
        payment_status=status,
        created_at=now,
        updated_at=now,
    )
    fields.update(kw)
    return Participant(**fields)


def registration(email: str = "a@b.com", **kw) -> dict:
    fields = {
        "name": "Ayu Lestari",
        "email": email,
        "phone": "081234567890",
        "address": "Jl. Merdeka No. 10, Bandung",
    }
    fields.update(kw)
    return fields
