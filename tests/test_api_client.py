import asyncio

import httpx
import pytest

from funrun.client.api import APIClient
from funrun.client.session import SessionContext
from funrun.envelope import APIError
from funrun.models import PaymentStatus

BASE = "http://api.test/api/v1"


def _client(handler, session=None) -> APIClient:
    return APIClient(BASE, session or SessionContext(), transport=httpx.MockTransport(handler))


def _run(api, coro_fn):
    async def go():
        try:
            return await coro_fn(api)
        finally:
            await api.aclose()

    return asyncio.run(go())


def test_success_envelope_is_unwrapped_and_token_sent():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = request.content
        return httpx.Response(
            200,
            json={
                "success": True,
                "message": "Payment status updated successfully",
                "data": {
                    "id": "p1",
                    "payment_status": "PAID",
                    "updated_at": "2026-10-19T10:00:00Z",
                    "email_sent": True,
                },
            },
        )

    api = _client(handler, SessionContext("tok-123"))
    out = _run(api, lambda a: a.update_payment("p1", PaymentStatus.PAID))

    assert seen["url"] == f"{BASE}/admin/participants/p1/payment"
    assert seen["auth"] == "Bearer tok-123"
    assert b'"payment_status":"PAID"' in seen["body"].replace(b" ", b"")
    assert out.payment_status is PaymentStatus.PAID and out.email_sent is True


def test_no_auth_header_without_session():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"success": True, "data": {"status": "healthy"}})

    env = _run(_client(handler), lambda a: a.get("/public/health"))
    assert seen["auth"] is None
    assert env.data == {"status": "healthy"}


def test_error_envelope_becomes_api_error():
    def handler(request):
        return httpx.Response(
            409,
            json={
                "success": False,
                "error": {"code": "DUPLICATE_EMAIL", "message": "Email address is already registered"},
            },
        )

    with pytest.raises(APIError) as exc:
        _run(_client(handler), lambda a: a.register({"email": "a@b.com"}))
    assert exc.value.status == 409
    assert exc.value.code == "DUPLICATE_EMAIL"
    assert exc.value.message == "Email address is already registered"


def test_error_without_envelope_is_unknown():
    def handler(request):
        return httpx.Response(502, text="<html>bad gateway</html>")

    with pytest.raises(APIError) as exc:
        _run(_client(handler), lambda a: a.get("/public/health"))
    assert exc.value.status == 502
    assert exc.value.code == "UNKNOWN_ERROR"
    assert exc.value.message == "An unexpected error occurred"


def test_success_false_on_2xx_is_still_an_error():
    def handler(request):
        return httpx.Response(200, json={"success": False, "error": {"code": "INVALID_STATUS", "message": "nope"}})

    with pytest.raises(APIError) as exc:
        _run(_client(handler), lambda a: a.get("/public/health"))
    assert exc.value.code == "INVALID_STATUS"


def test_transport_failure_is_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(APIError) as exc:
        _run(_client(handler), lambda a: a.get("/admin/participants"))
    assert exc.value.status == 0
    assert exc.value.code == "NETWORK_ERROR"
    assert "Unable to connect to server" in exc.value.message


@pytest.mark.parametrize("status", [401, 403])
def test_auth_failure_clears_session_and_notifies(status):
    def handler(request):
        return httpx.Response(
            status, json={"success": False, "error": {"code": "TOKEN_EXPIRED", "message": "expired"}}
        )

    session = SessionContext("stale")
    events = []
    session.on_invalidated(lambda: events.append("invalidated"))

    with pytest.raises(APIError) as exc:
        _run(_client(handler, session), lambda a: a.list_participants())

    assert exc.value.session_expired
    assert session.token is None
    assert events == ["invalidated"]


def test_failed_login_without_session_does_not_notify():
    def handler(request):
        return httpx.Response(
            401, json={"success": False, "error": {"code": "INVALID_CREDENTIALS", "message": "Invalid email or password"}}
        )

    session = SessionContext()
    events = []
    session.on_invalidated(lambda: events.append("invalidated"))

    with pytest.raises(APIError) as exc:
        _run(_client(handler, session), lambda a: a.login("admin@x.com", "wrong"))
    assert exc.value.code == "INVALID_CREDENTIALS"
    assert events == []


def test_login_initialises_session():
    def handler(request):
        return httpx.Response(
            200,
            json={
                "success": True,
                "data": {
                    "token": "fresh",
                    "admin": {"id": "a1", "email": "admin@x.com"},
                    "expires_at": "2026-10-20T10:00:00Z",
                },
            },
        )

    session = SessionContext()
    out = _run(_client(handler, session), lambda a: a.login("admin@x.com", "pw"))
    assert out.admin.email == "admin@x.com"
    assert session.token == "fresh" and session.authenticated
