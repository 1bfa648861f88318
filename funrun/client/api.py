# envelope-aware async client for the registration API
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from ..config import API_TIMEOUT, API_URL
from ..envelope import NETWORK_ERROR, REQUEST_ERROR, UNKNOWN_ERROR, APIError
from ..models import (
    Envelope,
    LoginOut,
    Participant,
    ParticipantList,
    PaymentStatus,
    PaymentUpdateOut,
    RegisterOut,
)
from .session import SessionContext

logger = logging.getLogger(__name__)


class APIClient:
    """
    Thin wrapper over httpx.AsyncClient.

    Every call returns the decoded envelope payload or raises APIError.
    401/403 responses invalidate the session before the error is raised.
    """

    def __init__(
        self,
        base_url: str = API_URL,
        session: Optional[SessionContext] = None,
        *,
        timeout: float = API_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.session = session or SessionContext()
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    # ----------- transport -----------

    async def request(self, method: str, url: str, *, json: Any = None, params: Any = None) -> Envelope:
        try:
            resp = await self._http.request(
                method, url, json=json, params=params, headers=self.session.auth_headers()
            )
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise APIError(0, NETWORK_ERROR, "Unable to connect to server. Please check your internet connection.")
        except httpx.HTTPError as e:
            raise APIError(0, REQUEST_ERROR, str(e) or "An error occurred while making the request")

        env = self._decode(resp)

        if resp.status_code >= 400:
            if resp.status_code in (401, 403):
                self.session.invalidate()
            err = env.error if env is not None else None
            raise APIError(
                resp.status_code,
                err.code if err else UNKNOWN_ERROR,
                err.message if err else "An unexpected error occurred",
                err.details if err else None,
            )

        if env is None:
            raise APIError(resp.status_code, UNKNOWN_ERROR, "An unexpected error occurred")
        if not env.success:
            err = env.error
            raise APIError(
                resp.status_code,
                err.code if err else UNKNOWN_ERROR,
                err.message if err else "An unexpected error occurred",
                err.details if err else None,
            )
        return env

    @staticmethod
    def _decode(resp: httpx.Response) -> Optional[Envelope]:
        try:
            return Envelope[Any].model_validate(resp.json())
        except (ValueError, ValidationError):
            return None

    async def get(self, url: str, params: Any = None) -> Envelope:
        return await self.request("GET", url, params=params)

    async def post(self, url: str, data: Any = None) -> Envelope:
        return await self.request("POST", url, json=data)

    async def patch(self, url: str, data: Any = None) -> Envelope:
        return await self.request("PATCH", url, json=data)

    # ----------- endpoints -----------

    async def register(self, fields: Dict[str, Any]) -> RegisterOut:
        env = await self.post("/public/register", fields)
        return RegisterOut.model_validate(env.data)

    async def login(self, email: str, password: str) -> LoginOut:
        env = await self.post("/admin/login", {"email": email, "password": password})
        out = LoginOut.model_validate(env.data)
        self.session.init(out.token)
        return out

    def logout(self) -> None:
        self.session.clear()

    async def list_participants(self) -> List[Participant]:
        env = await self.get("/admin/participants")
        return ParticipantList.model_validate(env.data).participants

    async def update_payment(self, participant_id: str, status: PaymentStatus) -> PaymentUpdateOut:
        env = await self.patch(
            f"/admin/participants/{participant_id}/payment",
            {"payment_status": PaymentStatus(status).value},
        )
        return PaymentUpdateOut.model_validate(env.data)
