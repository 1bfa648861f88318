import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from ..envelope import DUPLICATE_EMAIL, VALIDATION_ERROR, APIError
from ..models import RegisterOut
from ..validation import validate
from .api import APIClient

logger = logging.getLogger(__name__)

DEFAULT_SUCCESS = "Registration successful! Your payment status is pending."


@dataclass
class FormResult:
    ok: bool
    # field -> message shown next to the input
    errors: Dict[str, str] = field(default_factory=dict)
    # banner text above the form
    message: str = ""
    registration: Optional[RegisterOut] = None


def normalize(fields: Mapping[str, Optional[str]]) -> Dict[str, str]:
    payload = {
        "name": (fields.get("name") or "").strip(),
        "email": (fields.get("email") or "").strip().lower(),
        "phone": (fields.get("phone") or "").strip(),
        "address": (fields.get("address") or "").strip(),
    }
    instagram = (fields.get("instagram_handle") or "").strip()
    if instagram:
        payload["instagram_handle"] = instagram
    return payload


class RegistrationForm:
    """
    Public sign-up flow: validate locally, submit once, turn API errors
    into field messages. Invalid input never reaches the network.
    """

    def __init__(self, api: APIClient) -> None:
        self.api = api

    async def submit(self, fields: Mapping[str, Optional[str]]) -> FormResult:
        errors = validate(fields)
        if errors:
            return FormResult(ok=False, errors=errors)

        try:
            out = await self.api.register(normalize(fields))
        except APIError as e:
            return self._from_error(e)

        return FormResult(ok=True, message=DEFAULT_SUCCESS, registration=out)

    @staticmethod
    def _from_error(e: APIError) -> FormResult:
        if e.code == DUPLICATE_EMAIL:
            return FormResult(
                ok=False,
                errors={"email": "Email already registered"},
                message="This email address is already registered.",
            )
        if e.code == VALIDATION_ERROR and e.details:
            field_errors = {d["field"]: d["message"] for d in e.details if "field" in d}
            return FormResult(ok=False, errors=field_errors, message="Please check the form for errors.")
        logger.warning("Registration failed: %r", e)
        return FormResult(ok=False, message=e.message or "Registration failed. Please try again.")
