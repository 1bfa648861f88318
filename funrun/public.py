# public endpoints: health + registration
import logging

from fastapi import APIRouter, Request

from .envelope import DUPLICATE_EMAIL, VALIDATION_ERROR, APIError, success_response
from .models import RegisterIn, RegisterOut
from .state import DuplicateEmail, Registry
from .validation import normalize_instagram, sanitize, validate_registration

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/public")


@router.get("/health")
def health():
    return success_response(200, {"status": "healthy"})


@router.post("/register")
def register(body: RegisterIn, request: Request):
    registry: Registry = request.app.state.registry

    name = sanitize(body.name)
    email = body.email.strip().lower()
    phone = sanitize(body.phone)
    address = sanitize(body.address)
    instagram = sanitize(body.instagram_handle) if body.instagram_handle is not None else None

    errors = validate_registration(name, email, phone, instagram, address)
    if errors:
        raise APIError(400, VALIDATION_ERROR, "Invalid input data", errors)

    if registry.find_by_email(email) is not None:
        raise APIError(409, DUPLICATE_EMAIL, "Email address is already registered", {"email": email})

    try:
        p = registry.create_participant(
            name=name,
            email=email,
            phone=phone,
            address=address,
            instagram_handle=normalize_instagram(instagram),
        )
    except DuplicateEmail:
        # lost a race with a concurrent registration
        raise APIError(409, DUPLICATE_EMAIL, "Email address is already registered")

    logger.info("New participant registered: %s (%s)", p.name, p.email)

    out = RegisterOut(
        id=p.id,
        email=p.email,
        registration_status=p.registration_status,
        payment_status=p.payment_status,
    )
    return success_response(
        201,
        out.model_dump(mode="json"),
        "Registration successful! Your payment status is pending.",
    )
