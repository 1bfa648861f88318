# admin endpoints: login + participant management
import logging
from typing import Any, Dict

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from .auth import TokenSigner, require_admin, verify_password
from .envelope import (
    INVALID_CREDENTIALS,
    INVALID_STATUS,
    PARTICIPANT_NOT_FOUND,
    APIError,
    success_response,
)
from .mailer import Mailer
from .models import (
    AdminInfo,
    LoginIn,
    LoginOut,
    ParticipantList,
    PaymentStatus,
    PaymentUpdateIn,
    PaymentUpdateOut,
)
from .state import Registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin")


@router.post("/login")
def login(body: LoginIn, request: Request):
    registry: Registry = request.app.state.registry
    signer: TokenSigner = request.app.state.signer

    email = body.email.strip().lower()
    admin = registry.find_admin_by_email(email)
    if admin is None:
        logger.warning("Login attempt with non-existent email: %s", email)
        raise APIError(401, INVALID_CREDENTIALS, "Invalid email or password")

    if not verify_password(admin.password_hash, body.password):
        logger.warning("Failed login attempt for admin: %s", email)
        raise APIError(401, INVALID_CREDENTIALS, "Invalid email or password")

    token, expires_at = signer.issue(admin.id, admin.email)
    logger.info("Admin logged in: %s", admin.email)

    out = LoginOut(token=token, admin=AdminInfo(id=admin.id, email=admin.email), expires_at=expires_at)
    return success_response(200, out.model_dump(mode="json"), "Login successful")


@router.get("/participants")
def list_participants(request: Request, claims: Dict[str, Any] = Depends(require_admin)):
    registry: Registry = request.app.state.registry
    logger.info("Admin %s requested participant list", claims.get("email"))

    participants = registry.all_participants()
    # no paging yet: one page holding everything
    out = ParticipantList(
        participants=participants,
        total=len(participants),
        page=1,
        limit=len(participants),
    )
    return success_response(200, out.model_dump(mode="json"))


@router.patch("/participants/{participant_id}/payment")
def update_payment(
    participant_id: str,
    body: PaymentUpdateIn,
    request: Request,
    background: BackgroundTasks,
    claims: Dict[str, Any] = Depends(require_admin),
):
    registry: Registry = request.app.state.registry
    mailer: Mailer = request.app.state.mailer

    raw = body.payment_status.upper()
    if raw not in PaymentStatus.__members__:
        raise APIError(400, INVALID_STATUS, "Payment status must be either PAID or UNPAID")
    status = PaymentStatus(raw)

    if registry.find_by_id(participant_id) is None:
        raise APIError(
            404,
            PARTICIPANT_NOT_FOUND,
            "Participant with the specified ID does not exist",
            {"id": participant_id},
        )

    p, old = registry.update_payment_status(participant_id, status)
    logger.info(
        "Admin %s updated participant %s payment status: %s -> %s",
        claims.get("email"), p.email, old.value, status.value,
    )

    # only the UNPAID -> PAID edge sends mail, so repeated PAIDs stay quiet
    email_sent = False
    if old is PaymentStatus.UNPAID and status is PaymentStatus.PAID:
        logger.info("Payment status changed to PAID for %s - triggering confirmation email", p.email)
        background.add_task(mailer.send_confirmation, p)
        email_sent = True
    elif old is PaymentStatus.PAID and status is PaymentStatus.PAID:
        logger.info("Payment status already PAID for %s - skipping duplicate email", p.email)

    out = PaymentUpdateOut(id=p.id, payment_status=p.payment_status, updated_at=p.updated_at, email_sent=email_sent)
    return success_response(200, out.model_dump(mode="json"), "Payment status updated successfully")
