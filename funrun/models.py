from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaymentStatus(str, Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"


class RegistrationStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"


class Participant(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    instagram_handle: Optional[str] = None
    address: str
    registration_status: RegistrationStatus = RegistrationStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    created_at: datetime
    updated_at: datetime


class RegisterIn(BaseModel):
    name: str = Field(..., examples=["Budi Santoso"])
    email: str = Field(..., examples=["budi@example.com"])
    phone: str = Field(..., examples=["081234567890"])
    instagram_handle: Optional[str] = Field(None, examples=["@budi.runs"])
    address: str = Field(..., examples=["Jl. Merdeka No. 10, Jakarta"])


class RegisterOut(BaseModel):
    id: str
    email: str
    registration_status: RegistrationStatus
    payment_status: PaymentStatus


class LoginIn(BaseModel):
    email: str = Field(..., examples=["admin@example.com"])
    password: str


class AdminInfo(BaseModel):
    id: str
    email: str


class LoginOut(BaseModel):
    token: str
    admin: AdminInfo
    expires_at: datetime


class PaymentUpdateIn(BaseModel):
    # kept as str: the server upper-cases and reports INVALID_STATUS itself
    payment_status: str = Field(..., examples=["PAID"])


class PaymentUpdateOut(BaseModel):
    id: str
    payment_status: PaymentStatus
    updated_at: datetime
    email_sent: bool = False


class ParticipantList(BaseModel):
    participants: List[Participant]
    total: int
    page: int
    limit: int


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None


class Envelope(BaseModel, Generic[T]):
    """
    Uniform wrapper around every API payload:
    {success, data?, message?, error?{code, message, details?}}
    """
    success: bool
    message: Optional[str] = None
    data: Optional[T] = None
    error: Optional[ErrorDetail] = None

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
