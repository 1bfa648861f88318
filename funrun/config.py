# env vars + constants
import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()

PORT = int(os.getenv("PORT", "8080"))
ENV = os.getenv("ENV", "development")

TOKEN_SECRET = os.getenv("JWT_SECRET", "")
TOKEN_EXPIRATION_HOURS = int(os.getenv("TOKEN_EXPIRATION_HOURS", "24"))

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME = os.getenv("SMTP_USERNAME", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_FROM_EMAIL = os.getenv("SMTP_FROM_EMAIL", "")
SMTP_FROM_NAME = os.getenv("SMTP_FROM_NAME", "Tau-Tau Run")

EVENT_NAME = os.getenv("EVENT_NAME", "Tau-Tau Run 5K")
EVENT_DATE = os.getenv("EVENT_DATE", "")
EVENT_LOCATION = os.getenv("EVENT_LOCATION", "")

CORS_ALLOWED_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    if o.strip()
]

# client side
API_URL = os.getenv("API_URL", "http://localhost:8080/api/v1")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "10.0"))


@dataclass
class Settings:
    """
    Server settings, built from the environment by default.
    Tests construct it directly to get an isolated app.
    """
    env: str = ENV
    token_secret: str = TOKEN_SECRET
    token_expiration_hours: int = TOKEN_EXPIRATION_HOURS
    admin_email: str = ADMIN_EMAIL
    admin_password: str = ADMIN_PASSWORD
    smtp_host: str = SMTP_HOST
    smtp_port: int = SMTP_PORT
    smtp_username: str = SMTP_USERNAME
    smtp_password: str = SMTP_PASSWORD
    smtp_from_email: str = SMTP_FROM_EMAIL
    smtp_from_name: str = SMTP_FROM_NAME
    event_name: str = EVENT_NAME
    event_date: str = EVENT_DATE
    event_location: str = EVENT_LOCATION
    cors_allowed_origins: List[str] = field(default_factory=lambda: list(CORS_ALLOWED_ORIGINS))

    def validate(self) -> None:
        if not self.token_secret:
            raise RuntimeError("JWT_SECRET is required")
        if len(self.token_secret) < 32:
            raise RuntimeError("JWT_SECRET must be at least 32 characters long")
