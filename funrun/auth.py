# admin password hashing + signed bearer tokens
import base64
import hashlib
import hmac
import json
import os
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from fastapi import Request

from .envelope import INVALID_TOKEN_FORMAT, TOKEN_EXPIRED, UNAUTHORIZED, APIError

PBKDF2_ROUNDS = 200_000


def _b64u(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode().rstrip("=")


def _b64u_dec(s: str) -> bytes:
    return base64.urlsafe_b64decode(s + "=" * (-len(s) % 4))


def hash_password(password: str, *, rounds: int = PBKDF2_ROUNDS) -> str:
    """
    pbkdf2_sha256$<rounds>$<salt>$<digest>
    """
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, rounds)
    return f"pbkdf2_sha256${rounds}${_b64u(salt)}${_b64u(digest)}"


def verify_password(stored: str, password: str) -> bool:
    try:
        algo, rounds, salt, digest = stored.split("$")
    except ValueError:
        return False
    if algo != "pbkdf2_sha256":
        return False
    candidate = hashlib.pbkdf2_hmac("sha256", password.encode(), _b64u_dec(salt), int(rounds))
    return hmac.compare_digest(_b64u(candidate), digest)


def check_password_strength(password: str) -> Optional[str]:
    if len(password) < 8:
        return "password must be at least 8 characters long"
    has_letter = any(ch.isascii() and ch.isalpha() for ch in password)
    has_number = any(ch.isdigit() for ch in password)
    if not has_letter or not has_number:
        return "password must contain at least one letter and one number"
    return None


class TokenSigner:
    """
    Stateless bearer tokens: <b64 json claims>.<b64 hmac-sha256>.
    Claims carry admin_id, email, iat and exp (unix seconds).
    """

    def __init__(self, secret: str, expiration_hours: int = 24) -> None:
        self._secret = secret.encode()
        self.expiration_hours = expiration_hours

    def _sign(self, blob: bytes) -> str:
        return _b64u(hmac.new(self._secret, blob, hashlib.sha256).digest())

    def issue(self, admin_id: str, email: str) -> Tuple[str, datetime]:
        now = int(time.time())
        expires_at = datetime.fromtimestamp(now, timezone.utc) + timedelta(hours=self.expiration_hours)
        claims = {
            "admin_id": admin_id,
            "email": email,
            "iat": now,
            "exp": int(expires_at.timestamp()),
        }
        raw = json.dumps(claims, separators=(",", ":"), sort_keys=True).encode()
        return f"{_b64u(raw)}.{self._sign(raw)}", expires_at

    def verify(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Claims if the signature matches and the token has not expired, else None.
        """
        try:
            body, sig = token.split(".")
            raw = _b64u_dec(body)
        except ValueError:
            return None
        if not hmac.compare_digest(sig.encode(), self._sign(raw).encode()):
            return None
        try:
            claims = json.loads(raw)
        except json.JSONDecodeError:
            return None
        if int(claims.get("exp", 0)) <= int(time.time()):
            return None
        return claims


def require_admin(request: Request) -> Dict[str, Any]:
    """
    FastAPI dependency for protected admin routes.
    """
    header = request.headers.get("Authorization", "")
    if not header:
        raise APIError(401, UNAUTHORIZED, "Authentication required. Please provide a valid token.")

    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise APIError(401, INVALID_TOKEN_FORMAT, "Authorization header must be in format: Bearer <token>")

    signer: TokenSigner = request.app.state.signer
    claims = signer.verify(parts[1])
    if claims is None:
        raise APIError(403, TOKEN_EXPIRED, "Your session has expired. Please log in again.")
    return claims
