import re
from typing import Dict, List, Mapping, Optional

# loose check used by the registration form before anything is sent
FORM_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# stricter check applied by the server
EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

PHONE_SEPARATORS = " -()+"


def _field(fields: Mapping[str, Optional[str]], name: str) -> str:
    return fields.get(name) or ""


def validate(fields: Mapping[str, Optional[str]]) -> Dict[str, str]:
    """
    Client-side form validation. Pure: returns {field: message}, empty if valid.
    """
    errors: Dict[str, str] = {}

    if len(_field(fields, "name").strip()) < 2:
        errors["name"] = "Name must be at least 2 characters"

    if not FORM_EMAIL_RE.match(_field(fields, "email")):
        errors["email"] = "Please enter a valid email address"

    # digits and symbols both count here; the server is stricter
    if len(_field(fields, "phone").strip()) < 10:
        errors["phone"] = "Phone number must be at least 10 digits"

    if len(_field(fields, "address").strip()) < 10:
        errors["address"] = "Address must be at least 10 characters"

    return errors


def sanitize(value: str) -> str:
    return value.strip().replace("\x00", "")


def check_name(name: str) -> Optional[str]:
    name = name.strip()
    if not name:
        return "name is required"
    if len(name) < 2:
        return "name must be at least 2 characters long"
    if len(name) > 255:
        return "name must not exceed 255 characters"
    return None


def check_email(email: str) -> Optional[str]:
    if not email:
        return "email is required"
    if not EMAIL_RE.match(email.strip().lower()):
        return "invalid email format"
    return None


def check_phone(phone: str) -> Optional[str]:
    phone = phone.strip()
    if not phone:
        return "phone number is required"
    digits = "".join(ch for ch in phone if ch not in PHONE_SEPARATORS)
    if len(digits) < 10:
        return "phone number must be at least 10 digits"
    if len(phone) > 50:
        return "phone number must not exceed 50 characters"
    return None


def normalize_instagram(handle: Optional[str]) -> Optional[str]:
    if not handle:
        return None
    cleaned = handle.strip()
    if cleaned.startswith("@"):
        cleaned = cleaned[1:]
    return cleaned or None


def check_instagram(handle: Optional[str]) -> Optional[str]:
    cleaned = normalize_instagram(handle)
    if cleaned is None:
        return None
    if len(cleaned) > 100:
        return "Instagram handle must not exceed 100 characters"
    if not all(ch.isalnum() or ch in "._" for ch in cleaned):
        return "Instagram handle can only contain letters, numbers, dots, and underscores"
    return None


def check_address(address: str) -> Optional[str]:
    address = address.strip()
    if not address:
        return "address is required"
    if len(address) < 10:
        return "address must be at least 10 characters long"
    if len(address) > 1000:
        return "address must not exceed 1000 characters"
    return None


def validate_registration(
    name: str,
    email: str,
    phone: str,
    instagram_handle: Optional[str],
    address: str,
) -> List[Dict[str, str]]:
    """
    Server-side registration rules. Returns VALIDATION_ERROR details,
    one {field, message} per failing field, in form order.
    """
    checks = [
        ("name", check_name(name)),
        ("email", check_email(email)),
        ("phone", check_phone(phone)),
        ("instagram_handle", check_instagram(instagram_handle)),
        ("address", check_address(address)),
    ]
    return [{"field": f, "message": msg} for f, msg in checks if msg]
