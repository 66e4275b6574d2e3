import re
import secrets

import bcrypt
from flask import current_app

VIEWER_PIN_LENGTH = 4
EDITOR_PIN_LENGTH = 8

_PIN_RE = re.compile(r"^\d{4}$|^\d{8}$")
_PHONE_RE = re.compile(r"^(0)?[67][0-9]{7}$")


def _rounds() -> int:
    try:
        return int(current_app.config.get("PIN_HASH_ROUNDS", 12))
    except RuntimeError:
        return 12


def hash_secret(plain: str) -> str:
    if not isinstance(plain, str) or len(plain) == 0:
        raise ValueError("Secret must be a non-empty string")

    # bcrypt expects bytes
    salt = bcrypt.gensalt(rounds=_rounds())
    hashed = bcrypt.hashpw(plain.encode("utf-8"), salt)
    return hashed.decode("utf-8")

def verify_secret(plain: str, secret_hash: str) -> bool:
    if not plain or not secret_hash:
        return False
    try:
        return bcrypt.checkpw(
            plain.encode("utf-8"),
            secret_hash.encode("utf-8")
        )
    except ValueError:
        # malformed hash in the database
        return False


def normalize_pin(value) -> str:
    return re.sub(r"\s", "", str(value or ""))

def is_valid_pin(pin: str) -> bool:
    return bool(_PIN_RE.match(pin or ""))

def role_for_pin(pin: str):
    if len(pin) == VIEWER_PIN_LENGTH:
        return "viewer"
    if len(pin) == EDITOR_PIN_LENGTH:
        return "editor"
    return None


def normalize_phone(value) -> str:
    """Strips whitespace; "69123456" and "069123456" both become "069123456"."""
    phone = re.sub(r"\s", "", str(value or ""))
    if _PHONE_RE.match(phone) and not phone.startswith("0"):
        phone = "0" + phone
    return phone

def is_valid_phone(phone: str) -> bool:
    return bool(_PHONE_RE.match(phone or ""))


def generate_pin(length: int) -> str:
    # leading zeros are fine, PINs are strings
    return "".join(secrets.choice("0123456789") for _ in range(length))
