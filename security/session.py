import hashlib
import secrets
from datetime import datetime, timedelta
from flask import request, current_app

from models import db
from models.session import Session
from security.bruteforce import client_ip

def _hash_token(token: str) -> str:
    # SHA-256 is fine for hashing random session tokens
    return hashlib.sha256(token.encode("utf-8")).hexdigest()

def _bearer_token():
    header = request.headers.get("Authorization") or ""
    if not header.startswith("Bearer "):
        return None
    token = header[len("Bearer "):].strip()
    return token or None

def create_session(role: str, family_id=None) -> tuple[str, datetime]:
    """
    Creates a server-side session and returns (raw_token, expires_at).
    Only the hash is stored in DB.
    """
    raw_token = secrets.token_urlsafe(32)
    token_hash = _hash_token(raw_token)

    lifetime = current_app.config.get("SESSION_LIFETIME_SECONDS", 86400)
    expires_at = datetime.utcnow() + timedelta(seconds=lifetime)

    user_agent = (request.headers.get("User-Agent") or "")[:255]

    row = Session(
        family_id=family_id,
        role=role,
        token_hash=token_hash,
        expires_at=expires_at,
        ip=client_ip(request),
        user_agent=user_agent,
    )
    db.session.add(row)
    db.session.commit()
    return raw_token, expires_at

def get_session_from_request():
    raw_token = _bearer_token()
    if not raw_token:
        return None

    sess = (
        Session.query
        .filter_by(token_hash=_hash_token(raw_token), revoked=False)
        .first()
    )
    if not sess:
        return None

    # Absolute expiry
    if sess.expires_at <= datetime.utcnow():
        return None

    return sess


def revoke_session(raw_token: str) -> bool:
    if not raw_token:
        return False
    sess = Session.query.filter_by(token_hash=_hash_token(raw_token)).first()
    if not sess:
        return False
    sess.revoked = True
    db.session.commit()
    return True

def revoke_current_session() -> bool:
    return revoke_session(_bearer_token())
