from flask import Blueprint, jsonify, request, current_app

from models import db
from models.family import Family
from routes.auth import blocked_response, lockout_message
from security.bruteforce import get_lockout
from security.pin import (
    hash_secret, verify_secret, generate_pin,
    normalize_phone, is_valid_phone,
    VIEWER_PIN_LENGTH, EDITOR_PIN_LENGTH,
)
from security.rbac import require_roles
from security.session import create_session
from utils.audit import log_event
from utils.request_data import json_str

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")

# admin lockouts live in their own bucket so they never collide with PIN logins
ADMIN_BUCKET = "admin-login"


def _pin_in_use(pin: str, field: str) -> bool:
    return any(verify_secret(pin, getattr(f, field)) for f in Family.query.all())


def generate_unique_pin(length: int, field: str, max_tries: int = 20) -> str:
    for _ in range(max_tries):
        pin = generate_pin(length)
        if not _pin_in_use(pin, field):
            return pin
    raise RuntimeError("Could not generate a unique PIN")


def create_family(name: str, phone=None, profile_picture_url=None):
    """
    Returns (family, viewer_pin, editor_pin). The raw PINs are never stored.
    """
    viewer_pin = generate_unique_pin(VIEWER_PIN_LENGTH, "viewer_pin_hash")
    editor_pin = generate_unique_pin(EDITOR_PIN_LENGTH, "editor_pin_hash")

    family = Family(
        name=name,
        phone_number=phone or None,
        viewer_pin_hash=hash_secret(viewer_pin),
        editor_pin_hash=hash_secret(editor_pin),
        profile_picture_url=profile_picture_url or None,
    )
    db.session.add(family)
    db.session.commit()
    return family, viewer_pin, editor_pin


@admin_bp.post("/login")
def admin_login():
    data = request.get_json(silent=True) or {}
    username = json_str(data, "username")
    password = data.get("password") or ""
    if not isinstance(password, str):
        return jsonify(error="password must be a string"), 400

    if not username or not password:
        return jsonify(error="Username and password are required"), 400

    lockout = get_lockout()
    client_id = lockout.identify(request, ADMIN_BUCKET)

    status = lockout.check_blocked(client_id)
    if status["blocked"]:
        log_event("ADMIN_LOGIN_BLOCKED", metadata={"level": status["level"]})
        return blocked_response(status, lockout_message(status["level"], status["time_remaining"]))

    expected_user = current_app.config.get("ADMIN_USERNAME", "admin")
    password_hash = current_app.config.get("ADMIN_PASSWORD_HASH")
    if not password_hash:
        current_app.logger.error("ADMIN_PASSWORD_HASH is not configured; admin login disabled")
        return jsonify(error="Admin login is not configured"), 503

    if username != expected_user or not verify_secret(password, password_hash):
        outcome = lockout.record_failure(client_id)
        log_event("ADMIN_LOGIN_FAIL", metadata={"username": username, "blocked": outcome["blocked"]})
        if outcome["blocked"]:
            return blocked_response(outcome, lockout_message(outcome["level"], outcome["time_remaining"]))
        return jsonify(
            error="Invalid username or password",
            rateLimited=False,
            attemptsRemaining=outcome["attempts_remaining"],
        ), 401

    lockout.record_success(client_id)
    raw_token, expires_at = create_session("admin")
    log_event("ADMIN_LOGIN_SUCCESS")
    return jsonify(success=True, role="admin", token=raw_token, expiresAt=expires_at.isoformat()), 200


@admin_bp.post("/families")
@require_roles("admin")
def admin_create_family():
    data = request.get_json(silent=True) or {}
    name = json_str(data, "name")
    phone = normalize_phone(data.get("phoneNumber"))
    picture = json_str(data, "profilePictureUrl")

    if not name:
        return jsonify(error="Family name is required"), 400
    if len(name) > 120:
        return jsonify(error="Family name is too long"), 400
    if phone:
        if not is_valid_phone(phone):
            return jsonify(error="Invalid phone number format"), 400
        if Family.query.filter_by(phone_number=phone).first():
            return jsonify(error="Phone number already registered"), 409

    family, viewer_pin, editor_pin = create_family(name, phone, picture)
    log_event("FAMILY_CREATE", family_id=family.id, entity="family", entity_id=family.id)

    return jsonify(
        success=True,
        family=family.to_dict(),
        viewerPin=viewer_pin,
        editorPin=editor_pin,
    ), 201


@admin_bp.get("/families")
@require_roles("admin")
def admin_list_families():
    families = Family.query.order_by(Family.created_at.desc()).all()
    return jsonify(families=[f.to_dict() for f in families]), 200


@admin_bp.get("/lockouts")
@require_roles("admin")
def admin_lockout_stats():
    return jsonify(get_lockout().stats()), 200


@admin_bp.delete("/lockouts")
@require_roles("admin")
def admin_reset_lockouts():
    get_lockout().reset()
    log_event("LOCKOUTS_RESET")
    return jsonify(message="Lockout state cleared"), 200
