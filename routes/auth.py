from flask import Blueprint, request, jsonify, current_app, g

from models.family import Family
from security.bruteforce import get_lockout, format_duration
from security.pin import (
    normalize_pin, is_valid_pin, role_for_pin,
    normalize_phone, is_valid_phone, verify_secret,
)
from security.rbac import has_role
from security.session import create_session, revoke_current_session
from utils.audit import log_event
from utils.auth_context import login_required


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def blocked_response(status: dict, message: str):
    seconds = max(status["time_remaining"] // 1000, 1)
    resp = jsonify(
        error=message,
        rateLimited=True,
        level=status["level"],
        timeRemaining=status["time_remaining"],
        blockedUntil=status.get("blocked_until"),
        retryAfter=format_duration(status["time_remaining"]),
    )
    resp.headers["Retry-After"] = str(seconds)
    return resp, 429


def failure_message(attempts_remaining: int) -> str:
    if attempts_remaining <= 1:
        return "Invalid PIN. Last attempt before a temporary lockout."
    return f"Invalid PIN. {attempts_remaining} attempts remaining."


def lockout_message(level: int, time_remaining: int) -> str:
    wait = format_duration(time_remaining)
    if level == 2:
        return f"Too many failed attempts. Login is blocked for {wait}."
    return f"Too many failed attempts. Try again in {wait}."


def _find_family(pin: str, role: str, phone: str):
    """
    With a phone number only that family is checked; without one every
    family is tried, which is fine for a handful of families.
    """
    field = "viewer_pin_hash" if role == "viewer" else "editor_pin_hash"
    if phone:
        candidates = Family.query.filter_by(phone_number=phone).all()
    else:
        candidates = Family.query.order_by(Family.id).all()

    for family in candidates:
        if verify_secret(pin, getattr(family, field)):
            return family
    return None


@auth_bp.post("/pin-login")
def pin_login():
    data = request.get_json(silent=True) or {}
    pin = normalize_pin(data.get("pin"))
    phone = normalize_phone(data.get("phoneNumber") or data.get("auxiliaryId"))

    # Shape errors are rejected before the limiter sees them and never count as failures
    if not pin:
        return jsonify(error="PIN is required"), 400
    if not is_valid_pin(pin):
        return jsonify(error="PIN must have 4 or 8 digits"), 400
    if phone and not is_valid_phone(phone):
        return jsonify(error="Invalid phone number format"), 400

    lockout = get_lockout()
    client_id = lockout.identify(request, phone or None)

    status = lockout.check_blocked(client_id)
    if status["blocked"]:
        log_event("PIN_LOGIN_BLOCKED", metadata={"level": status["level"], "time_remaining": status["time_remaining"]})
        return blocked_response(status, lockout_message(status["level"], status["time_remaining"]))

    role = role_for_pin(pin)
    family = _find_family(pin, role, phone)

    if family is None:
        outcome = lockout.record_failure(client_id, pin, phone or None)

        analysis = lockout.security_analysis(client_id)
        if analysis and analysis["is_likely_brute_force"]:
            current_app.logger.warning("Likely PIN brute force: %s", analysis)

        log_event(
            "PIN_LOGIN_FAIL",
            metadata={"blocked": outcome["blocked"], "level": outcome.get("level"),
                      "total_attempts": outcome.get("total_attempts")},
        )
        if outcome["blocked"]:
            return blocked_response(outcome, lockout_message(outcome["level"], outcome["time_remaining"]))

        return jsonify(
            error=failure_message(outcome["attempts_remaining"]),
            rateLimited=False,
            attemptsRemaining=outcome["attempts_remaining"],
        ), 401

    lockout.record_success(client_id)
    raw_token, expires_at = create_session(role, family_id=family.id)
    log_event("PIN_LOGIN_SUCCESS", family_id=family.id, metadata={"role": role})

    return jsonify(
        success=True,
        role=role,
        family={"id": family.id, "name": family.name},
        token=raw_token,
        expiresAt=expires_at.isoformat(),
        message=f"Logged in as {role} for {family.name}",
    ), 200


@auth_bp.get("/lockout-status")
def lockout_status():
    phone = normalize_phone(request.args.get("phoneNumber"))
    if phone and not is_valid_phone(phone):
        return jsonify(error="Invalid phone number format"), 400

    lockout = get_lockout()
    status = lockout.get_status(lockout.identify(request, phone or None))
    body = {
        "blocked": status["blocked"],
        "level": status.get("level"),
        "timeRemaining": status.get("time_remaining"),
        "blockedUntil": status.get("blocked_until"),
        "attemptsRemaining": status.get("attempts_remaining"),
        "totalAttempts": status.get("total_attempts"),
    }
    if status["blocked"]:
        body["formatted"] = format_duration(status["time_remaining"])
    return jsonify(body), 200


@auth_bp.get("/me")
@login_required
def me():
    family = g.family
    return jsonify(
        role=g.session.role,
        can_edit=has_role("editor"),
        family={"id": family.id, "name": family.name} if family else None,
        expires_at=g.session.expires_at.isoformat(),
    ), 200


@auth_bp.post("/logout")
@login_required
def logout():
    revoke_current_session()
    log_event("LOGOUT", family_id=g.session.family_id)
    return jsonify(message="Logged out"), 200
