import json

from flask import Blueprint, jsonify, request
from models.audit_log import AuditLog
from security.rbac import require_roles

audit_bp = Blueprint("audit", __name__, url_prefix="/admin")


def _metadata(row):
    if not row.metadata_json:
        return None
    try:
        return json.loads(row.metadata_json)
    except ValueError:
        return row.metadata_json


@audit_bp.get("/audit-logs")
@require_roles("admin")
def list_audit_logs():
    limit = request.args.get("limit", type=int) or 200
    limit = max(1, min(limit, 500))

    action = request.args.get("action")
    family_id = request.args.get("family_id", type=int)

    q = AuditLog.query
    if action:
        q = q.filter(AuditLog.action == action)
    if family_id is not None:
        q = q.filter(AuditLog.family_id == family_id)

    rows = q.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).limit(limit).all()

    out = []
    for r in rows:
        out.append({
            "id": r.id,
            "created_at": r.timestamp.isoformat() if r.timestamp else None,
            "family_id": r.family_id,
            "action": r.action,
            "entity": r.entity,
            "entity_id": r.entity_id,
            "ip": r.ip,
            "user_agent": r.user_agent,
            "metadata": _metadata(r),
        })

    return jsonify(out), 200
