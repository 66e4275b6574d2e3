from flask import Blueprint, jsonify, g

from security.rbac import require_roles

family_bp = Blueprint("families", __name__, url_prefix="/families")


@family_bp.get("/me")
@require_roles("viewer")
def my_family():
    return jsonify(success=True, family=g.family.to_dict()), 200
