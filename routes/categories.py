from flask import Blueprint, request, jsonify, g

from models import db
from models.category import FamilyCategory
from security.rbac import require_roles
from utils.audit import log_event
from utils.catalog import DEFAULT_CATEGORIES, ESSENTIAL_CATEGORIES, DEFAULT_CATEGORY_EMOJI
from utils.request_data import json_str

category_bp = Blueprint("categories", __name__, url_prefix="/categories")


def _seed_defaults(family_id: int):
    for cat in DEFAULT_CATEGORIES:
        db.session.add(FamilyCategory(
            family_id=family_id,
            category_value=cat["value"],
            category_label=cat["label"],
            category_emoji=cat["emoji"],
        ))


def ensure_family_categories(family_id: int) -> list:
    rows = FamilyCategory.query.filter_by(family_id=family_id).order_by(FamilyCategory.id).all()
    if rows:
        return rows
    _seed_defaults(family_id)
    db.session.commit()
    return FamilyCategory.query.filter_by(family_id=family_id).order_by(FamilyCategory.id).all()


def _find(value: str):
    return FamilyCategory.query.filter_by(family_id=g.family.id, category_value=value).first()


@category_bp.get("")
@require_roles("viewer")
def list_categories():
    rows = ensure_family_categories(g.family.id)
    return jsonify(success=True, categories=[r.to_dict() for r in rows]), 200


@category_bp.post("")
@require_roles("editor")
def create_category():
    data = request.get_json(silent=True) or {}
    value = json_str(data, "value")
    label = json_str(data, "label")
    emoji = json_str(data, "emoji") or DEFAULT_CATEGORY_EMOJI

    if not value or not label:
        return jsonify(error="Value and label are required"), 400

    ensure_family_categories(g.family.id)
    if _find(value):
        return jsonify(error="Category with this value already exists"), 400

    row = FamilyCategory(family_id=g.family.id, category_value=value, category_label=label, category_emoji=emoji)
    db.session.add(row)
    db.session.commit()

    log_event("CATEGORY_CREATE", family_id=g.family.id, entity="category", entity_id=value)
    return jsonify(success=True, category=row.to_dict()), 201


@category_bp.put("/<value>")
@require_roles("editor")
def update_category(value: str):
    data = request.get_json(silent=True) or {}
    new_value = json_str(data, "value")
    label = json_str(data, "label")
    emoji = json_str(data, "emoji") or DEFAULT_CATEGORY_EMOJI

    if not new_value or not label:
        return jsonify(error="New value and label are required"), 400

    row = _find(value)
    if not row:
        return jsonify(error="Category not found"), 404

    if new_value != value and _find(new_value):
        return jsonify(error="Category with this value already exists"), 400

    row.category_value = new_value
    row.category_label = label
    row.category_emoji = emoji
    db.session.commit()

    log_event("CATEGORY_UPDATE", family_id=g.family.id, entity="category", entity_id=new_value,
              metadata={"old_value": value})
    return jsonify(success=True, category=row.to_dict()), 200


@category_bp.delete("/<value>")
@require_roles("editor")
def delete_category(value: str):
    if value in ESSENTIAL_CATEGORIES:
        return jsonify(error="Cannot delete essential categories"), 400

    row = _find(value)
    if not row:
        return jsonify(error="Category not found"), 404

    db.session.delete(row)
    db.session.commit()

    log_event("CATEGORY_DELETE", family_id=g.family.id, entity="category", entity_id=value)
    return jsonify(success=True, message="Category deleted"), 200


@category_bp.post("/reset")
@require_roles("editor")
def reset_categories():
    FamilyCategory.query.filter_by(family_id=g.family.id).delete()
    _seed_defaults(g.family.id)
    db.session.commit()

    log_event("CATEGORY_RESET", family_id=g.family.id)
    return jsonify(success=True, categories=DEFAULT_CATEGORIES, message="Categories reset to defaults"), 200
