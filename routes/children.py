from datetime import date

from flask import Blueprint, request, jsonify, g

from models import db
from models.album_settings import AlbumSettings
from models.child import Child
from security.rbac import require_roles
from utils.audit import log_event
from utils.request_data import json_str

children_bp = Blueprint("children", __name__)


def _ordered_children(family_id: int):
    return (
        Child.query
        .filter_by(family_id=family_id)
        .order_by(Child.display_order.asc(), Child.id.asc())
        .all()
    )


def get_or_create_settings(family_id: int) -> AlbumSettings:
    settings = AlbumSettings.query.filter_by(family_id=family_id).first()
    if settings is None:
        settings = AlbumSettings(family_id=family_id, is_multi_child=False)
        db.session.add(settings)
        db.session.commit()
    return settings


def album_title(family_name: str, children) -> str:
    if len(children) == 1:
        return f"Albumul lui {children[0].name}"
    return f"Albumul familiei {family_name}"


@children_bp.get("/children")
@require_roles("viewer")
def list_children():
    return jsonify(success=True, children=[c.to_dict() for c in _ordered_children(g.family.id)]), 200


@children_bp.post("/children")
@require_roles("editor")
def create_child():
    data = request.get_json(silent=True) or {}
    name = json_str(data, "name")
    picture = json_str(data, "profilePictureUrl") or None
    display_order = data.get("displayOrder") or 0

    if not name:
        return jsonify(error="Name is required"), 400
    if len(name) > 120:
        return jsonify(error="Name is too long"), 400
    if not isinstance(display_order, int):
        return jsonify(error="displayOrder must be an integer"), 400

    birth_date = None
    if data.get("birthDate"):
        try:
            birth_date = date.fromisoformat(str(data["birthDate"])[:10])
        except ValueError:
            return jsonify(error="Invalid birthDate"), 400

    child = Child(
        family_id=g.family.id,
        name=name,
        profile_picture_url=picture,
        birth_date=birth_date,
        display_order=display_order,
    )
    db.session.add(child)
    db.session.commit()

    log_event("CHILD_CREATE", family_id=g.family.id, entity="child", entity_id=child.id)
    return jsonify(success=True, child=child.to_dict()), 201


@children_bp.delete("/children/<int:child_id>")
@require_roles("editor")
def delete_child(child_id: int):
    child = db.session.get(Child, child_id)
    if child is None or child.family_id != g.family.id:
        return jsonify(error="Child not found"), 404

    deleted = child.to_dict()
    db.session.delete(child)
    db.session.commit()

    log_event("CHILD_DELETE", family_id=g.family.id, entity="child", entity_id=child_id)
    return jsonify(
        success=True,
        message=f"Child {deleted['name']} has been removed",
        deletedChild=deleted,
    ), 200


@children_bp.get("/album-settings")
@require_roles("viewer")
def get_album_settings():
    return jsonify(success=True, settings=get_or_create_settings(g.family.id).to_dict()), 200


@children_bp.put("/album-settings")
@require_roles("editor")
def update_album_settings():
    data = request.get_json(silent=True) or {}
    is_multi_child = data.get("isMultiChild")
    if not isinstance(is_multi_child, bool):
        return jsonify(error="isMultiChild must be a boolean"), 400

    settings = get_or_create_settings(g.family.id)
    settings.is_multi_child = is_multi_child
    db.session.commit()

    log_event("ALBUM_SETTINGS_UPDATE", family_id=g.family.id, metadata={"is_multi_child": is_multi_child})
    return jsonify(success=True, settings=settings.to_dict()), 200


@children_bp.get("/album-settings/title")
@require_roles("viewer")
def get_album_title():
    children = _ordered_children(g.family.id)
    settings = AlbumSettings.query.filter_by(family_id=g.family.id).first()
    return jsonify(
        success=True,
        title=album_title(g.family.name, children),
        childrenCount=len(children),
        isMultiChild=settings.is_multi_child if settings else False,
        familyName=g.family.name,
    ), 200
