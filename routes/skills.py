from datetime import datetime

from flask import Blueprint, request, jsonify, g

from models import db
from models.skill import Skill, SkillProgress
from security.rbac import require_roles
from utils.catalog import SKILL_CATEGORIES, find_catalog_skill
from utils.request_data import json_str

skills_bp = Blueprint("skills", __name__, url_prefix="/skills")


def _clamp_progress(value) -> int:
    try:
        return max(0, min(100, int(value)))
    except (TypeError, ValueError):
        return 0


def _family_skill(skill_id: int):
    skill = db.session.get(Skill, skill_id)
    if skill is None or skill.family_id != g.family.id:
        return None
    return skill


@skills_bp.get("")
@require_roles("viewer")
def list_skills():
    rows = Skill.query.filter_by(family_id=g.family.id).order_by(Skill.skill_name).all()
    return jsonify(success=True, skills=[s.to_dict() for s in rows]), 200


@skills_bp.post("")
@require_roles("editor")
def create_skill():
    data = request.get_json(silent=True) or {}
    name = json_str(data, "skillName")
    if not name:
        return jsonify(error="skillName is required"), 400

    skill = Skill(family_id=g.family.id, skill_name=name, progress=_clamp_progress(data.get("progress", 0)))
    db.session.add(skill)
    db.session.commit()
    return jsonify(success=True, skill=skill.to_dict()), 201


@skills_bp.put("/<int:skill_id>")
@require_roles("editor")
def update_skill(skill_id: int):
    data = request.get_json(silent=True) or {}
    if data.get("progress") is None:
        return jsonify(error="progress is required"), 400

    skill = _family_skill(skill_id)
    if skill is None:
        return jsonify(error="Skill not found"), 404

    skill.progress = _clamp_progress(data["progress"])
    db.session.commit()
    return jsonify(success=True, skill=skill.to_dict()), 200


@skills_bp.delete("/<int:skill_id>")
@require_roles("editor")
def delete_skill(skill_id: int):
    skill = _family_skill(skill_id)
    if skill is None:
        return jsonify(error="Skill not found"), 404

    db.session.delete(skill)
    db.session.commit()
    return jsonify(success=True, message="Skill deleted"), 200


@skills_bp.get("/catalog")
def skills_catalog():
    return jsonify(success=True, categories=SKILL_CATEGORIES), 200


@skills_bp.get("/progress")
@require_roles("viewer")
def list_progress():
    rows = SkillProgress.query.filter_by(family_id=g.family.id).all()
    return jsonify(success=True, skills=[r.to_dict() for r in rows]), 200


@skills_bp.post("/progress")
@require_roles("editor")
def upsert_progress():
    data = request.get_json(silent=True) or {}
    skill_id = (data.get("skillId") or "").strip() if isinstance(data.get("skillId"), str) else ""
    progress = data.get("progress")

    if not skill_id or progress is None:
        return jsonify(error="Incomplete progress update"), 400
    if isinstance(progress, bool) or not isinstance(progress, (int, float)) or not 0 <= progress <= 100:
        return jsonify(error="Progress must be between 0 and 100"), 400

    category_key, catalog_skill = find_catalog_skill(skill_id)

    row = SkillProgress.query.filter_by(family_id=g.family.id, skill_id=skill_id).first()
    if row is None:
        row = SkillProgress(family_id=g.family.id, skill_id=skill_id)
        db.session.add(row)

    row.skill_name = data.get("skillName") or (catalog_skill["name"] if catalog_skill else row.skill_name)
    row.skill_category = data.get("skillCategory") or category_key or row.skill_category
    row.progress = int(progress)
    row.notes = data.get("notes")
    row.last_updated = datetime.utcnow()
    db.session.commit()

    return jsonify(success=True, skill=row.to_dict()), 200
