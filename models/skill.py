from datetime import datetime
from models.db import db

class Skill(db.Model):
    __tablename__ = "skills"

    id = db.Column(db.Integer, primary_key=True)
    family_id = db.Column(db.Integer, db.ForeignKey("families.id", ondelete="CASCADE"), nullable=False, index=True)
    skill_name = db.Column(db.String(120), nullable=False)
    progress = db.Column(db.Integer, default=0, nullable=False)  # 0..100
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "family_id": self.family_id,
            "skill_name": self.skill_name,
            "progress": self.progress,
        }


class SkillProgress(db.Model):
    """Progress against the built-in skills catalog, one row per family and catalog skill."""

    __tablename__ = "skills_progress"

    id = db.Column(db.Integer, primary_key=True)
    family_id = db.Column(db.Integer, db.ForeignKey("families.id", ondelete="CASCADE"), nullable=False, index=True)
    skill_id = db.Column(db.String(40), nullable=False)
    skill_name = db.Column(db.String(160), nullable=True)
    skill_category = db.Column(db.String(40), nullable=True)
    progress = db.Column(db.Integer, default=0, nullable=False)
    notes = db.Column(db.Text, nullable=True)
    last_updated = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("family_id", "skill_id", name="uq_skills_progress_family_skill"),
    )

    def to_dict(self):
        return {
            "family_id": self.family_id,
            "skill_id": self.skill_id,
            "skill_name": self.skill_name,
            "skill_category": self.skill_category,
            "progress": self.progress,
            "notes": self.notes,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
        }
