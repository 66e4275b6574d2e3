from datetime import datetime
from models.db import db

class FamilyCategory(db.Model):
    __tablename__ = "family_categories"

    id = db.Column(db.Integer, primary_key=True)
    family_id = db.Column(db.Integer, db.ForeignKey("families.id", ondelete="CASCADE"), nullable=False, index=True)

    category_value = db.Column(db.String(80), nullable=False)
    category_label = db.Column(db.String(120), nullable=False)
    category_emoji = db.Column(db.String(16), nullable=False, default="📝")

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("family_id", "category_value", name="uq_family_categories_value"),
    )

    def to_dict(self):
        return {
            "value": self.category_value,
            "label": self.category_label,
            "emoji": self.category_emoji,
        }
