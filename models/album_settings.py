from datetime import datetime
from models.db import db

class AlbumSettings(db.Model):
    __tablename__ = "album_settings"

    id = db.Column(db.Integer, primary_key=True)
    family_id = db.Column(db.Integer, db.ForeignKey("families.id", ondelete="CASCADE"), unique=True, nullable=False)
    is_multi_child = db.Column(db.Boolean, default=False, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "family_id": self.family_id,
            "is_multi_child": self.is_multi_child,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
