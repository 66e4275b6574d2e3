from datetime import datetime
from models.db import db

class Family(db.Model):
    __tablename__ = "families"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)

    # Optional, scopes PIN login and lockout tracking to a phone number
    phone_number = db.Column(db.String(20), unique=True, nullable=True, index=True)

    # bcrypt hashes only, the raw PINs are shown once at creation
    viewer_pin_hash = db.Column(db.String(255), nullable=False)
    editor_pin_hash = db.Column(db.String(255), nullable=False)

    profile_picture_url = db.Column(db.String(512), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "phone_number": self.phone_number,
            "profile_picture_url": self.profile_picture_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
