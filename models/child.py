from datetime import datetime
from models.db import db

class Child(db.Model):
    __tablename__ = "children"

    id = db.Column(db.Integer, primary_key=True)
    family_id = db.Column(db.Integer, db.ForeignKey("families.id", ondelete="CASCADE"), nullable=False, index=True)

    name = db.Column(db.String(120), nullable=False)
    profile_picture_url = db.Column(db.String(512), nullable=True)
    birth_date = db.Column(db.Date, nullable=True)
    display_order = db.Column(db.Integer, default=0, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    posts = db.relationship("ChildPost", back_populates="child", cascade="all, delete-orphan")

    def to_dict(self):
        return {
            "id": self.id,
            "family_id": self.family_id,
            "name": self.name,
            "profile_picture_url": self.profile_picture_url,
            "birth_date": self.birth_date.isoformat() if self.birth_date else None,
            "display_order": self.display_order,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class ChildPost(db.Model):
    __tablename__ = "child_posts"

    id = db.Column(db.Integer, primary_key=True)
    child_id = db.Column(db.Integer, db.ForeignKey("children.id", ondelete="CASCADE"), nullable=False, index=True)
    photo_id = db.Column(db.Integer, db.ForeignKey("photos.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    child = db.relationship("Child", back_populates="posts")
    photo = db.relationship("Photo", back_populates="children")

    __table_args__ = (
        db.UniqueConstraint("child_id", "photo_id", name="uq_child_posts_child_photo"),
    )
