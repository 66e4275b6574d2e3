from datetime import datetime
from models.db import db

POST_TYPES = ("image", "video", "text")
MULTI_PHOTO = "multi-photo"

class Photo(db.Model):
    """A single album post. Images, videos, text posts and multi-photo posts share this table."""

    __tablename__ = "photos"

    id = db.Column(db.Integer, primary_key=True)
    family_id = db.Column(db.Integer, db.ForeignKey("families.id", ondelete="CASCADE"), nullable=False, index=True)

    title = db.Column(db.String(200), nullable=False, default="")
    description = db.Column(db.Text, nullable=True)

    # primary media; for multi-photo posts this is the cover image
    file_url = db.Column(db.String(1024), nullable=True)
    file_type = db.Column(db.String(20), nullable=False, default="image")
    type = db.Column(db.String(20), nullable=True)

    file_urls = db.Column(db.JSON, nullable=True)
    cover_index = db.Column(db.Integer, nullable=True)

    category = db.Column(db.String(80), nullable=True, index=True)
    hashtags = db.Column(db.JSON, nullable=True)
    custom_date = db.Column(db.Date, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    children = db.relationship("ChildPost", back_populates="photo", cascade="all, delete-orphan")
