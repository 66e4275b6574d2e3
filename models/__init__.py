from .db import db
from .family import Family
from .session import Session
from .audit_log import AuditLog
from .photo import Photo
from .child import Child, ChildPost
from .category import FamilyCategory
from .album_settings import AlbumSettings
from .skill import Skill, SkillProgress
