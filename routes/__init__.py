from .health import health_bp
from .auth import auth_bp
from .admin import admin_bp
from .families import family_bp
from .photos import photo_bp
from .categories import category_bp
from .children import children_bp
from .skills import skills_bp
from .audit_logs import audit_bp
