from functools import wraps
from flask import g, jsonify

# role -> roles it satisfies
ROLE_GRANTS = {
    "viewer": {"viewer"},
    "editor": {"viewer", "editor"},
    "admin": {"admin"},
}

def has_role(role_name: str) -> bool:
    sess = getattr(g, "session", None)
    if not sess:
        return False
    return role_name in ROLE_GRANTS.get(sess.role, set())

def require_roles(*role_names: str):
    """
    Usage: @require_roles("editor")
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            sess = getattr(g, "session", None)
            if sess is None:
                return jsonify(error="Authentication required", code="UNAUTHORIZED"), 401

            granted = ROLE_GRANTS.get(sess.role, set())
            if not granted.intersection(role_names):
                return jsonify(error="Forbidden", code="FORBIDDEN"), 403

            # family-scoped roles need a live family
            if sess.role != "admin" and getattr(g, "family", None) is None:
                return jsonify(error="Invalid family", code="UNAUTHORIZED"), 401

            return fn(*args, **kwargs)
        return wrapper
    return decorator
