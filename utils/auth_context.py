from functools import wraps
from flask import g, jsonify
from security.session import get_session_from_request
from models import db
from models.family import Family

def load_current_session():
    sess = get_session_from_request()
    g.session = sess
    g.family = None
    if sess is None or sess.family_id is None:
        return
    g.family = db.session.get(Family, sess.family_id)

def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, "session", None) is None:
            return jsonify(error="Authentication required", code="UNAUTHORIZED"), 401
        return fn(*args, **kwargs)
    return wrapper

