from functools import wraps
from flask import g, jsonify

from security.session import get_session_from_request
from utils.roles import is_admin

def load_current_user():
    """before_request hook: sets g.user and g.auth_session (both None when logged out)."""
    sess = get_session_from_request()
    g.auth_session = sess
    g.user = sess.user if sess else None

def current_user_is_admin() -> bool:
    return is_admin(getattr(g, "user", None))

def can_access(owner_id: int) -> bool:
    """Merchants reach only their own records; admins reach everything."""
    user = getattr(g, "user", None)
    return user is not None and (user.id == owner_id or is_admin(user))

def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, "user", None) is None:
            return jsonify(error="Authentication required"), 401
        return fn(*args, **kwargs)
    return wrapper
