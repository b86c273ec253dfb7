from functools import wraps
from flask import g, jsonify

SUPER_ADMIN = "SUPER_ADMIN"

def role_names(user) -> set:
    return {r.name for r in user.roles} if user is not None else set()

def has_role(role_name: str, user=None) -> bool:
    names = role_names(user if user is not None else getattr(g, "user", None))
    return role_name in names or SUPER_ADMIN in names

def require_roles(*allowed: str):
    """
    @require_roles("ADMIN") or @require_roles("MERCHANT", "ADMIN").
    SUPER_ADMIN passes every check.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = getattr(g, "user", None)
            if user is None:
                return jsonify(error="Authentication required"), 401
            if not any(has_role(name, user) for name in allowed):
                return jsonify(error="Forbidden"), 403
            return fn(*args, **kwargs)
        return wrapper
    return decorator
