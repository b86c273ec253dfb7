ALLOWED_DISPLAY_ROLES = {"SUPER_ADMIN", "ADMIN", "MERCHANT"}
ADMIN_ROLES = {"SUPER_ADMIN", "ADMIN"}


def filter_role_names(roles):
    names = []
    for role in roles or []:
        name = role if isinstance(role, str) else getattr(role, "name", None)
        if name in ALLOWED_DISPLAY_ROLES:
            names.append(name)
    return names


def is_admin(user) -> bool:
    if user is None:
        return False
    return any(r.name in ADMIN_ROLES for r in user.roles)
