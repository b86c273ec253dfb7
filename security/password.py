import bcrypt
from flask import current_app, has_app_context

def hash_password(plain_password: str) -> str:
    if not isinstance(plain_password, str) or len(plain_password) == 0:
        raise ValueError("Password must be a non-empty string")

    # bcrypt expects bytes
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12) if has_app_context() else 12
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(plain_password.encode("utf-8"), salt)
    return hashed.decode("utf-8")

def verify_password(plain_password: str, password_hash: str) -> bool:
    if not plain_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            password_hash.encode("utf-8")
        )
    except ValueError:
        # malformed hash stored for the user
        return False

def password_problems(plain_password: str, min_len: int = 8) -> list:
    problems = []
    if not isinstance(plain_password, str) or len(plain_password) < min_len:
        problems.append(f"Password must be at least {min_len} characters")
    elif plain_password.isalpha() or plain_password.isdigit():
        problems.append("Password must mix letters and digits")
    return problems
