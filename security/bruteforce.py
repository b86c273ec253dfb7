"""Login lockout after repeated failures from the same email and IP."""
from datetime import datetime
from flask import request, current_app

from models import db
from models.login_attempt import LoginAttempt

def _client_ip() -> str:
    return request.headers.get("X-Forwarded-For", request.remote_addr) or "unknown"

def _attempt_row(email: str):
    return LoginAttempt.query.filter_by(email=email, ip=_client_ip()).first()

def is_locked(email: str) -> tuple[bool, int]:
    """Returns (locked, seconds_remaining)."""
    row = _attempt_row(email)
    seconds = row.seconds_locked(datetime.utcnow()) if row else 0
    return seconds > 0, seconds

def register_failure(email: str) -> tuple[int, bool]:
    """Returns (fail_count, locked_now)."""
    row = _attempt_row(email)
    if not row:
        row = LoginAttempt(email=email, ip=_client_ip(), fail_count=0)
        db.session.add(row)

    locked_now = row.record_failure(
        datetime.utcnow(),
        current_app.config.get("MAX_LOGIN_ATTEMPTS", 5),
        current_app.config.get("LOCKOUT_MINUTES", 10),
    )
    db.session.commit()
    return row.fail_count, locked_now

def reset_attempts(email: str):
    row = _attempt_row(email)
    if row:
        row.clear()
        db.session.commit()
