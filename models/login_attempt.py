from datetime import datetime, timedelta
from models.db import db

class LoginAttempt(db.Model):
    """Failed login counter per (email, ip) pair."""
    __tablename__ = "login_attempts"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), nullable=False, index=True)
    ip = db.Column(db.String(64), nullable=False, index=True)

    fail_count = db.Column(db.Integer, default=0, nullable=False)
    last_fail_at = db.Column(db.DateTime, nullable=True)
    locked_until = db.Column(db.DateTime, nullable=True)

    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("email", "ip", name="uq_login_attempt_email_ip"),
    )

    def seconds_locked(self, now: datetime) -> int:
        if not self.locked_until:
            return 0
        remaining = (self.locked_until - now).total_seconds()
        return max(int(remaining), 1) if remaining > 0 else 0

    def record_failure(self, now: datetime, max_attempts: int, lockout_minutes: int) -> bool:
        """Counts one failure; returns True when this failure triggers the lock."""
        self.fail_count = (self.fail_count or 0) + 1
        self.last_fail_at = now
        if self.fail_count >= max_attempts:
            self.locked_until = now + timedelta(minutes=lockout_minutes)
            return True
        return False

    def clear(self):
        self.fail_count = 0
        self.last_fail_at = None
        self.locked_until = None
