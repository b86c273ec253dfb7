import json
from datetime import datetime
from models.db import db

class AuditLog(db.Model):
    __tablename__ = "audit_logs"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=True)  # null for anonymous events (failed login, register)
    action = db.Column(db.String(80), nullable=False, index=True)  # SCREEN_BOOKING_APPROVE, LOGIN_FAIL, ...
    entity = db.Column(db.String(80), nullable=True)  # screen_booking, screen_location, user
    entity_id = db.Column(db.String(80), nullable=True)

    ip = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)
    metadata_json = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.Index("ix_audit_logs_entity", "entity", "entity_id"),
    )

    @property
    def details(self):
        return json.loads(self.metadata_json) if self.metadata_json else None
