from datetime import datetime
from models.db import db

BOOKING_STATUSES = ("pending", "approved", "rejected")

class ScreenBooking(db.Model):
    __tablename__ = "screen_bookings"

    id = db.Column(db.Integer, primary_key=True)

    merchant_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    location_id = db.Column(db.Integer, db.ForeignKey("screen_locations.id"), nullable=False, index=True)
    pricing_option_id = db.Column(db.Integer, db.ForeignKey("screen_pricing_options.id"), nullable=False)

    start_datetime = db.Column(db.DateTime, nullable=False)
    end_datetime = db.Column(db.DateTime, nullable=False)
    duration = db.Column(db.Integer, nullable=False)  # hours, ceil'd
    total_price = db.Column(db.Numeric(10, 2), nullable=False)

    status = db.Column(db.String(20), nullable=False, default="pending", index=True)
    # status values: pending, approved, rejected

    media_url = db.Column(db.String(255), nullable=True)
    media_type = db.Column(db.String(10), nullable=True)  # image, video
    request_notes = db.Column(db.Text, nullable=True)
    request_notes_ar = db.Column(db.Text, nullable=True)

    admin_notes = db.Column(db.Text, nullable=True)
    rejection_reason = db.Column(db.Text, nullable=True)
    reviewed_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    approved_at = db.Column(db.DateTime, nullable=True)
    rejected_at = db.Column(db.DateTime, nullable=True)

    invoice_generated = db.Column(db.Boolean, default=False, nullable=False)
    invoice_number = db.Column(db.String(40), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    merchant = db.relationship("User", foreign_keys=[merchant_id])
    location = db.relationship("ScreenLocation")
    pricing_option = db.relationship("ScreenPricingOption")

    __table_args__ = (
        db.CheckConstraint("end_datetime > start_datetime", name="ck_screen_booking_window"),
    )
