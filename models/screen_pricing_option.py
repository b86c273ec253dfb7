from datetime import datetime
from models.db import db

class ScreenPricingOption(db.Model):
    __tablename__ = "screen_pricing_options"

    id = db.Column(db.Integer, primary_key=True)
    location_id = db.Column(db.Integer, db.ForeignKey("screen_locations.id"), nullable=False, index=True)

    pricing_type = db.Column(db.String(20), nullable=False)  # hourly, daily, weekly
    price_per_unit = db.Column(db.Numeric(10, 2), nullable=False)
    duration_hours = db.Column(db.Integer, nullable=False)  # hours covered by one unit

    notes = db.Column(db.Text, nullable=True)
    notes_ar = db.Column(db.Text, nullable=True)

    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    location = db.relationship("ScreenLocation", back_populates="pricing_options")

    __table_args__ = (
        db.UniqueConstraint("location_id", "pricing_type", name="uq_location_pricing_type"),
        db.CheckConstraint("price_per_unit > 0", name="ck_pricing_option_positive_price"),
    )
