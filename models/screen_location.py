from datetime import datetime
from models.db import db

class ScreenLocation(db.Model):
    __tablename__ = "screen_locations"

    id = db.Column(db.Integer, primary_key=True)

    # bilingual display fields (en / ar)
    name = db.Column(db.String(160), nullable=False)
    name_ar = db.Column(db.String(160), nullable=False)
    address = db.Column(db.String(255), nullable=False)
    address_ar = db.Column(db.String(255), nullable=False)
    city = db.Column(db.String(80), nullable=False, index=True)
    city_ar = db.Column(db.String(80), nullable=False)
    neighborhood = db.Column(db.String(120), nullable=True)
    neighborhood_ar = db.Column(db.String(120), nullable=True)

    screen_type = db.Column(db.String(40), nullable=False, default="LED")  # TV, LED, Tablet
    number_of_screens = db.Column(db.Integer, nullable=False, default=1)
    daily_price = db.Column(db.Numeric(10, 2), nullable=False)

    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    pricing_options = db.relationship(
        "ScreenPricingOption",
        back_populates="location",
        order_by="ScreenPricingOption.duration_hours",
    )
