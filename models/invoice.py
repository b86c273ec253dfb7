from datetime import datetime
from models.db import db

INVOICE_STATUSES = ("unpaid", "paid")

class Invoice(db.Model):
    __tablename__ = "invoices"

    id = db.Column(db.Integer, primary_key=True)
    invoice_number = db.Column(db.String(40), unique=True, nullable=False, index=True)

    booking_id = db.Column(db.Integer, db.ForeignKey("screen_bookings.id"), nullable=False)
    merchant_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    issue_date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    due_date = db.Column(db.DateTime, nullable=False)

    subtotal = db.Column(db.Numeric(10, 2), nullable=False)
    tax_amount = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_amount = db.Column(db.Numeric(10, 2), nullable=False)
    currency = db.Column(db.String(10), nullable=False, default="SAR")

    status = db.Column(db.String(20), nullable=False, default="unpaid")  # unpaid, paid
    paid_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    booking = db.relationship("ScreenBooking")
    merchant = db.relationship("User")

    __table_args__ = (
        # one invoice per approved booking
        db.UniqueConstraint("booking_id", name="uq_invoice_booking_once"),
    )
