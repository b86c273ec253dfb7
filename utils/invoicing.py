from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP

from flask import current_app

from models import db
from models.invoice import Invoice

CENTS = Decimal("0.01")


def invoice_number_for(booking, issued_at: datetime) -> str:
    prefix = current_app.config.get("INVOICE_PREFIX", "INV")
    return f"{prefix}-{issued_at:%Y%m%d}-{booking.id:06d}"


def compute_totals(subtotal) -> tuple[Decimal, Decimal, Decimal]:
    """Returns (subtotal, tax_amount, total_amount) rounded to cents."""
    rate = Decimal(str(current_app.config.get("INVOICE_TAX_RATE", "0")))
    subtotal = Decimal(subtotal).quantize(CENTS, rounding=ROUND_HALF_UP)
    tax = (subtotal * rate).quantize(CENTS, rounding=ROUND_HALF_UP)
    return subtotal, tax, subtotal + tax


def create_invoice_for_booking(booking) -> Invoice:
    """
    Adds the invoice for an approved booking to the session (no commit).

    The unique constraint on invoices.booking_id keeps this to one row
    per booking even if two approvals race past the status check.
    """
    if booking.status != "approved":
        raise ValueError("Invoices are only issued for approved bookings")

    issued_at = datetime.utcnow()
    due_days = current_app.config.get("INVOICE_DUE_DAYS", 30)
    subtotal, tax, total = compute_totals(booking.total_price)

    invoice = Invoice(
        invoice_number=invoice_number_for(booking, issued_at),
        booking_id=booking.id,
        merchant_id=booking.merchant_id,
        issue_date=issued_at,
        due_date=issued_at + timedelta(days=due_days),
        subtotal=subtotal,
        tax_amount=tax,
        total_amount=total,
        currency=current_app.config.get("INVOICE_CURRENCY", "SAR"),
        status="unpaid",
    )
    db.session.add(invoice)

    booking.invoice_generated = True
    booking.invoice_number = invoice.invoice_number
    return invoice
