import logging
import smtplib
from email.message import EmailMessage

from flask import current_app

logger = logging.getLogger(__name__)


def send_email(to_email: str, subject: str, body: str):
    host = current_app.config.get("SMTP_HOST")
    port = current_app.config.get("SMTP_PORT", 587)
    username = current_app.config.get("SMTP_USERNAME")
    password = current_app.config.get("SMTP_PASSWORD")
    from_email = current_app.config.get("SMTP_FROM_EMAIL") or username
    use_tls = current_app.config.get("SMTP_USE_TLS", True)

    if not host or not from_email:
        return False, "Email not configured"

    msg = EmailMessage()
    msg["From"] = from_email
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(body)

    try:
        with smtplib.SMTP(host, port, timeout=10) as server:
            if use_tls:
                server.starttls()
            if username and password:
                server.login(username, password)
            server.send_message(msg)
        return True, None
    except (smtplib.SMTPException, OSError) as exc:
        logger.warning("Email to %s failed: %s", to_email, exc)
        return False, str(exc)


def notify_booking_decision(booking, invoice=None):
    """Tell the merchant their screen booking was approved or rejected."""
    merchant = booking.merchant
    if merchant is None:
        return False, "Merchant not found"

    location_name = booking.location.name if booking.location else f"location #{booking.location_id}"
    dashboard_url = current_app.config.get("MERCHANT_DASHBOARD_URL") or ""
    link_line = f"\n\nView your bookings: {dashboard_url}" if dashboard_url else ""

    if booking.status == "approved":
        subject = "Your screen booking has been approved"
        detail = f"Your booking #{booking.id} at {location_name} has been approved."
        if invoice is not None:
            detail += (
                f"\nInvoice {invoice.invoice_number} for {invoice.total_amount} {invoice.currency}"
                f" is due on {invoice.due_date.date().isoformat()}."
            )
    else:
        subject = "Your screen booking was not approved"
        detail = (
            f"Your booking #{booking.id} at {location_name} was rejected.\n"
            f"Reason: {booking.rejection_reason}"
        )

    body = (
        f"Hi {merchant.display_name},\n\n"
        f"{detail}"
        f"{link_line}\n\n"
        "Thank you,\nScreen Ads"
    )
    return send_email(merchant.email, subject, body)
