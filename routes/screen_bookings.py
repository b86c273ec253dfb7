import logging
from datetime import datetime, timezone

from flask import Blueprint, request, jsonify, current_app, g, send_from_directory
from sqlalchemy.exc import IntegrityError

from models import db
from models.user import User
from models.screen_booking import ScreenBooking, BOOKING_STATUSES
from models.screen_location import ScreenLocation
from models.screen_pricing_option import ScreenPricingOption
from security.rbac import require_roles
from utils.audit import log_event
from utils.auth_context import login_required, current_user_is_admin, can_access
from utils.emailer import notify_booking_decision
from utils.invoicing import create_invoice_for_booking
from utils.media import save_media, MediaRejected
from utils.pricing import calculate_price
from utils.serialize import booking_json, invoice_json

logger = logging.getLogger(__name__)

screen_bookings_bp = Blueprint("screen_bookings", __name__)


def _parse_iso(dt_str):
    # Expect ISO format like "2026-01-20T18:00:00"; aware values are stored as naive UTC
    if not isinstance(dt_str, str) or not dt_str.strip():
        raise ValueError("missing datetime")
    value = datetime.fromisoformat(dt_str.strip().replace("Z", "+00:00"))
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _payload():
    """Booking fields arrive as multipart form (with mediaFile) or plain JSON."""
    if request.mimetype == "multipart/form-data" or request.form:
        return request.form
    return request.get_json(silent=True) or {}


def _text(data, key):
    value = data.get(key)
    if not isinstance(value, str):
        return None
    return value.strip() or None


def _claim_pending(booking_id: int, values: dict) -> bool:
    """
    Moves a booking out of pending in a single conditional UPDATE.
    Returns False when another request already decided it.
    """
    updated = (
        ScreenBooking.query
        .filter(ScreenBooking.id == booking_id, ScreenBooking.status == "pending")
        .update(values, synchronize_session=False)
    )
    return updated == 1


def _conflict(booking, action):
    logger.warning("Booking %s %s refused, status is %s", booking.id, action.lower(), booking.status)
    log_event(
        f"SCREEN_BOOKING_{action}_CONFLICT",
        user_id=g.user.id,
        entity="screen_booking",
        entity_id=booking.id,
        metadata={"status": booking.status},
    )
    return jsonify(error="Booking is not pending", status=booking.status), 409


# ---------- MERCHANT/ADMIN: submit a booking request ----------
@screen_bookings_bp.post("/api/screen-bookings")
@require_roles("MERCHANT", "ADMIN")
def create_booking():
    data = _payload()

    try:
        location_id = int(data.get("locationId") or 0)
        pricing_option_id = int(data.get("pricingOptionId") or 0)
    except (TypeError, ValueError):
        return jsonify(error="locationId and pricingOptionId must be integers"), 400
    if not location_id or not pricing_option_id:
        return jsonify(error="locationId, pricingOptionId, startDateTime, endDateTime are required"), 400

    try:
        start = _parse_iso(data.get("startDateTime"))
        end = _parse_iso(data.get("endDateTime"))
    except ValueError:
        return jsonify(error="Invalid datetime format. Use ISO e.g. 2026-01-20T18:00:00"), 400

    if end <= start:
        return jsonify(error="endDateTime must be after startDateTime"), 400

    location = db.session.get(ScreenLocation, location_id)
    if not location or not location.is_active:
        return jsonify(error="Screen location not found"), 404

    option = db.session.get(ScreenPricingOption, pricing_option_id)
    if not option or not option.is_active or option.location_id != location.id:
        return jsonify(error="Pricing option not found for this location"), 404

    merchant_id = g.user.id
    if current_user_is_admin() and data.get("merchantId"):
        # admins may file a request on behalf of a merchant
        try:
            merchant = db.session.get(User, int(data.get("merchantId")))
        except (TypeError, ValueError):
            merchant = None
        if not merchant:
            return jsonify(error="Merchant not found"), 404
        merchant_id = merchant.id

    media_url = None
    media_type = None
    media_file = request.files.get("mediaFile")
    if media_file and media_file.filename:
        try:
            media_url, media_type = save_media(media_file)
        except MediaRejected as exc:
            return jsonify(error=str(exc)), 400

    # never trust a client supplied price
    quote = calculate_price(option.pricing_type, option.price_per_unit, start, end)

    booking = ScreenBooking(
        merchant_id=merchant_id,
        location_id=location.id,
        pricing_option_id=option.id,
        start_datetime=start,
        end_datetime=end,
        duration=quote.duration,
        total_price=quote.total_price,
        status="pending",
        media_url=media_url,
        media_type=media_type,
        request_notes=_text(data, "requestNotes"),
        request_notes_ar=_text(data, "requestNotesAr"),
    )
    db.session.add(booking)
    db.session.commit()

    log_event(
        "SCREEN_BOOKING_CREATE",
        user_id=g.user.id,
        entity="screen_booking",
        entity_id=booking.id,
        metadata={"location_id": location.id, "units": quote.units, "total_price": str(quote.total_price)},
    )
    return jsonify(booking_json(booking)), 201


# ---------- list / detail ----------
@screen_bookings_bp.get("/api/screen-bookings")
@login_required
def list_bookings():
    status = (request.args.get("status") or "").strip().lower()
    if status and status != "all" and status not in BOOKING_STATUSES:
        return jsonify(error="status must be one of all, " + ", ".join(BOOKING_STATUSES)), 400

    q = ScreenBooking.query
    if not current_user_is_admin():
        q = q.filter(ScreenBooking.merchant_id == g.user.id)
    if status and status != "all":
        q = q.filter(ScreenBooking.status == status)

    rows = q.order_by(ScreenBooking.created_at.desc(), ScreenBooking.id.desc()).all()
    return jsonify([booking_json(b) for b in rows]), 200


@screen_bookings_bp.get("/api/screen-bookings/<int:booking_id>")
@login_required
def get_booking(booking_id: int):
    booking = db.session.get(ScreenBooking, booking_id)
    if not booking or not can_access(booking.merchant_id):
        return jsonify(error="Booking not found"), 404
    return jsonify(booking_json(booking)), 200


# ---------- ADMIN: decide a pending booking ----------
@screen_bookings_bp.post("/api/screen-bookings/<int:booking_id>/approve")
@require_roles("ADMIN")
def approve_booking(booking_id: int):
    data = request.get_json(silent=True) or {}
    if not isinstance(data.get("adminNotes", ""), (str, type(None))):
        return jsonify(error="adminNotes must be text"), 400
    admin_notes = _text(data, "adminNotes")

    booking = db.session.get(ScreenBooking, booking_id)
    if not booking:
        return jsonify(error="Booking not found"), 404

    now = datetime.utcnow()
    if not _claim_pending(booking.id, {
        "status": "approved",
        "admin_notes": admin_notes,
        "reviewed_by": g.user.id,
        "approved_at": now,
        "updated_at": now,
    }):
        db.session.rollback()
        return _conflict(booking, "APPROVE")

    db.session.refresh(booking)
    invoice = create_invoice_for_booking(booking)
    try:
        db.session.commit()
    except IntegrityError:
        # an invoice for this booking already exists
        db.session.rollback()
        return _conflict(booking, "APPROVE")

    sent, error = notify_booking_decision(booking, invoice)
    log_event(
        "SCREEN_BOOKING_APPROVE",
        user_id=g.user.id,
        entity="screen_booking",
        entity_id=booking.id,
        metadata={"invoice_number": invoice.invoice_number, "email_sent": sent, "email_error": error},
    )
    return jsonify(booking=booking_json(booking), invoice=invoice_json(invoice)), 200


@screen_bookings_bp.post("/api/screen-bookings/<int:booking_id>/reject")
@require_roles("ADMIN")
def reject_booking(booking_id: int):
    data = request.get_json(silent=True) or {}
    reason = _text(data, "rejectionReason")
    if not reason:
        return jsonify(error="rejectionReason is required"), 400

    booking = db.session.get(ScreenBooking, booking_id)
    if not booking:
        return jsonify(error="Booking not found"), 404

    now = datetime.utcnow()
    if not _claim_pending(booking.id, {
        "status": "rejected",
        "rejection_reason": reason,
        "reviewed_by": g.user.id,
        "rejected_at": now,
        "updated_at": now,
    }):
        db.session.rollback()
        return _conflict(booking, "REJECT")

    db.session.commit()
    db.session.refresh(booking)

    sent, error = notify_booking_decision(booking)
    log_event(
        "SCREEN_BOOKING_REJECT",
        user_id=g.user.id,
        entity="screen_booking",
        entity_id=booking.id,
        metadata={"reason": reason, "email_sent": sent, "email_error": error},
    )
    return jsonify(booking=booking_json(booking)), 200


# ---------- uploaded campaign media ----------
@screen_bookings_bp.get("/uploads/<path:filename>")
@login_required
def uploaded_media(filename):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
