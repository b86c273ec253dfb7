from flask import Blueprint, jsonify, g, request
from sqlalchemy import func, or_

from security.rbac import require_roles
from utils.audit import log_event
from models import db
from models.user import User, Role
from models.screen_booking import ScreenBooking, BOOKING_STATUSES
from models.invoice import Invoice, INVOICE_STATUSES
from security.session import revoke_all_sessions

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@admin_bp.get("/screen-bookings/stats")
@require_roles("ADMIN")
def booking_stats():
    """Review queue size, decisions so far, and what has been invoiced."""
    by_status = dict(
        db.session.query(ScreenBooking.status, func.count(ScreenBooking.id))
        .group_by(ScreenBooking.status)
        .all()
    )
    approved_revenue = (
        db.session.query(func.coalesce(func.sum(ScreenBooking.total_price), 0))
        .filter(ScreenBooking.status == "approved")
        .scalar()
    )
    invoiced = {
        status: {"count": count, "total": str(total or 0)}
        for status, count, total in (
            db.session.query(Invoice.status, func.count(Invoice.id), func.sum(Invoice.total_amount))
            .group_by(Invoice.status)
            .all()
        )
    }

    log_event("ADMIN_BOOKING_STATS_VIEW", user_id=g.user.id)
    return jsonify(
        bookings={s: by_status.get(s, 0) for s in BOOKING_STATUSES},
        approved_revenue=str(approved_revenue),
        invoices={s: invoiced.get(s, {"count": 0, "total": "0"}) for s in INVOICE_STATUSES},
    ), 200



def _merchant_or_none(user_id: int):
    return (
        User.query.join(User.roles)
        .filter(User.id == user_id, Role.name == "MERCHANT")
        .first()
    )


@admin_bp.get("/merchants")
@require_roles("ADMIN")
def list_merchants():
    """Merchant accounts with their booking and invoice activity."""
    status = (request.args.get("status") or "all").strip().lower()
    if status not in ("all", "active", "inactive"):
        return jsonify(error="status must be all, active or inactive"), 400
    search = (request.args.get("q") or "").strip().lower()

    q = User.query.join(User.roles).filter(Role.name == "MERCHANT")
    if status != "all":
        q = q.filter(User.is_active.is_(status == "active"))
    if search:
        like = f"%{search}%"
        q = q.filter(or_(
            func.lower(User.email).like(like),
            func.lower(User.full_name).like(like),
            func.lower(User.company_name).like(like),
        ))
    merchants = q.order_by(User.created_at.desc(), User.id.desc()).limit(200).all()

    ids = [m.id for m in merchants]
    bookings = {}
    for merchant_id, booking_status, count in (
        db.session.query(ScreenBooking.merchant_id, ScreenBooking.status, func.count(ScreenBooking.id))
        .filter(ScreenBooking.merchant_id.in_(ids))
        .group_by(ScreenBooking.merchant_id, ScreenBooking.status)
        .all()
    ):
        bookings.setdefault(merchant_id, {})[booking_status] = count
    invoiced = {
        merchant_id: (count, total)
        for merchant_id, count, total in (
            db.session.query(Invoice.merchant_id, func.count(Invoice.id), func.sum(Invoice.total_amount))
            .filter(Invoice.merchant_id.in_(ids))
            .group_by(Invoice.merchant_id)
            .all()
        )
    }

    rows = []
    for m in merchants:
        count, total = invoiced.get(m.id, (0, 0))
        rows.append({
            "id": m.id,
            "email": m.email,
            "fullName": m.full_name,
            "companyName": m.company_name,
            "phoneNumber": m.phone_number,
            "isActive": m.is_active,
            "createdAt": m.created_at.isoformat(),
            "bookings": {s: bookings.get(m.id, {}).get(s, 0) for s in BOOKING_STATUSES},
            "invoices": {"count": count, "total": str(total or 0)},
        })
    return jsonify(rows), 200


@admin_bp.patch("/merchants/<int:user_id>/status")
@require_roles("ADMIN")
def update_merchant_status(user_id: int):
    data = request.get_json(silent=True) or {}
    is_active = data.get("isActive")
    if not isinstance(is_active, bool):
        return jsonify(error="isActive must be true or false"), 400

    merchant = _merchant_or_none(user_id)
    if not merchant:
        return jsonify(error="Merchant not found"), 404
    if merchant.id == g.user.id:
        return jsonify(error="Cannot change your own account status"), 403

    merchant.is_active = is_active
    db.session.commit()

    # a deactivated merchant is signed out everywhere
    revoked = 0 if is_active else revoke_all_sessions(merchant.id)

    log_event(
        "ADMIN_MERCHANT_ACTIVATE" if is_active else "ADMIN_MERCHANT_DEACTIVATE",
        user_id=g.user.id,
        entity="user",
        entity_id=merchant.id,
        metadata={"revoked_sessions": revoked},
    )
    return jsonify(id=merchant.id, isActive=merchant.is_active), 200
