from decimal import Decimal

from flask import Blueprint, request, jsonify, g
from sqlalchemy.exc import IntegrityError

from models import db
from models.screen_location import ScreenLocation
from models.screen_pricing_option import ScreenPricingOption
from security.rbac import require_roles
from utils.audit import log_event
from utils.auth_context import login_required
from utils.pricing import PricingType, to_decimal
from utils.serialize import location_json, pricing_option_json

screens_bp = Blueprint("screens", __name__, url_prefix="/api")

_LOCATION_REQUIRED = ("name", "nameAr", "address", "addressAr", "city", "cityAr")


# ---------- reference data for the booking wizard ----------
@screens_bp.get("/screen-locations")
@login_required
def list_locations():
    include_pricing = (request.args.get("include") or "").strip().lower() == "pricing"
    rows = (
        ScreenLocation.query
        .filter(ScreenLocation.is_active.is_(True))
        .order_by(ScreenLocation.name.asc())
        .all()
    )
    return jsonify([location_json(loc, include_pricing=include_pricing) for loc in rows]), 200


@screens_bp.get("/screen-pricing-options")
@login_required
def list_pricing_options():
    location_id = request.args.get("locationId", type=int)

    q = (
        ScreenPricingOption.query
        .join(ScreenLocation, ScreenPricingOption.location_id == ScreenLocation.id)
        .filter(ScreenPricingOption.is_active.is_(True), ScreenLocation.is_active.is_(True))
    )
    if location_id:
        q = q.filter(ScreenPricingOption.location_id == location_id)

    rows = q.order_by(ScreenPricingOption.location_id.asc(), ScreenPricingOption.duration_hours.asc()).all()
    return jsonify([pricing_option_json(o) for o in rows]), 200


# ---------- ADMIN: manage reference data ----------
@screens_bp.post("/screen-locations")
@require_roles("ADMIN")
def create_location():
    data = request.get_json(silent=True) or {}
    missing = [f for f in _LOCATION_REQUIRED if not (data.get(f) or "").strip()]
    if missing:
        return jsonify(error="Missing required fields", missing=missing), 400

    try:
        daily_price = to_decimal(data.get("dailyPrice") or 0)
        screens = int(data.get("numberOfScreens") or 1)
    except (TypeError, ValueError):
        return jsonify(error="Invalid dailyPrice or numberOfScreens"), 400
    if daily_price < 0:
        return jsonify(error="dailyPrice must not be negative"), 400

    loc = ScreenLocation(
        name=data["name"].strip(),
        name_ar=data["nameAr"].strip(),
        address=data["address"].strip(),
        address_ar=data["addressAr"].strip(),
        city=data["city"].strip(),
        city_ar=data["cityAr"].strip(),
        neighborhood=(data.get("neighborhood") or "").strip() or None,
        neighborhood_ar=(data.get("neighborhoodAr") or "").strip() or None,
        screen_type=(data.get("screenType") or "LED").strip(),
        number_of_screens=screens,
        daily_price=daily_price,
    )
    db.session.add(loc)
    db.session.commit()

    log_event("SCREEN_LOCATION_CREATE", user_id=g.user.id, entity="screen_location", entity_id=loc.id)
    return jsonify(location_json(loc)), 201


@screens_bp.post("/screen-pricing-options")
@require_roles("ADMIN")
def create_pricing_option():
    data = request.get_json(silent=True) or {}
    location_id = data.get("locationId")

    try:
        pricing_type = PricingType.parse(data.get("pricingType"))
        price = to_decimal(data.get("pricePerUnit"))
        location_id = int(location_id) if location_id else None
    except ValueError as exc:
        return jsonify(error=str(exc)), 400
    if price <= Decimal("0"):
        return jsonify(error="pricePerUnit must be positive"), 400

    location = db.session.get(ScreenLocation, location_id) if location_id else None
    if not location:
        return jsonify(error="Screen location not found"), 404

    option = ScreenPricingOption(
        location_id=location.id,
        pricing_type=pricing_type.value,
        price_per_unit=price,
        duration_hours=pricing_type.unit_hours,
        notes=(data.get("notes") or "").strip() or None,
        notes_ar=(data.get("notesAr") or "").strip() or None,
    )
    db.session.add(option)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify(error=f"Location already has a {pricing_type.value} rate"), 409

    log_event(
        "SCREEN_PRICING_CREATE",
        user_id=g.user.id,
        entity="screen_pricing_option",
        entity_id=option.id,
        metadata={"location_id": location.id, "pricing_type": pricing_type.value, "price": str(price)},
    )
    return jsonify(pricing_option_json(option)), 201
