from decimal import Decimal

from models import db
from models.user import Role
from models.screen_location import ScreenLocation
from models.screen_pricing_option import ScreenPricingOption
from utils.pricing import PricingType

DEFAULT_ROLES = ["MERCHANT", "ADMIN", "SUPER_ADMIN"]

DEMO_LOCATIONS = [
    {
        "name": "Riyadh Mall - Main Entrance",
        "name_ar": "مول الرياض - المدخل الرئيسي",
        "address": "King Fahd Road, Al Olaya District",
        "address_ar": "طريق الملك فهد، حي العليا",
        "city": "Riyadh",
        "city_ar": "الرياض",
        "neighborhood": "Al Olaya",
        "neighborhood_ar": "العليا",
        "daily_price": Decimal("500"),
    },
    {
        "name": "Kingdom Centre - Food Court",
        "name_ar": "مركز المملكة - منطقة الطعام",
        "address": "Al Urubah Road, Al Olaya District",
        "address_ar": "طريق العروبة، حي العليا",
        "city": "Riyadh",
        "city_ar": "الرياض",
        "neighborhood": "Al Olaya",
        "neighborhood_ar": "العليا",
        "daily_price": Decimal("750"),
    },
    {
        "name": "Al Nakheel Mall - Central Plaza",
        "name_ar": "مول النخيل - الساحة المركزية",
        "address": "Othman Ibn Affan Road, Al Nakheel District",
        "address_ar": "طريق عثمان بن عفان، حي النخيل",
        "city": "Riyadh",
        "city_ar": "الرياض",
        "neighborhood": "Al Nakheel",
        "neighborhood_ar": "النخيل",
        "daily_price": Decimal("900"),
    },
]

def seed_roles():
    existing = {r.name for r in Role.query.all()}
    for name in DEFAULT_ROLES:
        if name not in existing:
            db.session.add(Role(name=name))
    db.session.commit()

def seed_screen_locations() -> int:
    """Insert demo locations with hourly/daily/weekly rates. Returns rows added."""
    if ScreenLocation.query.first() is not None:
        return 0

    for data in DEMO_LOCATIONS:
        location = ScreenLocation(**data)
        db.session.add(location)
        db.session.flush()

        daily = data["daily_price"]
        rates = {
            PricingType.HOURLY: (daily / 8).quantize(Decimal("0.01")),
            PricingType.DAILY: daily,
            PricingType.WEEKLY: (daily * 6).quantize(Decimal("0.01")),
        }
        for ptype, price in rates.items():
            db.session.add(ScreenPricingOption(
                location_id=location.id,
                pricing_type=ptype.value,
                price_per_unit=price,
                duration_hours=ptype.unit_hours,
            ))

    db.session.commit()
    return len(DEMO_LOCATIONS)
