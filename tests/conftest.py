from datetime import datetime
from decimal import Decimal

import pytest

from app import create_app
from config import TestConfig
from models import db
from models.user import User, Role
from models.screen_location import ScreenLocation
from models.screen_pricing_option import ScreenPricingOption

PASSWORD = "Passw0rd123"


@pytest.fixture
def app(tmp_path):
    app = create_app(TestConfig)
    app.config["UPLOAD_FOLDER"] = str(tmp_path / "uploads")
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


def _register(app, email, roles=("MERCHANT",), **profile):
    client = app.test_client()
    resp = client.post("/auth/register", json={"email": email, "password": PASSWORD, **profile})
    assert resp.status_code == 201, resp.get_json()

    user = User.query.filter_by(email=email).one()
    user.roles = Role.query.filter(Role.name.in_(roles)).all()
    db.session.commit()
    return user


def _login(app, email):
    client = app.test_client()
    resp = client.post("/auth/login", json={"email": email, "password": PASSWORD})
    assert resp.status_code == 200, resp.get_json()
    client.environ_base["HTTP_X_CSRF_TOKEN"] = client.get_cookie("csrf_token").value
    return client


@pytest.fixture
def merchant(app):
    return _register(app, "shop@example.com", company_name="Corner Coffee")


@pytest.fixture
def other_merchant(app):
    return _register(app, "rival@example.com", company_name="Rival Bakery")


@pytest.fixture
def admin(app):
    return _register(app, "admin@example.com", roles=("ADMIN",), full_name="Site Admin")


@pytest.fixture
def merchant_client(app, merchant):
    return _login(app, merchant.email)


@pytest.fixture
def other_merchant_client(app, other_merchant):
    return _login(app, other_merchant.email)


@pytest.fixture
def admin_client(app, admin):
    return _login(app, admin.email)


@pytest.fixture
def location(app):
    loc = ScreenLocation(
        name="Riyadh Mall",
        name_ar="مول الرياض",
        address="King Fahd Road",
        address_ar="طريق الملك فهد",
        city="Riyadh",
        city_ar="الرياض",
        daily_price=Decimal("200"),
    )
    db.session.add(loc)
    db.session.flush()
    for ptype, price, hours in (("hourly", "50", 1), ("daily", "200", 24), ("weekly", "1200", 168)):
        db.session.add(ScreenPricingOption(
            location_id=loc.id,
            pricing_type=ptype,
            price_per_unit=Decimal(price),
            duration_hours=hours,
        ))
    db.session.commit()
    return loc


def option_for(location, pricing_type):
    return next(o for o in location.pricing_options if o.pricing_type == pricing_type)


@pytest.fixture
def booking_payload(location):
    def build(pricing_type="daily", start=datetime(2026, 11, 1, 10, 0), end=datetime(2026, 11, 2, 10, 0), **extra):
        return {
            "locationId": location.id,
            "pricingOptionId": option_for(location, pricing_type).id,
            "startDateTime": start.isoformat(),
            "endDateTime": end.isoformat(),
            **extra,
        }
    return build


@pytest.fixture
def pending_booking(merchant_client, booking_payload):
    resp = merchant_client.post("/api/screen-bookings", json=booking_payload())
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


@pytest.fixture
def make_client(app):
    """Register a user with the given roles and return a logged-in client."""
    def build(email, roles=("MERCHANT",), **profile):
        _register(app, email, roles=roles, **profile)
        return _login(app, email)
    return build
