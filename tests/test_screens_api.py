from models import db
from models.screen_location import ScreenLocation
from utils.seed import seed_screen_locations


def test_locations_with_nested_pricing(merchant_client, location):
    rows = merchant_client.get("/api/screen-locations?include=pricing").get_json()
    assert len(rows) == 1
    assert rows[0]["nameAr"] == "مول الرياض"
    assert [o["pricingType"] for o in rows[0]["pricingOptions"]] == ["hourly", "daily", "weekly"]


def test_inactive_locations_are_hidden(merchant_client, location):
    location.is_active = False
    db.session.commit()
    assert merchant_client.get("/api/screen-locations").get_json() == []


def test_pricing_options_scoped_to_location(merchant_client, location):
    rows = merchant_client.get(f"/api/screen-pricing-options?locationId={location.id}").get_json()
    assert {o["locationId"] for o in rows} == {location.id}
    assert merchant_client.get("/api/screen-pricing-options?locationId=999").get_json() == []


def test_admin_creates_location_and_rate(admin_client):
    resp = admin_client.post("/api/screen-locations", json={
        "name": "Granada Center",
        "nameAr": "غرناطة سنتر",
        "address": "Eastern Ring Road",
        "addressAr": "الطريق الدائري الشرقي",
        "city": "Riyadh",
        "cityAr": "الرياض",
        "dailyPrice": "300",
    })
    assert resp.status_code == 201
    location_id = resp.get_json()["id"]

    body = {"locationId": location_id, "pricingType": "Daily", "pricePerUnit": "300"}
    resp = admin_client.post("/api/screen-pricing-options", json=body)
    assert resp.status_code == 201
    assert resp.get_json()["durationHours"] == 24

    assert admin_client.post("/api/screen-pricing-options", json=body).status_code == 409


def test_rate_validation(admin_client, location):
    bad_type = {"locationId": location.id, "pricingType": "monthly", "pricePerUnit": "10"}
    assert admin_client.post("/api/screen-pricing-options", json=bad_type).status_code == 400
    bad_price = {"locationId": location.id, "pricingType": "hourly", "pricePerUnit": "0"}
    assert admin_client.post("/api/screen-pricing-options", json=bad_price).status_code == 400


def test_merchant_cannot_create_location(merchant_client):
    assert merchant_client.post("/api/screen-locations", json={}).status_code == 403


def test_seed_screen_locations_is_idempotent(app):
    assert seed_screen_locations() == 3
    assert seed_screen_locations() == 0
    loc = ScreenLocation.query.order_by(ScreenLocation.id).first()
    assert len(loc.pricing_options) == 3
