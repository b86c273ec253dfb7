from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from client.cache import BOOKINGS, QueryCache
from client.errors import ApiError, ValidationError, WizardError
from client.wizard import BookingWizard, Step, transition
from fakes import FakeApi, LOCATION

NOW = datetime(2026, 11, 1, 9, 20)


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def cache():
    return QueryCache()


@pytest.fixture
def wizard(api, cache):
    return BookingWizard(api, cache, clock=lambda: NOW)


def _walk_to_review(wizard, pricing=1):
    wizard.select_location(LOCATION)
    wizard.select_pricing(wizard.pricing_options()[pricing])
    wizard.confirm_schedule()
    wizard.continue_to_review()


def test_transition_table():
    assert transition(Step.LOCATION, "select_location") is Step.PRICING
    assert transition(Step.REVIEW, "submit") is Step.CONFIRMATION
    assert transition(Step.CONTENT, "previous") is Step.SCHEDULE
    with pytest.raises(WizardError):
        transition(Step.LOCATION, "submit")
    with pytest.raises(WizardError):
        transition(Step.SCHEDULE, "select_location")


@pytest.mark.parametrize("step", [Step.LOCATION, Step.CONFIRMATION])
def test_cannot_go_back_from_ends(step):
    with pytest.raises(WizardError):
        transition(step, "previous")


def test_steps_run_in_order(wizard):
    assert wizard.step is Step.LOCATION
    wizard.select_location(LOCATION)
    assert wizard.step is Step.PRICING
    wizard.select_pricing(LOCATION["pricingOptions"][0])
    assert wizard.step is Step.SCHEDULE
    wizard.confirm_schedule()
    assert wizard.step is Step.CONTENT
    wizard.continue_to_review()
    assert wizard.step is Step.REVIEW


def test_cannot_skip_steps(wizard):
    with pytest.raises(WizardError):
        wizard.continue_to_review()
    with pytest.raises(WizardError):
        wizard.select_pricing(LOCATION["pricingOptions"][0])
    assert wizard.step is Step.LOCATION


def test_pricing_options_come_from_selected_location(api, wizard):
    wizard.select_location(LOCATION)
    assert [o["id"] for o in wizard.pricing_options()] == [10, 11]
    assert api.calls == []

    bare = {k: v for k, v in LOCATION.items() if k != "pricingOptions"}
    other = BookingWizard(api)
    other.select_location(bare)
    assert [o["id"] for o in other.pricing_options()] == [10, 11]
    assert api.calls == [("pricing_options", 1)]


def test_selecting_daily_rate_defaults_end_to_one_day(wizard):
    wizard.select_location(LOCATION)
    wizard.select_pricing(LOCATION["pricingOptions"][1])
    draft = wizard.draft
    assert draft.start == datetime(2026, 11, 1, 10, 0)
    assert draft.end == draft.start + timedelta(days=1)
    assert draft.quote.total_price == Decimal("200.00")


def test_option_from_another_location_is_refused(wizard):
    wizard.select_location(LOCATION)
    with pytest.raises(ValidationError):
        wizard.select_pricing({"id": 99, "locationId": 2, "pricingType": "daily", "pricePerUnit": "1"})
    assert wizard.step is Step.PRICING


def test_schedule_override_recomputes_price(wizard):
    wizard.select_location(LOCATION)
    wizard.select_pricing(LOCATION["pricingOptions"][0])
    start = datetime(2026, 11, 3, 10, 0)
    quote = wizard.set_schedule(start, start + timedelta(hours=3, minutes=30))
    assert quote.units == 4
    assert quote.total_price == Decimal("200.00")


def test_end_before_start_is_refused(wizard):
    wizard.select_location(LOCATION)
    wizard.select_pricing(LOCATION["pricingOptions"][0])
    before = wizard.draft.end
    start = datetime(2026, 11, 3, 10, 0)
    with pytest.raises(ValidationError):
        wizard.set_schedule(start, start - timedelta(hours=1))
    assert wizard.draft.end == before
    assert wizard.step is Step.SCHEDULE


def test_previous_keeps_entered_data(wizard):
    wizard.select_location(LOCATION)
    wizard.select_pricing(LOCATION["pricingOptions"][1])
    wizard.confirm_schedule()
    wizard.set_notes("Opening weekend", "عطلة الافتتاح")

    wizard.previous()
    assert wizard.step is Step.SCHEDULE
    wizard.previous()
    assert wizard.step is Step.PRICING
    assert wizard.draft.pricing_option["id"] == 11
    assert wizard.draft.request_notes == "Opening weekend"


def test_changing_location_clears_pricing(wizard):
    wizard.select_location(LOCATION)
    wizard.select_pricing(LOCATION["pricingOptions"][1])
    wizard.previous()
    wizard.previous()
    wizard.select_location({**LOCATION, "id": 2, "pricingOptions": []})
    assert wizard.draft.pricing_option is None
    assert wizard.draft.quote is None


def test_content_is_optional(wizard):
    _walk_to_review(wizard)
    summary = wizard.summary()
    assert summary["media"] is None
    assert summary["requestNotes"] is None
    assert summary["quote"]["totalPrice"] == "200.00"


def test_zero_length_schedule_cannot_be_confirmed(wizard):
    wizard.select_location(LOCATION)
    wizard.select_pricing(LOCATION["pricingOptions"][1])
    start = datetime(2026, 11, 3, 10, 0)
    wizard.set_schedule(start, start)
    with pytest.raises(ValidationError):
        wizard.confirm_schedule()
    assert wizard.step is Step.SCHEDULE


def test_missing_media_file_is_refused(wizard, tmp_path):
    wizard.select_location(LOCATION)
    wizard.select_pricing(LOCATION["pricingOptions"][0])
    wizard.confirm_schedule()
    with pytest.raises(ValidationError):
        wizard.attach_media(str(tmp_path / "promo.png"))
    assert wizard.draft.media_path is None


@pytest.mark.parametrize("path, mime, expected", [
    ("promo.mp4", None, "video"),
    ("banner.png", None, "image"),
    ("clip.bin", "video/webm", "video"),
    ("mystery", None, "image"),
])
def test_media_type_inferred_from_mime(wizard, tmp_path, path, mime, expected):
    media = tmp_path / path
    media.write_bytes(b"\x00")
    wizard.select_location(LOCATION)
    wizard.select_pricing(LOCATION["pricingOptions"][0])
    wizard.confirm_schedule()
    wizard.attach_media(str(media), mime)
    assert wizard.draft.media_type == expected


def test_submit_moves_to_confirmation_and_invalidates_bookings(api, cache, wizard):
    cache.fetch(BOOKINGS, api.bookings)
    _walk_to_review(wizard)

    booking = wizard.submit()

    assert wizard.step is Step.CONFIRMATION
    assert booking["status"] == "pending"
    assert BOOKINGS not in cache
    name, fields, media_path, _ = api.calls[-1]
    assert name == "create_booking"
    assert fields["pricingOptionId"] == 11
    assert fields["startDateTime"] == "2026-11-01T10:00:00"
    assert media_path is None

    with pytest.raises(WizardError):
        wizard.previous()


def test_failed_submit_stays_on_review_and_can_retry(api, wizard):
    _walk_to_review(wizard)
    api.fail_next = ApiError(400, "endDateTime must be after startDateTime")

    with pytest.raises(ApiError):
        wizard.submit()
    assert wizard.step is Step.REVIEW
    assert wizard.last_error.status_code == 400

    wizard.submit()
    assert wizard.step is Step.CONFIRMATION
    assert wizard.last_error is None
