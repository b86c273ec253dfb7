"""
Screen-ad booking wizard.

Steps run in a fixed order:

    location -> pricing -> schedule -> content -> review -> confirmation

`previous()` walks back one step from anything between pricing and review
and keeps what was already entered. Confirmation is terminal.
"""
import enum
import logging
import mimetypes
import os
from dataclasses import dataclass
from datetime import datetime, timedelta

from client.cache import BOOKINGS
from client.errors import ApiError, ValidationError, WizardError
from utils.pricing import PriceQuote, calculate_price, default_end

logger = logging.getLogger(__name__)


class Step(str, enum.Enum):
    LOCATION = "location"
    PRICING = "pricing"
    SCHEDULE = "schedule"
    CONTENT = "content"
    REVIEW = "review"
    CONFIRMATION = "confirmation"


STEP_ORDER = list(Step)

_FORWARD = {
    (Step.LOCATION, "select_location"): Step.PRICING,
    (Step.PRICING, "select_pricing"): Step.SCHEDULE,
    (Step.SCHEDULE, "confirm_schedule"): Step.CONTENT,
    (Step.CONTENT, "continue"): Step.REVIEW,
    (Step.REVIEW, "submit"): Step.CONFIRMATION,
}


def transition(step: Step, action: str) -> Step:
    """Next step for `action`, or WizardError if the move is not allowed."""
    if action == "previous":
        if step in (Step.LOCATION, Step.CONFIRMATION):
            raise WizardError(f"Cannot go back from {step.value}")
        return STEP_ORDER[STEP_ORDER.index(step) - 1]

    try:
        return _FORWARD[(step, action)]
    except KeyError:
        raise WizardError(f"{action} is not allowed on the {step.value} step") from None


def media_type_for_path(path: str, mime_type: str = None):
    mime_type = mime_type or mimetypes.guess_type(path)[0] or "application/octet-stream"
    return mime_type, ("video" if mime_type.startswith("video/") else "image")


def _next_full_hour(now: datetime) -> datetime:
    return now.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)


@dataclass
class BookingDraft:
    location: dict = None
    pricing_option: dict = None
    start: datetime = None
    end: datetime = None
    media_path: str = None
    media_mime: str = None
    media_type: str = None
    request_notes: str = None
    request_notes_ar: str = None
    quote: PriceQuote = None

    def form_fields(self) -> dict:
        return {
            "locationId": self.location["id"],
            "pricingOptionId": self.pricing_option["id"],
            "startDateTime": self.start.isoformat(),
            "endDateTime": self.end.isoformat(),
            "requestNotes": self.request_notes,
            "requestNotesAr": self.request_notes_ar,
        }


class BookingWizard:
    def __init__(self, api, cache=None, clock=datetime.now):
        self.api = api
        self.cache = cache
        self.clock = clock
        self.step = Step.LOCATION
        self.draft = BookingDraft()
        self.booking = None
        self.last_error = None

    def _advance(self, action: str):
        self.step = transition(self.step, action)
        logger.debug("Booking wizard -> %s", self.step.value)

    def _require(self, step: Step):
        if self.step is not step:
            raise WizardError(f"Expected the {step.value} step, wizard is on {self.step.value}")

    def _requote(self):
        d = self.draft
        d.quote = calculate_price(d.pricing_option["pricingType"], d.pricing_option["pricePerUnit"], d.start, d.end)
        return d.quote

    # ---------- location ----------
    def select_location(self, location: dict):
        self._require(Step.LOCATION)
        if not location:
            raise ValidationError("Select a screen location")
        previous = self.draft.location
        if previous and previous.get("id") != location.get("id"):
            self.draft.pricing_option = None
            self.draft.quote = None
        self.draft.location = location
        self._advance("select_location")

    # ---------- pricing ----------
    def pricing_options(self):
        if not self.draft.location:
            raise WizardError("Select a screen location first")
        nested = self.draft.location.get("pricingOptions")
        if nested is not None:
            return nested
        return self.api.pricing_options(self.draft.location["id"])

    def select_pricing(self, option: dict):
        self._require(Step.PRICING)
        if not option:
            raise ValidationError("Select a pricing option")
        if option.get("locationId") != self.draft.location["id"]:
            raise ValidationError("Pricing option belongs to another location")

        d = self.draft
        d.pricing_option = option
        if d.start is None:
            d.start = _next_full_hour(self.clock())
        d.end = default_end(option["pricingType"], d.start)
        self._requote()
        self._advance("select_pricing")

    # ---------- schedule ----------
    def set_schedule(self, start: datetime, end: datetime):
        self._require(Step.SCHEDULE)
        if start is None or end is None:
            raise ValidationError("Start and end dates are required")
        if end < start:
            raise ValidationError("End date must not be before the start date")
        self.draft.start = start
        self.draft.end = end
        return self._requote()

    def confirm_schedule(self):
        self._require(Step.SCHEDULE)
        d = self.draft
        if d.start is None or d.end is None or d.end <= d.start:
            raise ValidationError("End date must be after the start date")
        self._requote()
        self._advance("confirm_schedule")

    # ---------- content ----------
    def attach_media(self, path: str, mime_type: str = None):
        self._require(Step.CONTENT)
        if not path or not os.path.isfile(path):
            raise ValidationError(f"Media file not found: {path}")
        d = self.draft
        d.media_path = path
        d.media_mime, d.media_type = media_type_for_path(path, mime_type)

    def set_notes(self, notes: str = None, notes_ar: str = None):
        self._require(Step.CONTENT)
        self.draft.request_notes = (notes or "").strip() or None
        self.draft.request_notes_ar = (notes_ar or "").strip() or None

    def continue_to_review(self):
        self._advance("continue")

    # ---------- review ----------
    def summary(self) -> dict:
        d = self.draft
        return {
            "location": d.location.get("name") if d.location else None,
            "locationAr": d.location.get("nameAr") if d.location else None,
            "pricingType": d.pricing_option.get("pricingType") if d.pricing_option else None,
            "start": d.start,
            "end": d.end,
            "media": d.media_path,
            "mediaType": d.media_type,
            "requestNotes": d.request_notes,
            "requestNotesAr": d.request_notes_ar,
            "quote": d.quote.as_dict() if d.quote else None,
        }

    def submit(self):
        """
        Sends the booking request. On failure the wizard stays on review with
        `last_error` set and the ApiError is re-raised; calling submit again
        retries.
        """
        self._require(Step.REVIEW)
        d = self.draft
        try:
            booking = self.api.create_booking(d.form_fields(), media_path=d.media_path, media_mime=d.media_mime)
        except ApiError as exc:
            self.last_error = exc
            logger.warning("Booking submission failed: %s", exc)
            raise

        self.last_error = None
        self.booking = booking
        if self.cache is not None:
            self.cache.invalidate(BOOKINGS)
        self._advance("submit")
        return booking

    def previous(self):
        self._advance("previous")
