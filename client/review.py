import logging
from collections import Counter
from contextlib import contextmanager

from client.cache import BOOKINGS, INVOICES
from client.errors import RequestInFlightError, ValidationError

logger = logging.getLogger(__name__)

STATUS_FILTERS = ("all", "pending", "approved", "rejected")


def can_reject(reason) -> bool:
    return isinstance(reason, str) and bool(reason.strip())


class AdminReviewWorkflow:
    """
    Lists screen bookings for admins and applies approve/reject.

    The server decides whether a booking is still pending; a second decision
    comes back as a 409 ApiError and leaves this object untouched.
    """

    def __init__(self, api, cache):
        self.api = api
        self.cache = cache
        self._in_flight = set()

    def _all_bookings(self):
        return self.cache.fetch(BOOKINGS, self.api.bookings)

    def bookings(self, status: str = "all"):
        status = (status or "all").lower()
        if status not in STATUS_FILTERS:
            raise ValueError(f"status must be one of {', '.join(STATUS_FILTERS)}")
        rows = self._all_bookings()
        if status == "all":
            return list(rows)
        return [b for b in rows if b.get("status") == status]

    def counts(self) -> dict:
        tally = Counter(b.get("status") for b in self._all_bookings())
        out = {s: tally.get(s, 0) for s in STATUS_FILTERS[1:]}
        out["all"] = sum(out.values())
        return out

    can_reject = staticmethod(can_reject)

    def is_busy(self, action: str) -> bool:
        return action in self._in_flight

    @contextmanager
    def _guard(self, action: str):
        if action in self._in_flight:
            raise RequestInFlightError(f"An {action} request is already in progress")
        self._in_flight.add(action)
        try:
            yield
        finally:
            self._in_flight.discard(action)

    def approve(self, booking_id: int, admin_notes: str = None):
        with self._guard("approve"):
            result = self.api.approve_booking(booking_id, admin_notes=admin_notes)
        self.cache.invalidate(BOOKINGS, INVOICES)
        logger.info("Approved booking %s", booking_id)
        return result

    def reject(self, booking_id: int, reason: str):
        if not can_reject(reason):
            raise ValidationError("A rejection reason is required")
        with self._guard("reject"):
            result = self.api.reject_booking(booking_id, reason.strip())
        self.cache.invalidate(BOOKINGS)
        logger.info("Rejected booking %s", booking_id)
        return result
