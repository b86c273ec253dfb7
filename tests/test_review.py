import pytest

from client.cache import BOOKINGS, INVOICES, QueryCache
from client.errors import ApiError, RequestInFlightError, ValidationError
from client.invoices import InvoiceBoard, render_invoices
from client.review import AdminReviewWorkflow
from fakes import FakeApi

ROWS = [
    {"id": 1, "status": "pending"},
    {"id": 2, "status": "approved"},
    {"id": 3, "status": "rejected"},
    {"id": 4, "status": "pending"},
]


@pytest.fixture
def api():
    return FakeApi(bookings=[dict(r) for r in ROWS])


@pytest.fixture
def cache():
    return QueryCache()


@pytest.fixture
def workflow(api, cache):
    return AdminReviewWorkflow(api, cache)


def test_status_filter_is_client_side(api, workflow):
    assert [b["id"] for b in workflow.bookings("pending")] == [1, 4]
    assert [b["id"] for b in workflow.bookings("approved")] == [2]
    assert len(workflow.bookings()) == 4
    assert api.calls.count(("bookings",)) == 1


def test_unknown_filter(workflow):
    with pytest.raises(ValueError):
        workflow.bookings("archived")


def test_counts(workflow):
    assert workflow.counts() == {"pending": 2, "approved": 1, "rejected": 1, "all": 4}


def test_approve_invalidates_bookings_and_invoices(api, cache, workflow):
    workflow.bookings()
    cache.fetch(INVOICES, api.invoices)

    result = workflow.approve(1, admin_notes="ok")

    assert result["booking"]["status"] == "approved"
    assert BOOKINGS not in cache and INVOICES not in cache
    assert [b["id"] for b in workflow.bookings("pending")] == [4]


def test_reject_invalidates_bookings_only(api, cache, workflow):
    workflow.bookings()
    cache.fetch(INVOICES, api.invoices)

    workflow.reject(4, "  Wrong aspect ratio ")

    assert BOOKINGS not in cache
    assert INVOICES in cache
    assert api.calls[-1] == ("reject_booking", 4, "Wrong aspect ratio")


@pytest.mark.parametrize("reason", ["", "   ", None])
def test_blank_reason_sends_nothing(api, workflow, reason):
    assert not workflow.can_reject(reason)
    with pytest.raises(ValidationError):
        workflow.reject(1, reason)
    assert not any(c[0] == "reject_booking" for c in api.calls)


def test_conflict_propagates_and_cache_is_kept(api, cache, workflow):
    workflow.bookings()
    with pytest.raises(ApiError) as excinfo:
        workflow.approve(2)
    assert excinfo.value.is_conflict
    assert BOOKINGS in cache
    assert not workflow.is_busy("approve")


def test_second_approve_while_in_flight_is_refused(api, workflow):
    seen = []

    def reenter(name):
        if name == "approve_booking" and not seen:
            seen.append(name)
            with pytest.raises(RequestInFlightError):
                workflow.approve(4)

    api.on_call = reenter
    workflow.approve(1)
    assert [c[1] for c in api.calls if c[0] == "approve_booking"] == [1]


def test_reject_may_run_while_approve_is_in_flight(api, workflow):
    def reject_too(name):
        if name == "approve_booking":
            api.on_call = None
            workflow.reject(4, "Duplicate request")

    api.on_call = reject_too
    workflow.approve(1)
    assert {b["id"]: b["status"] for b in api.booking_rows}[4] == "rejected"


def test_invoice_board_refreshes_after_approval(api, cache, workflow):
    board = InvoiceBoard(api, cache)
    assert board.invoices() == []
    workflow.approve(1)
    assert [i["bookingId"] for i in board.invoices()] == [1]


def test_render_invoices_table():
    text = render_invoices([{
        "invoiceNumber": "INV-20261101-000001",
        "merchant": {"name": "Corner Coffee"},
        "issueDate": "2026-11-01T09:00:00",
        "dueDate": "2026-12-01T09:00:00",
        "totalAmount": "230.00",
        "currency": "SAR",
        "status": "unpaid",
    }])
    header, rule, row = text.splitlines()
    assert header.split() == ["Invoice", "Merchant", "Issued", "Due", "Total", "Status"]
    assert set(rule.replace(" ", "")) == {"-"}
    assert "INV-20261101-000001" in row
    assert "Corner Coffee" in row
    assert "2026-12-01" in row
    assert "230.00 SAR" in row
    assert row.endswith("unpaid")


def test_render_empty():
    assert render_invoices([]) == "No invoices yet."
