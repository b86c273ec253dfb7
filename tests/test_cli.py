import pytest
from click.testing import CliRunner

import client.cli as cli
from fakes import FakeApi


@pytest.fixture
def api(monkeypatch):
    fake = FakeApi(bookings=[{"id": 1, "status": "pending", "locationId": 1, "merchantId": 5,
                              "startDateTime": "2026-11-01T10:00:00", "endDateTime": "2026-11-02T10:00:00",
                              "totalPrice": "200.00"}])
    monkeypatch.setattr(cli, "ScreenAdsApi", lambda settings: fake)
    return fake


def _run(*args):
    return CliRunner().invoke(cli.main, ["--email", "admin@example.com", "--password", "x", *args])


def test_review_lists_bookings(api):
    result = _run("review", "--status", "pending")
    assert result.exit_code == 0
    assert "pending=1" in result.output
    assert "#1" in result.output


def test_approve_prints_invoice_number(api):
    result = _run("approve", "1")
    assert result.exit_code == 0
    assert "INV-20261101-000001" in result.output


def test_conflict_is_reported_not_raised(api):
    _run("approve", "1")
    result = _run("reject", "1", "--reason", "Late")
    assert result.exit_code == 1
    assert "409: Booking is not pending" in result.output
    assert "Traceback" not in result.output


def test_blank_reason_never_reaches_server(api):
    result = _run("reject", "1", "--reason", "  ")
    assert result.exit_code == 1
    assert "rejection reason is required" in result.output
    assert not any(c[0] == "reject_booking" for c in api.calls)


def test_whoami_lists_roles(api):
    result = _run("whoami")
    assert result.exit_code == 0
    assert "admin@example.com (ADMIN)" in result.output


def test_show_unknown_booking(api):
    result = _run("show", "99")
    assert result.exit_code == 1
    assert "404: Booking not found" in result.output


def test_single_invoice_by_number(api):
    _run("approve", "1")
    result = _run("invoices", "INV-20261101-000001")
    assert result.exit_code == 0
    assert "INV-20261101-000001" in result.output
