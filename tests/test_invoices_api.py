import pytest


@pytest.fixture
def approved_invoice(admin_client, pending_booking):
    resp = admin_client.post(f"/api/screen-bookings/{pending_booking['id']}/approve", json={})
    assert resp.status_code == 200
    return resp.get_json()["invoice"]


def test_merchant_sees_own_invoice(merchant_client, approved_invoice):
    rows = merchant_client.get("/api/invoices").get_json()
    assert len(rows) == 1
    inv = rows[0]
    assert inv["invoiceNumber"] == approved_invoice["invoiceNumber"]
    assert inv["merchant"]["name"] == "Corner Coffee"
    assert inv["currency"] == "SAR"
    assert inv["status"] == "unpaid"
    assert inv["dueDate"] > inv["issueDate"]


def test_other_merchants_cannot_see_invoice(other_merchant_client, approved_invoice):
    assert other_merchant_client.get("/api/invoices").get_json() == []
    resp = other_merchant_client.get(f"/api/invoices/{approved_invoice['invoiceNumber']}")
    assert resp.status_code == 404


def test_admin_lists_and_filters(admin_client, approved_invoice):
    assert len(admin_client.get("/api/invoices").get_json()) == 1
    assert len(admin_client.get("/api/invoices?status=unpaid").get_json()) == 1
    assert admin_client.get("/api/invoices?status=paid").get_json() == []
    assert admin_client.get("/api/invoices?status=overdue").status_code == 400


def test_invoice_detail(merchant_client, approved_invoice):
    resp = merchant_client.get(f"/api/invoices/{approved_invoice['invoiceNumber']}")
    assert resp.status_code == 200
    assert resp.get_json()["totalAmount"] == approved_invoice["totalAmount"]


def test_invoices_are_read_only(admin_client, approved_invoice):
    resp = admin_client.post("/api/invoices", json={"bookingId": approved_invoice["bookingId"]})
    assert resp.status_code == 405


def test_invoices_require_login(app):
    assert app.test_client().get("/api/invoices").status_code == 401
