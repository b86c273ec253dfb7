from client.errors import ApiError

LOCATION = {
    "id": 1,
    "name": "Riyadh Mall",
    "nameAr": "مول الرياض",
    "city": "Riyadh",
    "pricingOptions": [
        {"id": 10, "locationId": 1, "pricingType": "hourly", "pricePerUnit": "50.00", "durationHours": 1},
        {"id": 11, "locationId": 1, "pricingType": "daily", "pricePerUnit": "200.00", "durationHours": 24},
    ],
}


class FakeApi:
    """In-memory stand-in for ScreenAdsApi used by client tests."""

    def __init__(self, bookings=None):
        self.calls = []
        self.booking_rows = list(bookings or [])
        self.invoice_rows = []
        self.fail_next = None
        self.on_call = None

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if self.on_call:
            self.on_call(name)
        if self.fail_next:
            exc, self.fail_next = self.fail_next, None
            raise exc

    def login(self, email, password):
        self._record("login", email)
        return {"message": "Login OK"}

    def pricing_options(self, location_id=None):
        self._record("pricing_options", location_id)
        return [o for o in LOCATION["pricingOptions"] if o["locationId"] == location_id]

    def create_booking(self, fields, media_path=None, media_mime=None):
        self._record("create_booking", fields, media_path, media_mime)
        row = {"id": len(self.booking_rows) + 1, "status": "pending", **fields}
        self.booking_rows.append(row)
        return row

    def bookings(self, status=None):
        self._record("bookings")
        return [dict(b) for b in self.booking_rows]

    def _decide(self, booking_id, status):
        row = next((b for b in self.booking_rows if b["id"] == booking_id), None)
        if row is None:
            raise ApiError(404, "Booking not found")
        if row["status"] != "pending":
            raise ApiError(409, "Booking is not pending", {"status": row["status"]})
        row["status"] = status
        return row

    def approve_booking(self, booking_id, admin_notes=None):
        self._record("approve_booking", booking_id, admin_notes)
        row = self._decide(booking_id, "approved")
        invoice = {"invoiceNumber": f"INV-20261101-{booking_id:06d}", "bookingId": booking_id}
        self.invoice_rows.append(invoice)
        return {"booking": dict(row), "invoice": invoice}

    def reject_booking(self, booking_id, rejection_reason):
        self._record("reject_booking", booking_id, rejection_reason)
        row = self._decide(booking_id, "rejected")
        return {"booking": dict(row)}

    def invoices(self, status=None):
        self._record("invoices")
        return list(self.invoice_rows)

    def me(self):
        self._record("me")
        return {"id": 1, "email": "admin@example.com", "roles": ["ADMIN"]}

    def booking(self, booking_id):
        self._record("booking", booking_id)
        row = next((b for b in self.booking_rows if b["id"] == booking_id), None)
        if row is None:
            raise ApiError(404, "Booking not found")
        return dict(row)

    def invoice(self, invoice_number):
        self._record("invoice", invoice_number)
        row = next((i for i in self.invoice_rows if i["invoiceNumber"] == invoice_number), None)
        if row is None:
            raise ApiError(404, "Invoice not found")
        return row
