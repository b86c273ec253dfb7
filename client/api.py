"""
HTTP client for the screen-ads API.
"""
import logging
import os

import requests

from client.errors import ApiError
from client.settings import ClientSettings

logger = logging.getLogger(__name__)

CSRF_COOKIE = "csrf_token"
CSRF_HEADER = "X-CSRF-Token"


class ScreenAdsApi:
    """
    Thin wrapper over a requests.Session that holds the login cookie.

    Every non-2xx answer is raised as ApiError carrying the server's
    `error` message; transport failures are raised with status_code None.
    """

    def __init__(self, settings: ClientSettings = None, session: requests.Session = None):
        self.settings = settings or ClientSettings.from_env()
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.settings.api_url}{path}"

    def _request(self, method: str, path: str, **kwargs):
        headers = kwargs.pop("headers", {})
        csrf = self.session.cookies.get(CSRF_COOKIE)
        if csrf and method.upper() != "GET":
            headers[CSRF_HEADER] = csrf

        try:
            response = self.session.request(
                method,
                self._url(path),
                headers=headers,
                timeout=self.settings.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise ApiError(None, f"Could not reach the server: {e}") from e

        if response.ok:
            return response.json() if response.content else None

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        message = payload.get("error") if isinstance(payload, dict) else None
        logger.warning("%s %s returned %s", method, path, response.status_code)
        raise ApiError(response.status_code, message or response.reason or "Request failed", payload)

    # ---------- auth ----------
    def login(self, email: str, password: str):
        return self._request("POST", "/auth/login", json={"email": email, "password": password})

    def me(self):
        return self._request("GET", "/auth/me")

    # ---------- reference data ----------
    def locations(self, include_pricing: bool = False):
        params = {"include": "pricing"} if include_pricing else None
        return self._request("GET", "/api/screen-locations", params=params)

    def pricing_options(self, location_id=None):
        params = {"locationId": location_id} if location_id is not None else None
        return self._request("GET", "/api/screen-pricing-options", params=params)

    # ---------- bookings ----------
    def create_booking(self, fields: dict, media_path: str = None, media_mime: str = None):
        """Sends multipart form data when a media file is attached, JSON otherwise."""
        if not media_path:
            return self._request("POST", "/api/screen-bookings", json=fields)

        form = {k: v for k, v in fields.items() if v is not None}
        try:
            fh = open(media_path, "rb")
        except OSError as e:
            logger.error("Could not read %s: %s", media_path, e)
            raise ApiError(None, f"Could not read media file: {e}") from e
        with fh:
            files = {"mediaFile": (os.path.basename(media_path), fh, media_mime or "application/octet-stream")}
            return self._request("POST", "/api/screen-bookings", data=form, files=files)

    def bookings(self, status: str = None):
        params = {"status": status} if status and status != "all" else None
        return self._request("GET", "/api/screen-bookings", params=params)

    def booking(self, booking_id: int):
        return self._request("GET", f"/api/screen-bookings/{booking_id}")

    def approve_booking(self, booking_id: int, admin_notes: str = None):
        body = {"adminNotes": admin_notes} if admin_notes else {}
        return self._request("POST", f"/api/screen-bookings/{booking_id}/approve", json=body)

    def reject_booking(self, booking_id: int, rejection_reason: str):
        return self._request(
            "POST",
            f"/api/screen-bookings/{booking_id}/reject",
            json={"rejectionReason": rejection_reason},
        )

    def booking_stats(self):
        return self._request("GET", "/api/admin/screen-bookings/stats")

    # ---------- invoices ----------
    def invoices(self, status: str = None):
        params = {"status": status} if status else None
        return self._request("GET", "/api/invoices", params=params)

    def invoice(self, invoice_number: str):
        return self._request("GET", f"/api/invoices/{invoice_number}")
