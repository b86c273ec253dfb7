from flask import Blueprint, request, jsonify, g

from models.invoice import Invoice, INVOICE_STATUSES
from utils.auth_context import login_required, current_user_is_admin
from utils.serialize import invoice_json

invoices_bp = Blueprint("invoices", __name__, url_prefix="/api/invoices")


def _scoped_query():
    q = Invoice.query
    if not current_user_is_admin():
        q = q.filter(Invoice.merchant_id == g.user.id)
    return q


# Invoices are written only by the booking approval flow; this surface is read-only.
@invoices_bp.get("")
@login_required
def list_invoices():
    status = (request.args.get("status") or "").strip().lower()
    if status and status not in INVOICE_STATUSES:
        return jsonify(error="status must be paid or unpaid"), 400

    q = _scoped_query()
    if status:
        q = q.filter(Invoice.status == status)

    rows = q.order_by(Invoice.issue_date.desc(), Invoice.id.desc()).all()
    return jsonify([invoice_json(inv) for inv in rows]), 200


@invoices_bp.get("/<string:invoice_number>")
@login_required
def get_invoice(invoice_number: str):
    invoice = _scoped_query().filter(Invoice.invoice_number == invoice_number).first()
    if not invoice:
        return jsonify(error="Invoice not found"), 404
    return jsonify(invoice_json(invoice)), 200
