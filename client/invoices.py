from datetime import datetime

from client.cache import INVOICES

COLUMNS = ("Invoice", "Merchant", "Issued", "Due", "Total", "Status")


def _date(value):
    if not value:
        return "-"
    try:
        return datetime.fromisoformat(value).strftime("%Y-%m-%d")
    except ValueError:
        return value


def invoice_row(inv: dict) -> tuple:
    merchant = inv.get("merchant") or {}
    return (
        inv.get("invoiceNumber") or "-",
        merchant.get("name") or merchant.get("email") or str(inv.get("merchantId", "-")),
        _date(inv.get("issueDate")),
        _date(inv.get("dueDate")),
        f"{inv.get('totalAmount')} {inv.get('currency') or ''}".strip(),
        "paid" if inv.get("status") == "paid" else "unpaid",
    )


def render_invoices(rows) -> str:
    """Plain-text table of invoices, one line per invoice."""
    if not rows:
        return "No invoices yet."

    table = [COLUMNS] + [invoice_row(inv) for inv in rows]
    widths = [max(len(str(r[i])) for r in table) for i in range(len(COLUMNS))]
    lines = ["  ".join(str(cell).ljust(w) for cell, w in zip(r, widths)).rstrip() for r in table]
    lines.insert(1, "  ".join("-" * w for w in widths))
    return "\n".join(lines)


class InvoiceBoard:
    def __init__(self, api, cache):
        self.api = api
        self.cache = cache

    def invoices(self):
        return self.cache.fetch(INVOICES, self.api.invoices)

    def render(self) -> str:
        return render_invoices(self.invoices())
