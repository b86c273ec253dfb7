"""
Console front end: `screenads book | review | show | approve | reject | invoices | stats | whoami`.

Credentials come from --email/--password or SCREENADS_EMAIL/SCREENADS_PASSWORD;
each command logs in, does its work, and exits.
"""
import logging
from functools import wraps

import click

from client.api import ScreenAdsApi
from client.cache import LOCATIONS, QueryCache
from client.errors import ClientError, ValidationError
from client.invoices import InvoiceBoard, render_invoices
from client.review import AdminReviewWorkflow, STATUS_FILTERS
from client.settings import ClientSettings
from client.wizard import BookingWizard


def _notify_errors(fn):
    """Client errors become a red message and exit code 1."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except ClientError as exc:
            click.secho(f"Error: {exc}", fg="red", err=True)
            raise SystemExit(1)
    return wrapper


class Context:
    def __init__(self, settings, email, password):
        self.api = ScreenAdsApi(settings)
        self.cache = QueryCache()
        self.email = email
        self.password = password
        self._logged_in = False

    def login(self):
        if not self._logged_in:
            self.api.login(self.email, self.password)
            self._logged_in = True
        return self.api


pass_ctx = click.make_pass_decorator(Context)


@click.group()
@click.option("--url", envvar="SCREENADS_API_URL", default=None, help="API base URL.")
@click.option("--email", envvar="SCREENADS_EMAIL", required=True)
@click.option("--password", envvar="SCREENADS_PASSWORD", required=True)
@click.option("-v", "--verbose", is_flag=True, help="Log HTTP calls.")
@click.pass_context
def main(ctx, url, email, password, verbose):
    """Book screen ads and review booking requests."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    settings = ClientSettings.from_env()
    if url:
        settings = ClientSettings(api_url=url.rstrip("/"), timeout=settings.timeout)
    ctx.obj = Context(settings, email, password)


DATETIME = click.DateTime(formats=["%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M", "%Y-%m-%d"])


def _choose(items, label):
    for i, item in enumerate(items, start=1):
        click.echo(f"  {i}. {label(item)}")
    index = click.prompt("Choice", type=click.IntRange(1, len(items)))
    return items[index - 1]


@main.command()
@pass_ctx
@_notify_errors
def book(obj):
    """Walk through the booking wizard."""
    api = obj.login()
    wizard = BookingWizard(api, obj.cache)

    locations = obj.cache.fetch(LOCATIONS, lambda: api.locations(include_pricing=True))
    if not locations:
        raise ValidationError("No screen locations are available")
    click.secho("Screen location", bold=True)
    wizard.select_location(_choose(locations, lambda l: f"{l['name']} ({l['city']})"))

    options = wizard.pricing_options()
    if not options:
        raise ValidationError("This location has no pricing options")
    click.secho("Pricing", bold=True)
    wizard.select_pricing(_choose(options, lambda o: f"{o['pricingType']}: {o['pricePerUnit']}"))

    click.secho("Schedule", bold=True)
    while True:
        start = click.prompt("Start", default=wizard.draft.start.isoformat(timespec="minutes"), type=DATETIME)
        end = click.prompt("End", default=wizard.draft.end.isoformat(timespec="minutes"), type=DATETIME)
        try:
            quote = wizard.set_schedule(start, end)
            break
        except ValidationError as exc:
            click.secho(str(exc), fg="red")
    click.echo(f"  {quote.units} x {quote.unit_price} = {quote.total_price}")
    wizard.confirm_schedule()

    click.secho("Content", bold=True)
    media = click.prompt("Media file (blank to skip)", default="", show_default=False,
                         type=click.Path(exists=False, dir_okay=False))
    if media:
        wizard.attach_media(media)
    wizard.set_notes(
        click.prompt("Notes", default="", show_default=False),
        click.prompt("Notes (Arabic)", default="", show_default=False),
    )
    wizard.continue_to_review()

    click.secho("Review", bold=True)
    for key, value in wizard.summary().items():
        if value is not None:
            click.echo(f"  {key}: {value}")

    while True:
        if not click.confirm("Submit booking request?", default=True):
            click.echo("Nothing submitted.")
            return
        try:
            booking = wizard.submit()
            break
        except ClientError as exc:
            click.secho(f"Submission failed: {exc}", fg="red")
    click.secho(f"Booking #{booking['id']} submitted, status {booking['status']}", fg="green")


@main.command()
@click.option("--status", type=click.Choice(STATUS_FILTERS), default="all", show_default=True)
@pass_ctx
@_notify_errors
def review(obj, status):
    """List screen bookings."""
    workflow = AdminReviewWorkflow(obj.login(), obj.cache)
    rows = workflow.bookings(status)
    counts = workflow.counts()
    click.echo("  ".join(f"{k}={v}" for k, v in counts.items()))
    for b in rows:
        location = (b.get("location") or {}).get("name", b.get("locationId"))
        merchant = (b.get("merchant") or {}).get("name", b.get("merchantId"))
        click.echo(f"#{b['id']:<5} {b['status']:<9} {location} | {merchant} | "
                   f"{b['startDateTime']} -> {b['endDateTime']} | {b['totalPrice']}")


@main.command()
@click.argument("booking_id", type=int)
@click.option("--notes", default=None, help="Admin notes attached to the booking.")
@pass_ctx
@_notify_errors
def approve(obj, booking_id, notes):
    """Approve a pending booking and issue its invoice."""
    result = AdminReviewWorkflow(obj.login(), obj.cache).approve(booking_id, admin_notes=notes)
    click.secho(f"Booking #{booking_id} approved, invoice {result['invoice']['invoiceNumber']}", fg="green")


@main.command()
@click.argument("booking_id", type=int)
@click.option("--reason", required=True, help="Shown to the merchant.")
@pass_ctx
@_notify_errors
def reject(obj, booking_id, reason):
    """Reject a pending booking."""
    AdminReviewWorkflow(obj.login(), obj.cache).reject(booking_id, reason)
    click.secho(f"Booking #{booking_id} rejected", fg="green")


@main.command()
@pass_ctx
@_notify_errors
def whoami(obj):
    """Show the logged-in account and its roles."""
    me = obj.login().me()
    click.echo(f"{me['email']} ({', '.join(me.get('roles') or []) or 'no roles'})")


@main.command()
@click.argument("booking_id", type=int)
@pass_ctx
@_notify_errors
def show(obj, booking_id):
    """Show one booking in full."""
    booking = obj.login().booking(booking_id)
    for key, value in booking.items():
        if value is not None and not isinstance(value, dict):
            click.echo(f"  {key}: {value}")


@main.command()
@click.argument("invoice_number", required=False)
@pass_ctx
@_notify_errors
def invoices(obj, invoice_number):
    """Show invoices, or a single invoice by number."""
    if invoice_number:
        click.echo(render_invoices([obj.login().invoice(invoice_number)]))
        return
    click.echo(InvoiceBoard(obj.login(), obj.cache).render())


@main.command()
@pass_ctx
@_notify_errors
def stats(obj):
    """Booking and invoice totals (admin)."""
    data = obj.login().booking_stats()
    click.echo("Bookings: " + "  ".join(f"{k}={v}" for k, v in data["bookings"].items()))
    click.echo(f"Approved revenue: {data['approved_revenue']}")
    for status, row in data["invoices"].items():
        click.echo(f"Invoices {status}: {row['count']} totalling {row['total']}")


if __name__ == "__main__":
    main()
