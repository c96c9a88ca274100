import logging
from functools import wraps
from pathlib import Path

import click

from ..invoice import build_invoice
from ..utils.currency import format_currency
from .api import ApiClient
from .errors import ClientError, describe_error
from .guard import RouteGuard
from .navigation import build_navigation
from .session import FileSessionStore


def _client(ctx) -> ApiClient:
    return ctx.obj["client"]


def handles_client_errors(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except ClientError as e:
            report = describe_error(e)
            raise click.ClickException(report.message)
    return wrapper


def login_required(fn):
    """Stops with a pointer to `rentflow login` when no session is stored."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        _, outcome = RouteGuard.for_session(_client(click.get_current_context()).session_store)
        if outcome.redirect:
            raise click.ClickException("Not signed in. Run `rentflow login` first.")
        return fn(*args, **kwargs)
    return wrapper


@click.group()
@click.option("--api-url", envvar="RENTFLOW_API_URL", default=None, help="Base URL of the RentFlow API.")
@click.option("--session-file", type=click.Path(dir_okay=False), default=None)
@click.option("-v", "--verbose", is_flag=True)
@click.pass_context
def main(ctx, api_url, session_file, verbose):
    """RentFlow command line client."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    ctx.ensure_object(dict)
    if "client" not in ctx.obj:
        ctx.obj["client"] = ApiClient(base_url=api_url, session_store=FileSessionStore(session_file))


@main.command()
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
@click.option("--remember-me", is_flag=True, help="Keep the access token for a week.")
@click.pass_context
@handles_client_errors
def login(ctx, email, password, remember_me):
    user = _client(ctx).auth.login(email, password, remember_me=remember_me)
    click.echo(f"Signed in as {user['email']} ({user['role']})")
    for item in build_navigation(user["role"]).main:
        click.echo(f"  {item.title:<12} {item.url}")


@main.command()
@click.pass_context
def logout(ctx):
    _client(ctx).auth.logout()
    click.echo("Signed out")


@main.command()
@login_required
@click.pass_context
@handles_client_errors
def notifications(ctx):
    feed = _client(ctx).dashboard.notifications()
    if feed.state == "empty":
        click.echo(feed.message)
        return
    click.echo(f"Notifications ({feed.badge_count})")
    for item in feed.items:
        if item.kind == "separator":
            click.echo("-" * 40)
            continue
        click.echo(f"{item.title:<16} {item.date or '':<12} {item.message}")
        if item.detail:
            click.echo(f"{'':<29} {item.detail}")


@main.command()
@click.argument("payment_id")
@click.option("--pdf", "pdf_path", type=click.Path(dir_okay=False), help="Save the PDF invoice here.")
@login_required
@click.pass_context
@handles_client_errors
def invoice(ctx, payment_id, pdf_path):
    client = _client(ctx)
    if pdf_path:
        Path(pdf_path).write_bytes(client.payments.invoice_pdf(payment_id))
        click.echo(f"Saved {pdf_path}")
        return

    inv = build_invoice(client.payments.get(payment_id), client.auth.me())
    click.echo(f"INVOICE #{inv.number}")
    click.echo(f"{inv.company_name} | {inv.business_address}")
    click.echo(f"Bill to: {inv.tenant_name}, {inv.property_name}")
    click.echo(f"Due {inv.due_date} (period {inv.period})")
    click.echo(f"Total      {inv.amount_display}")
    click.echo(f"Paid       -{inv.paid_display}")
    click.echo(f"Balance    {inv.balance_display} [{inv.balance_tone}]")
    click.echo(f"Status     {inv.status.upper()}" + ("  ** PAID **" if inv.show_paid_stamp else ""))


@main.command()
@login_required
@click.pass_context
@handles_client_errors
def dashboard(ctx):
    client = _client(ctx)
    currency = client.auth.me().get("currency")
    m = client.dashboard.metrics()
    click.echo(f"Properties        {m['totalProperties']}")
    click.echo(f"Occupancy         {m['occupiedUnits']}/{m['totalUnits']} ({m['occupancyRate']:.0f}%)")
    click.echo(f"Monthly revenue   {format_currency(m['monthlyRevenue'], currency)}")
    click.echo(f"Pending payments  {m['pendingPayments']}")
    click.echo(f"Overdue payments  {m['overduePayments']}")
    click.echo(f"Open maintenance  {m['openMaintenanceRequests']}")
    click.echo("")
    for row in client.dashboard.revenue():
        click.echo(f"{row['month']}  {format_currency(row['revenue'], currency):>18}  "
                   f"{format_currency(row['expenses'], currency):>18}")
