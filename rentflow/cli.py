import logging
from datetime import date, timedelta

import click
from dateutil.relativedelta import relativedelta
from flask import Flask
from sqlalchemy import text

from .extensions import db
from .models import (
    OWNED_TABLES,
    Expense,
    MaintenanceRequest,
    Payment,
    PaymentHistory,
    Property,
    Tenant,
    User,
)

log = logging.getLogger(__name__)

RLS_TABLES = ("users",) + OWNED_TABLES + ("payment_history",)


def _require_postgres():
    if db.engine.dialect.name != "postgresql":
        raise click.ClickException(
            f"Row-level security needs PostgreSQL (connected to {db.engine.dialect.name})."
        )


def _seed_portfolio(user: User) -> None:
    today = date.today()
    sunset = Property(
        user_id=user.id, name="Sunset View Apartments", address="12 Ngong Road", city="Nairobi",
        state="Nairobi", zip_code="00100", type="apartment", units=12, monthly_rent=45000,
    )
    oak = Property(
        user_id=user.id, name="Oak Street Townhomes", address="4 Oak Street", city="Mombasa",
        state="Mombasa", zip_code="80100", type="townhouse", units=4, monthly_rent=60000,
    )
    db.session.add_all([sunset, oak])
    db.session.flush()

    sarah = Tenant(
        user_id=user.id, first_name="Sarah", last_name="Johnson", email="sarah@example.com",
        phone="+254700000001", property_id=sunset.id, unit="A1",
        lease_start=today - relativedelta(months=11), lease_end=today + timedelta(days=30),
        rent_amount=45000,
    )
    emily = Tenant(
        user_id=user.id, first_name="Emily", last_name="Rodriguez", email="emily@example.com",
        phone="+254700000002", property_id=oak.id, unit="3",
        lease_start=today - relativedelta(months=2), lease_end=today + relativedelta(months=10),
        rent_amount=60000,
    )
    db.session.add_all([sarah, emily])
    sunset.occupy()
    oak.occupy()
    db.session.flush()

    last_month = today - relativedelta(months=1)
    settled = Payment(
        user_id=user.id, tenant_id=sarah.id, property_id=sunset.id, amount=45000, due_date=last_month,
    )
    late = Payment(
        user_id=user.id, tenant_id=emily.id, property_id=oak.id, amount=60000, due_date=last_month,
    )
    upcoming = Payment(
        user_id=user.id, tenant_id=sarah.id, property_id=sunset.id, amount=45000,
        due_date=today + timedelta(days=7),
    )
    db.session.add_all([settled, late, upcoming])
    db.session.flush()
    settled.record_transaction(PaymentHistory(amount=45000, date=last_month, method="mpesa", reference="QX12AB34"))
    for p in (late, upcoming):
        p.refresh_status()

    leak = MaintenanceRequest(
        user_id=user.id, property_id=sunset.id, tenant_id=sarah.id, title="Kitchen sink leaking",
        description="Water pooling under the sink", category="plumbing", priority="high",
    )
    db.session.add(leak)

    insurance = Expense(
        user_id=user.id, property_id=sunset.id, title="Building insurance", category="insurance",
        amount=30000, paid_amount=30000, is_recurring=True, frequency="yearly",
        due_date=last_month, paid_date=last_month,
    )
    insurance.refresh_status()
    db.session.add(insurance)


def register_cli(app: Flask) -> None:
    @app.cli.command("seed-demo")
    @click.option("--email", default="demo@rentflow.app", show_default=True)
    @click.option("--password", default="Demo123!", show_default=True)
    def seed_demo(email: str, password: str):
        """Create the demo landlord and a small sample portfolio."""
        user = User.query.filter_by(email=email).first()
        if user is None:
            user = User(username=email.split("@")[0], email=email, first_name="Demo", last_name="User",
                        currency=app.config["DEFAULT_CURRENCY"])
            user.set_password(password)
            db.session.add(user)
            db.session.flush()
            click.echo(f"Created demo user {email}")
        else:
            click.echo(f"Demo user {email} already exists")

        if user.properties.count() == 0:
            _seed_portfolio(user)
            click.echo("Seeded sample properties, tenants, payments, maintenance and expenses")
        db.session.commit()

    @app.cli.command("enable-rls")
    def enable_rls():
        """Enable row-level security on every table (no policies: only the owner role reads)."""
        _require_postgres()
        for table in RLS_TABLES:
            db.session.execute(text(f'ALTER TABLE "{table}" ENABLE ROW LEVEL SECURITY'))
            click.echo(f"Enabled RLS on {table}")
        db.session.commit()

    @app.cli.command("check-rls")
    def check_rls():
        _require_postgres()
        rows = db.session.execute(
            text("SELECT tablename, rowsecurity FROM pg_tables WHERE schemaname = 'public' ORDER BY tablename")
        ).all()
        for name, enabled in rows:
            click.echo(f"{name:<24} {'on' if enabled else 'OFF'}")
        missing = sorted(set(RLS_TABLES) - {name for name, enabled in rows if enabled})
        if missing:
            raise click.ClickException("RLS disabled on: " + ", ".join(missing))

    @app.cli.command("inspect-user")
    @click.argument("email")
    def inspect_user(email: str):
        """Show a user's account and how many rows they own."""
        user = User.query.filter_by(email=email.lower()).first()
        if user is None:
            raise click.ClickException(f"No user with email {email}")
        click.echo(f"id:       {user.id}")
        click.echo(f"username: {user.username}")
        click.echo(f"role:     {user.role}")
        click.echo(f"currency: {user.currency or app.config['DEFAULT_CURRENCY']}")
        for label, model in (("properties", Property), ("tenants", Tenant), ("payments", Payment),
                             ("maintenance", MaintenanceRequest), ("expenses", Expense)):
            click.echo(f"{label + ':':<13} {model.for_user(user.id).count()}")

    @app.cli.command("mark-overdue")
    @click.option("--dry-run", is_flag=True, help="Report changes without saving them.")
    def mark_overdue(dry_run: bool):
        """Recompute payment and expense statuses against today's date."""
        changed = {"payments": 0, "expenses": 0}
        for key, model in (("payments", Payment), ("expenses", Expense)):
            for row in model.query.filter(model.status != "paid"):
                if row.refresh_status():
                    changed[key] += 1
        if dry_run:
            db.session.rollback()
        else:
            db.session.commit()
        log.info("Status refresh: %s%s", changed, " (dry run)" if dry_run else "")
        click.echo(f"Updated {changed['payments']} payments and {changed['expenses']} expenses"
                   + (" (dry run)" if dry_run else ""))
