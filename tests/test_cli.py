from datetime import date, timedelta

import pytest
from click.testing import CliRunner

from conftest import PASSWORD, make_payment, make_property, make_tenant, signup
from rentflow.client.cli import main
from rentflow.extensions import db
from rentflow.models import Payment, User


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


def test_seed_demo_is_idempotent(runner):
    result = runner.invoke(args=["seed-demo"])
    assert result.exit_code == 0, result.output
    assert "Created demo user demo@rentflow.app" in result.output

    user = User.query.filter_by(email="demo@rentflow.app").one()
    assert user.check_password("Demo123!")
    assert user.properties.count() == 2
    assert user.payments.filter_by(status="paid").count() == 1
    assert user.payments.filter_by(status="overdue").count() == 1

    again = runner.invoke(args=["seed-demo"])
    assert "already exists" in again.output
    assert user.properties.count() == 2


def test_inspect_user(runner):
    runner.invoke(args=["seed-demo", "--email", "owner@example.com"])
    result = runner.invoke(args=["inspect-user", "owner@example.com"])
    assert result.exit_code == 0
    assert "role:     landlord" in result.output
    assert "properties:   2" in result.output

    missing = runner.invoke(args=["inspect-user", "ghost@example.com"])
    assert missing.exit_code == 1
    assert "No user with email ghost@example.com" in missing.output


def test_mark_overdue(runner, client, auth):
    owner = User.query.filter_by(email="landlord@example.com").one()
    stale = Payment(user_id=owner.id, tenant_id="t", property_id="p", amount=500,
                    due_date=date.today() - timedelta(days=1), status="pending")
    db.session.add(stale)
    db.session.commit()

    dry = runner.invoke(args=["mark-overdue", "--dry-run"])
    assert "Updated 1 payments and 0 expenses (dry run)" in dry.output
    assert db.session.get(Payment, stale.id).status == "pending"

    real = runner.invoke(args=["mark-overdue"])
    assert "Updated 1 payments and 0 expenses" in real.output
    assert db.session.get(Payment, stale.id).status == "overdue"


def test_rls_commands_need_postgres(runner):
    for command in ("enable-rls", "check-rls"):
        result = runner.invoke(args=[command])
        assert result.exit_code == 1
        assert "needs PostgreSQL" in result.output


# -- client CLI ---------------------------------------------------------------

def _run(api, *args):
    return CliRunner().invoke(main, list(args), obj={"client": api})


def test_client_commands_require_login(api):
    result = _run(api, "notifications")
    assert result.exit_code == 1
    assert "Not signed in" in result.output


def test_client_login_and_notifications(api, client):
    signup(client)
    result = _run(api, "login", "--email", "landlord@example.com", "--password", PASSWORD)
    assert result.exit_code == 0, result.output
    assert "Signed in as landlord@example.com (landlord)" in result.output
    assert "Dashboard" in result.output

    result = _run(api, "notifications")
    assert result.output.strip() == "No new notifications"


def test_client_login_failure(api, client):
    signup(client)
    result = _run(api, "login", "--email", "landlord@example.com", "--password", "Wrong12345")
    assert result.exit_code == 1
    assert "Authentication failed" in result.output


def test_client_invoice_and_dashboard(api, client, auth, tmp_path):
    prop = make_property(client, auth)
    tenant = make_tenant(client, auth, prop["id"])
    payment = make_payment(client, auth, tenant, amount=1500, paidAmount=500)
    api.auth.login("landlord@example.com", PASSWORD)

    result = _run(api, "invoice", payment["id"])
    assert result.exit_code == 0, result.output
    assert f"INVOICE #INV-{payment['id']}" in result.output
    assert "Balance    Ksh 1,000.00 [due]" in result.output

    pdf = tmp_path / "invoice.pdf"
    result = _run(api, "invoice", payment["id"], "--pdf", str(pdf))
    assert result.exit_code == 0, result.output
    assert pdf.read_bytes().startswith(b"%PDF")

    result = _run(api, "dashboard")
    assert result.exit_code == 0, result.output
    assert "Properties        1" in result.output


def test_client_logout(api, client):
    signup(client)
    api.auth.login("landlord@example.com", PASSWORD)
    assert _run(api, "logout").output.strip() == "Signed out"
    assert api.session_store.get_session() is None
