from datetime import date

from rentflow.invoice import build_invoice, invoice_number
from rentflow.utils.currency import format_currency, get_currency_symbol

USER = {"email": "owner@example.com", "currency": "USD"}


def _payment(**overrides):
    payment = {
        "id": "42",
        "amount": 1000,
        "paidAmount": 400,
        "status": "pending",
        "dueDate": "2026-03-01",
        "tenantName": "Sarah Johnson",
        "propertyName": "Sunset View",
    }
    payment.update(overrides)
    return payment


def test_partial_payment_leaves_balance_due():
    inv = build_invoice(_payment(), USER, today=date(2026, 2, 20))
    assert inv.balance == 600
    assert inv.balance_tone == "due"
    assert inv.balance_display == "$ 600.00"
    assert not inv.show_paid_stamp


def test_paid_stamp_follows_status_not_balance():
    inv = build_invoice(_payment(status="paid", paidAmount=1000), USER)
    assert inv.balance == 0
    assert inv.balance_tone == "settled"
    assert inv.is_paid and inv.show_paid_stamp

    # a stale status wins over the arithmetic
    inv = build_invoice(_payment(status="pending", paidAmount=1000), USER)
    assert inv.balance == 0
    assert not inv.show_paid_stamp


def test_overpayment_renders_as_credit():
    inv = build_invoice(_payment(paidAmount=1200, status="paid"), USER)
    assert inv.balance == -200
    assert inv.balance_tone == "credit"
    assert inv.balance_display == "$ -200.00"


def test_missing_paid_amount_counts_as_zero():
    inv = build_invoice(_payment(paidAmount=None), USER)
    assert inv.paid_amount == 0
    assert inv.balance == 1000


def test_issuer_defaults_and_currency_fallback():
    inv = build_invoice(_payment(), {"email": "owner@example.com", "currency": None})
    assert inv.company_name == "RentFlow Management"
    assert inv.business_address == "Property Management Services"
    assert inv.business_email == "owner@example.com"
    assert inv.currency == "KES"
    assert inv.amount_display == "Ksh 1,000.00"


def test_header_fields():
    inv = build_invoice(_payment(), USER, today=date(2026, 2, 20))
    assert inv.number == "INV-000042"
    assert inv.period == "March 2026"
    assert inv.due_date == "March 01, 2026"
    assert inv.issued_on == "February 20, 2026"


def test_invoice_number_keeps_long_ids():
    assert invoice_number("a1b2c3d4-e5f6") == "INV-a1b2c3d4-e5f6"


def test_format_currency():
    assert format_currency(1234.5) == "Ksh 1,234.50"
    assert format_currency("99", "gbp") == "£ 99.00"
    assert format_currency("not a number", "EUR") == "€ 0.00"
    assert format_currency(10, "XYZ") == "Ksh 10.00"
    assert format_currency(10, "USD", symbol=False) == "USD 10.00"
    assert get_currency_symbol("usd") == "$"
    assert get_currency_symbol(None) == "Ksh"
