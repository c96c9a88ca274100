"""Invoice and balance derivation for a single rent payment.

Works on wire-format dicts (``amount``, ``paidAmount``, ``status``,
``tenantName``...) so the same code serves the API and the client CLI.
Nothing here touches the database or the network.
"""
from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional

from .utils.currency import format_currency, normalize_currency
from .utils.dates import parse_date

DEFAULT_COMPANY_NAME = "RentFlow Management"
DEFAULT_BUSINESS_ADDRESS = "Property Management Services"


@dataclass(frozen=True)
class Invoice:
    number: str
    issued_on: str
    due_date: str
    period: str
    company_name: str
    business_address: str
    business_email: Optional[str]
    tenant_name: str
    property_name: str
    currency: str
    amount: float
    paid_amount: float
    balance: float
    amount_display: str
    paid_display: str
    balance_display: str
    balance_tone: str
    status: str
    is_paid: bool
    show_paid_stamp: bool
    reference: Optional[str]

    def to_dict(self):
        return {_camel(key): value for key, value in asdict(self).items()}


def _camel(name):
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def invoice_number(payment_id) -> str:
    return "INV-" + str(payment_id).rjust(6, "0")


def balance_of(payment: dict) -> float:
    return float(payment["amount"]) - float(payment.get("paidAmount") or 0)


def balance_tone(balance: float) -> str:
    if balance > 0:
        return "due"
    if balance < 0:
        return "credit"
    return "settled"


def build_invoice(payment: dict, user: dict, today: Optional[date] = None) -> Invoice:
    """Derive everything an invoice shows from a payment and its owner's profile.

    The PAID stamp follows the stored status, not the sign of the balance.
    """
    currency = normalize_currency(user.get("currency"))
    amount = float(payment["amount"])
    paid = float(payment.get("paidAmount") or 0)
    balance = balance_of(payment)
    due = parse_date(payment["dueDate"])
    is_paid = payment.get("status") == "paid"

    return Invoice(
        number=invoice_number(payment["id"]),
        issued_on=(today or date.today()).strftime("%B %d, %Y"),
        due_date=due.strftime("%B %d, %Y"),
        period=due.strftime("%B %Y"),
        company_name=user.get("companyName") or DEFAULT_COMPANY_NAME,
        business_address=user.get("businessAddress") or DEFAULT_BUSINESS_ADDRESS,
        business_email=user.get("businessEmail") or user.get("email"),
        tenant_name=payment.get("tenantName") or "Unknown",
        property_name=payment.get("propertyName") or "Unknown",
        currency=currency,
        amount=amount,
        paid_amount=paid,
        balance=balance,
        amount_display=format_currency(amount, currency),
        paid_display=format_currency(paid, currency),
        balance_display=format_currency(balance, currency),
        balance_tone=balance_tone(balance),
        status=payment.get("status") or "pending",
        is_paid=is_paid,
        show_paid_stamp=is_paid,
        reference=payment.get("reference"),
    )
