from datetime import date, datetime

from ..extensions import db
from .base import OwnedMixin, iso, new_id

PAYMENT_STATUSES = ("paid", "pending", "overdue")
PAYMENT_METHODS = ("bank_transfer", "check", "cash", "online", "mpesa", "card")


def derive_status(amount, paid_amount, due_date, today=None):
    """Status is a function of the balance and the due date, never set directly.

    paid    -> nothing left to pay (overpayment included)
    overdue -> money still owed and the due date has passed
    pending -> money still owed, not yet due
    """
    if (paid_amount or 0) >= amount:
        return "paid"
    if due_date < (today or date.today()):
        return "overdue"
    return "pending"


class DueStatusMixin:
    """`status` column kept in step with amount, paid_amount and due_date."""

    def refresh_status(self, today=None):
        """Recompute status from balance and due date; returns True if it changed."""
        status = derive_status(self.amount, self.paid_amount, self.due_date, today)
        changed = status != self.status
        self.status = status
        return changed

    @classmethod
    def sync_overdue(cls, user_id=None, today=None):
        """Flip unpaid rows whose due date has passed since they were written.

        Reads call this before trusting the stored column. Returns the row count.
        """
        query = cls.query.filter(cls.status == "pending", cls.due_date < (today or date.today()))
        if user_id is not None:
            query = query.filter(cls.user_id == user_id)
        count = query.update({"status": "overdue"}, synchronize_session="fetch")
        if count:
            db.session.commit()
        return count


class Payment(db.Model, OwnedMixin, DueStatusMixin):
    __tablename__ = "payments"
    label = "Payment"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    tenant_id = db.Column(db.String(36), nullable=False, index=True)
    property_id = db.Column(db.String(36), nullable=False, index=True)

    amount = db.Column(db.Float, nullable=False)
    paid_amount = db.Column(db.Float, nullable=False, default=0)
    due_date = db.Column(db.Date, nullable=False)
    paid_date = db.Column(db.Date, nullable=True)

    # Status tracking
    status = db.Column(db.String(20), nullable=False, default="pending", index=True)  # paid, pending, overdue
    method = db.Column(db.String(30), nullable=True)  # bank_transfer, check, cash, online, mpesa, card
    reference = db.Column(db.String(100), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    history = db.relationship(
        "PaymentHistory",
        backref="payment",
        lazy="dynamic",
        cascade="all, delete-orphan",
        order_by="[PaymentHistory.date, PaymentHistory.created_at]",
    )

    def __repr__(self):
        return f"<Payment {self.id}: {self.amount} - {self.status}>"

    @property
    def balance(self):
        return self.amount - (self.paid_amount or 0)

    @property
    def has_transactions(self):
        return self.history.count() > 0

    def record_transaction(self, entry):
        """Attach a PaymentHistory row and roll its totals up into this payment."""
        self.history.append(entry)
        db.session.flush()
        self.paid_amount = sum(h.amount for h in self.history)
        self.paid_date = entry.date
        if entry.method:
            self.method = entry.method
        if entry.reference:
            self.reference = entry.reference
        self.refresh_status()

    def open_balance(self, amount, on=None, method=None, reference=None):
        """An amount already paid when the payment is written becomes its first transaction."""
        db.session.flush()
        self.record_transaction(PaymentHistory(
            amount=amount, date=on or date.today(), method=method, reference=reference,
            notes="Opening balance",
        ))

    def serialize(self, tenant_name=None, property_name=None):
        data = {
            "id": self.id,
            "userId": self.user_id,
            "tenantId": self.tenant_id,
            "propertyId": self.property_id,
            "amount": self.amount,
            "paidAmount": self.paid_amount,
            "balance": self.balance,
            "dueDate": iso(self.due_date),
            "paidDate": iso(self.paid_date),
            "status": self.status,
            "method": self.method,
            "reference": self.reference,
            "notes": self.notes,
        }
        if tenant_name is not None:
            data["tenantName"] = tenant_name
        if property_name is not None:
            data["propertyName"] = property_name
        return data


class PaymentHistory(db.Model):
    __tablename__ = "payment_history"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    payment_id = db.Column(
        db.String(36), db.ForeignKey("payments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    amount = db.Column(db.Float, nullable=False)
    date = db.Column(db.Date, nullable=False, default=date.today)
    method = db.Column(db.String(30), nullable=True)
    reference = db.Column(db.String(100), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def serialize(self):
        return {
            "id": self.id,
            "paymentId": self.payment_id,
            "amount": self.amount,
            "date": iso(self.date),
            "method": self.method,
            "reference": self.reference,
            "notes": self.notes,
            "createdAt": iso(self.created_at),
        }
