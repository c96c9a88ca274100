from datetime import datetime

from ..extensions import db
from .base import OwnedMixin, iso, new_id
from .payment import DueStatusMixin

EXPENSE_FREQUENCIES = ("monthly", "quarterly", "yearly")


class Expense(db.Model, OwnedMixin, DueStatusMixin):
    __tablename__ = "expenses"
    label = "Expense"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    property_id = db.Column(
        db.String(36), db.ForeignKey("properties.id", ondelete="CASCADE"), nullable=True, index=True
    )

    title = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(80), nullable=False)
    amount = db.Column(db.Float, nullable=False)
    paid_amount = db.Column(db.Float, nullable=False, default=0)

    is_recurring = db.Column(db.Boolean, nullable=False, default=False)
    frequency = db.Column(db.String(20), nullable=True)  # monthly, quarterly, yearly

    due_date = db.Column(db.Date, nullable=False, index=True)
    paid_date = db.Column(db.Date, nullable=True)
    expiry_date = db.Column(db.Date, nullable=True)

    status = db.Column(db.String(20), nullable=False, default="pending", index=True)
    payment_method = db.Column(db.String(30), nullable=True)
    reference = db.Column(db.String(100), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Expense {self.id}: {self.title} {self.amount}>"

    def serialize(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "propertyId": self.property_id,
            "title": self.title,
            "category": self.category,
            "amount": self.amount,
            "paidAmount": self.paid_amount,
            "isRecurring": self.is_recurring,
            "frequency": self.frequency,
            "dueDate": iso(self.due_date),
            "paidDate": iso(self.paid_date),
            "expiryDate": iso(self.expiry_date),
            "status": self.status,
            "paymentMethod": self.payment_method,
            "reference": self.reference,
            "notes": self.notes,
            "createdAt": iso(self.created_at),
        }
