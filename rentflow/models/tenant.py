import uuid
from datetime import date, datetime, timedelta

from ..extensions import db
from .base import OwnedMixin, iso, new_id

TENANT_STATUSES = ("active", "pending", "ended")
INVITE_DAYS = 7


class Tenant(db.Model, OwnedMixin):
    __tablename__ = "tenants"
    label = "Tenant"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Personal Information
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)
    phone = db.Column(db.String(30), nullable=False)

    # Not a foreign key: the property may be deleted independently
    property_id = db.Column(db.String(36), nullable=False, index=True)
    unit = db.Column(db.String(50), nullable=True)

    # Lease Terms
    lease_start = db.Column(db.Date, nullable=False)
    lease_end = db.Column(db.Date, nullable=False)
    rent_amount = db.Column(db.Float, nullable=False)
    status = db.Column(db.String(20), nullable=False, default="active")  # active, pending, ended

    # Tenant-role account allowed into the portal for this record, set by redeeming an invite
    account_user_id = db.Column(
        db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    invite_code = db.Column(db.String(36), unique=True, nullable=True, index=True)
    invite_expires_at = db.Column(db.DateTime, nullable=True)

    def __repr__(self):
        return f"<Tenant {self.id}: {self.first_name} {self.last_name}>"

    def issue_invite(self):
        self.invite_code = str(uuid.uuid4())
        self.invite_expires_at = datetime.utcnow() + timedelta(days=INVITE_DAYS)
        return self.invite_code

    def invite_is_valid(self):
        return bool(self.invite_code) and datetime.utcnow() < self.invite_expires_at

    def link_account(self, user_id):
        self.account_user_id = user_id
        self.invite_code = None
        self.invite_expires_at = None

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def days_until_expiration(self, today=None):
        """Days until the lease ends; negative once it has ended."""
        today = today or date.today()
        return (self.lease_end - today).days

    @classmethod
    def expiring(cls, user_id, within_days=60, limit=5, today=None):
        """Active leases ending within `within_days`, soonest first."""
        horizon = (today or date.today()) + timedelta(days=within_days)
        return (
            cls.for_user(user_id)
            .filter(cls.status == "active", cls.lease_end <= horizon)
            .order_by(cls.lease_end.asc())
            .limit(limit)
            .all()
        )

    @classmethod
    def names_for_user(cls, user_id):
        rows = (
            db.session.query(cls.id, cls.first_name, cls.last_name)
            .filter(cls.user_id == user_id)
            .all()
        )
        return {row.id: f"{row.first_name} {row.last_name}" for row in rows}

    def serialize(self, property_name=None):
        data = {
            "id": self.id,
            "userId": self.user_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "propertyId": self.property_id,
            "unit": self.unit,
            "leaseStart": iso(self.lease_start),
            "leaseEnd": iso(self.lease_end),
            "rentAmount": self.rent_amount,
            "status": self.status,
            "hasAccount": self.account_user_id is not None,
        }
        if property_name is not None:
            data["propertyName"] = property_name
        return data
