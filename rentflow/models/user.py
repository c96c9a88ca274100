from werkzeug.security import check_password_hash, generate_password_hash

from ..extensions import db
from .base import TimestampMixin, iso, new_id


class User(db.Model, TimestampMixin):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    # Basic Information
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    first_name = db.Column(db.String(100), nullable=True)
    last_name = db.Column(db.String(100), nullable=True)
    phone = db.Column(db.String(20), nullable=True)
    profile_photo_url = db.Column(db.String(500), nullable=True)

    # Authentication
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="landlord")  # landlord, tenant

    # Business profile, printed on invoices
    company_name = db.Column(db.String(200), nullable=True)
    business_email = db.Column(db.String(255), nullable=True)
    business_address = db.Column(db.String(500), nullable=True)
    currency = db.Column(db.String(3), nullable=True)

    properties = db.relationship("Property", backref="owner", lazy="dynamic", cascade="all, delete-orphan")
    tenants = db.relationship(
        "Tenant", backref="owner", lazy="dynamic", cascade="all, delete-orphan", foreign_keys="Tenant.user_id"
    )
    payments = db.relationship("Payment", backref="owner", lazy="dynamic", cascade="all, delete-orphan")
    maintenance_requests = db.relationship(
        "MaintenanceRequest", backref="owner", lazy="dynamic", cascade="all, delete-orphan"
    )
    expenses = db.relationship("Expense", backref="owner", lazy="dynamic", cascade="all, delete-orphan")

    def set_password(self, password: str) -> None:
        """Hashes and stores the user's password."""
        self.password_hash = generate_password_hash(password, method="pbkdf2:sha256")

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    @property
    def full_name(self) -> str:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name or self.last_name or self.username

    def serialize(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "phone": self.phone,
            "profilePhotoUrl": self.profile_photo_url,
            "companyName": self.company_name,
            "businessEmail": self.business_email,
            "businessAddress": self.business_address,
            "currency": self.currency,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role!r}>"
