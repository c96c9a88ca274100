# rentflow/schemas.py
"""Request bodies.

Wire keys are camelCase aliases of the model attribute names, so a parsed
body can be handed straight to the SQLAlchemy model. Validation failures
become one ValidationError whose `details` maps wire key -> message.
"""
import datetime as dt
import re
from typing import ClassVar, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .errors import ValidationError
from .models import (
    CATEGORIES,
    EXPENSE_FREQUENCIES,
    MAINTENANCE_STATUSES,
    PAYMENT_METHODS,
    PRIORITIES,
    PROPERTY_TYPES,
    TENANT_STATUSES,
)
from .utils.currency import CURRENCY_CONFIG

PropertyType = Literal[PROPERTY_TYPES]
TenantStatus = Literal[TENANT_STATUSES]
PaymentMethod = Literal[PAYMENT_METHODS]
Category = Literal[CATEGORIES]
Priority = Literal[PRIORITIES]
MaintenanceStatus = Literal[MAINTENANCE_STATUSES]
Frequency = Literal[EXPENSE_FREQUENCIES]
Currency = Literal[tuple(CURRENCY_CONFIG)]


def _message(err) -> str:
    kind, ctx = err["type"], err.get("ctx") or {}
    if kind == "value_error":
        return str(ctx["error"]) if "error" in ctx else err["msg"]
    if kind == "missing" or err.get("input") is None or kind == "string_too_short":
        return "is required"
    if kind == "greater_than":
        return f"must be greater than {ctx['gt']}"
    if kind == "greater_than_equal":
        return f"must be at least {ctx['ge']}"
    if kind == "string_too_long":
        return f"must be at most {ctx['max_length']} characters"
    if kind == "literal_error":
        return "must be one of: " + ctx["expected"].replace("'", "").replace(" or ", ", ")
    return err["msg"]


class RequestBody(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    # Used in "Invalid <entity> data"
    entity: ClassVar[str] = "request"

    @classmethod
    def parse(cls, data, existing: Optional[dict] = None) -> dict:
        """Validated model attributes.

        With `existing` (the row's serialized form) the body is a partial
        update: it is validated merged over the stored values, so cross-field
        rules see the whole record, and only the keys it sent are returned.
        """
        if not isinstance(data, dict):
            raise ValidationError(f"Invalid {cls.entity} data", details={"body": "must be a JSON object"})
        merged = data
        if existing is not None:
            shadowed = {f.alias for name, f in cls.model_fields.items() if name in data}
            merged = {**{k: v for k, v in existing.items() if k not in shadowed}, **data}
        try:
            model = cls.model_validate(merged)
        except PydanticValidationError as e:
            details = {}
            for err in e.errors():
                key = ".".join(str(part) for part in err["loc"]) or "body"
                details.setdefault(key, _message(err))
            raise ValidationError(f"Invalid {cls.entity} data", details=details)

        if existing is None:
            return model.model_dump()
        sent = {name for name, f in cls.model_fields.items() if (f.alias or name) in data or name in data}
        return model.model_dump(include=sent)


class PropertyIn(RequestBody):
    entity: ClassVar[str] = "property"

    name: str = Field(min_length=1, max_length=200)
    address: str = Field(min_length=1, max_length=512)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=50)
    zip_code: str = Field(min_length=1, max_length=20)
    type: PropertyType
    units: int = Field(ge=1)
    occupied_units: int = Field(0, ge=0)
    monthly_rent: float = Field(gt=0)
    image_url: Optional[str] = None

    @field_validator("occupied_units")
    @classmethod
    def _fits_units(cls, v, info: ValidationInfo):
        units = info.data.get("units")
        if units is not None and v > units:
            raise ValueError("cannot exceed units")
        return v


class TenantIn(RequestBody):
    entity: ClassVar[str] = "tenant"

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(min_length=1, max_length=30)
    property_id: str = Field(min_length=1)
    unit: Optional[str] = None
    lease_start: dt.date
    lease_end: dt.date
    rent_amount: float = Field(gt=0)
    status: TenantStatus = "active"

    @field_validator("email")
    @classmethod
    def _lower(cls, v):
        return v.lower()

    @field_validator("lease_end")
    @classmethod
    def _after_start(cls, v, info: ValidationInfo):
        start = info.data.get("lease_start")
        if start and v < start:
            raise ValueError("must be on or after leaseStart")
        return v


class PaymentIn(RequestBody):
    """`status` is derived from the balance and never read from the body."""

    entity: ClassVar[str] = "payment"

    tenant_id: str = Field(min_length=1)
    property_id: str = Field(min_length=1)
    amount: float = Field(gt=0)
    paid_amount: float = Field(0.0, ge=0)
    due_date: dt.date
    paid_date: Optional[dt.date] = None
    method: Optional[PaymentMethod] = None
    reference: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None

    @field_validator("paid_amount", mode="before")
    @classmethod
    def _unpaid(cls, v):
        return 0.0 if v is None else v


class TransactionIn(RequestBody):
    entity: ClassVar[str] = "transaction"

    amount: float = Field(gt=0)
    date: dt.date = Field(default_factory=dt.date.today)
    method: Optional[PaymentMethod] = None
    reference: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None


class MaintenanceIn(RequestBody):
    entity: ClassVar[str] = "maintenance request"

    property_id: str = Field(min_length=1)
    tenant_id: Optional[str] = None
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    category: Category
    priority: Priority = "medium"
    status: MaintenanceStatus = "new"
    assigned_to: Optional[str] = Field(None, max_length=200)


class ExpenseIn(RequestBody):
    entity: ClassVar[str] = "expense"

    property_id: Optional[str] = None
    title: str = Field(min_length=1, max_length=200)
    category: str = Field(min_length=1, max_length=80)
    amount: float = Field(gt=0)
    paid_amount: float = Field(0.0, ge=0)
    is_recurring: bool = False
    frequency: Optional[Frequency] = Field(None, validate_default=True)
    due_date: dt.date
    paid_date: Optional[dt.date] = None
    expiry_date: Optional[dt.date] = None
    payment_method: Optional[PaymentMethod] = None
    reference: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None

    @field_validator("paid_amount", mode="before")
    @classmethod
    def _unpaid(cls, v):
        return 0.0 if v is None else v

    @field_validator("frequency")
    @classmethod
    def _recurring_needs_frequency(cls, v, info: ValidationInfo):
        if info.data.get("is_recurring") and not v:
            raise ValueError("is required for recurring expenses")
        return v


def password_problem(password):
    """None if acceptable, else a message."""
    if len(password) < 8:
        return "must be at least 8 characters"
    if not re.search(r"[A-Z]", password):
        return "must contain an uppercase letter"
    if not re.search(r"[a-z]", password):
        return "must contain a lowercase letter"
    if not re.search(r"\d", password):
        return "must contain a number"
    return None


class SignupIn(RequestBody):
    model_config = ConfigDict(str_strip_whitespace=False)
    entity: ClassVar[str] = "signup"

    username: str = Field(min_length=1, max_length=80)
    email: EmailStr
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Literal["landlord", "tenant"] = "landlord"

    @field_validator("username", "first_name", "last_name")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def _lower(cls, v):
        return v.lower()

    @field_validator("password")
    @classmethod
    def _strong(cls, v):
        problem = password_problem(v)
        if problem:
            raise ValueError(problem)
        return v


class ProfileIn(RequestBody):
    entity: ClassVar[str] = "profile"

    username: str = Field(min_length=1, max_length=80)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=20)
    profile_photo_url: Optional[str] = None
    company_name: Optional[str] = Field(None, max_length=200)
    business_email: Optional[EmailStr] = None
    business_address: Optional[str] = Field(None, max_length=500)
    currency: Optional[Currency] = None

    @field_validator("currency", mode="before")
    @classmethod
    def _upper(cls, v):
        return v.upper() if isinstance(v, str) else v


class InviteAcceptIn(RequestBody):
    entity: ClassVar[str] = "invite"

    invite_code: str = Field(min_length=1)
