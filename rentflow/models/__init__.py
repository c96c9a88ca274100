from rentflow.extensions import db

# Core Models
from .user import User
from .property import Property, PROPERTY_TYPES
from .tenant import Tenant, TENANT_STATUSES
from .payment import Payment, PaymentHistory, PAYMENT_METHODS, PAYMENT_STATUSES, derive_status
from .maintenance import MaintenanceRequest, CATEGORIES, MAINTENANCE_STATUSES, PRIORITIES
from .expense import Expense, EXPENSE_FREQUENCIES

# Tables scoped by user_id, in dependency order
OWNED_TABLES = ("properties", "tenants", "payments", "maintenance_requests", "expenses")
