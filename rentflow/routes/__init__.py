from . import auth, dashboard, expenses, health, maintenance, payments, properties, tenant_portal, tenants

# Registered under /api by the application factory
BLUEPRINTS = (
    health.bp,
    auth.bp,
    dashboard.bp,
    properties.bp,
    tenants.bp,
    payments.bp,
    maintenance.bp,
    expenses.bp,
    tenant_portal.bp,
)
