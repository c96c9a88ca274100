# rentflow/routes/dashboard.py
from datetime import date, datetime, time

from flask import Blueprint, current_app, jsonify
from sqlalchemy import func

from ..extensions import db
from ..models import Expense, MaintenanceRequest, Payment, Property, Tenant
from ..notifications import build_feed
from ..security import current_user, current_user_id, roles_required
from ..utils.currency import format_currency
from ..utils.dates import last_months, month_range
from .payments import serialize_with_names

bp = Blueprint("dashboard", __name__)

REVENUE_MONTHS = 6
ACTIVITY_LIMIT = 10


def _count(model, user_id, *criteria):
    return (
        db.session.query(func.count(model.id))
        .filter(model.user_id == user_id, *criteria)
        .scalar()
        or 0
    )


def _paid_between(model, user_id, start, end):
    return (
        db.session.query(func.coalesce(func.sum(model.paid_amount), 0.0))
        .filter(model.user_id == user_id, model.paid_date >= start, model.paid_date < end)
        .scalar()
        or 0.0
    )


def compute_metrics(user_id, today=None):
    Payment.sync_overdue(user_id, today)
    properties = Property.for_user(user_id).all()
    total_units = sum(p.units for p in properties)
    occupied = sum(p.occupied_units for p in properties)
    start, end = month_range((today or date.today()).replace(day=1))
    return {
        "totalProperties": len(properties),
        "totalUnits": total_units,
        "occupiedUnits": occupied,
        "occupancyRate": (occupied / total_units) * 100 if total_units else 0,
        "monthlyRevenue": sum(p.monthly_rent * p.occupied_units for p in properties),
        "pendingPayments": _count(Payment, user_id, Payment.status == "pending"),
        "overduePayments": _count(Payment, user_id, Payment.status == "overdue"),
        "openMaintenanceRequests": _count(
            MaintenanceRequest, user_id, MaintenanceRequest.status != "completed"
        ),
        "totalExpenses": _paid_between(Expense, user_id, start, end),
    }


def compute_revenue(user_id, today=None):
    rows = []
    for first in last_months(REVENUE_MONTHS, today):
        start, end = month_range(first)
        rows.append({
            "month": first.strftime("%b"),
            "revenue": _paid_between(Payment, user_id, start, end),
            "expenses": _paid_between(Expense, user_id, start, end),
        })
    return rows


def _at(value):
    return value if isinstance(value, datetime) else datetime.combine(value, time.min)


def recent_activities(user_id, currency=None, limit=ACTIVITY_LIMIT):
    """Newest-first events from paid rent, maintenance and lease starts."""
    tenants = Tenant.names_for_user(user_id)
    properties = Property.names_for_user(user_id)
    events = []

    paid = (
        Payment.for_user(user_id)
        .filter(Payment.paid_date.isnot(None), Payment.paid_amount > 0)
        .order_by(Payment.paid_date.desc())
        .limit(limit)
    )
    for p in paid:
        who = tenants.get(p.tenant_id, "A tenant")
        events.append({
            "id": f"payment-{p.id}",
            "type": "payment",
            "description": f"{who} paid {format_currency(p.paid_amount, currency)} "
                           f"for {p.due_date.strftime('%B')} rent",
            "timestamp": _at(p.paid_date),
            "tenantId": p.tenant_id,
            "propertyId": p.property_id,
        })

    for m in MaintenanceRequest.for_user(user_id).order_by(MaintenanceRequest.created_at.desc()).limit(limit):
        events.append({
            "id": f"maintenance-{m.id}",
            "type": "maintenance",
            "description": f"New maintenance request: {m.title}",
            "timestamp": m.created_at,
            "propertyId": m.property_id,
        })
        if m.completed_at:
            where = properties.get(m.property_id, "a property")
            events.append({
                "id": f"maintenance-{m.id}-completed",
                "type": "maintenance",
                "description": f"{m.title} completed at {where}",
                "timestamp": m.completed_at,
                "propertyId": m.property_id,
            })

    for t in Tenant.for_user(user_id).order_by(Tenant.lease_start.desc()).limit(limit):
        events.append({
            "id": f"lease-{t.id}",
            "type": "lease",
            "description": f"{t.full_name}'s lease started at {properties.get(t.property_id, 'a property')}",
            "timestamp": _at(t.lease_start),
            "tenantId": t.id,
            "propertyId": t.property_id,
        })

    events.sort(key=lambda e: e["timestamp"], reverse=True)
    for e in events:
        e["timestamp"] = e["timestamp"].isoformat()
    return events[:limit]


def upcoming_payments(user_id, limit):
    Payment.sync_overdue(user_id)
    items = (
        Payment.for_user(user_id)
        .filter(Payment.status.in_(("pending", "overdue")))
        .order_by(Payment.due_date.asc())
        .limit(limit)
        .all()
    )
    return serialize_with_names(items, user_id)


def expiring_leases(user_id, within_days):
    names = Property.names_for_user(user_id)
    items = Tenant.expiring(user_id, within_days=within_days, limit=5)
    return [t.serialize(names.get(t.property_id, "Unknown")) for t in items]


@bp.get("/dashboard/metrics")
@roles_required("landlord")
def metrics():
    return jsonify(compute_metrics(current_user_id())), 200


@bp.get("/dashboard/revenue")
@roles_required("landlord")
def revenue():
    return jsonify(compute_revenue(current_user_id())), 200


@bp.get("/dashboard/activities")
@roles_required("landlord")
def activities():
    return jsonify(recent_activities(current_user_id(), current_user().currency)), 200


@bp.get("/dashboard/upcoming-payments")
@roles_required("landlord")
def upcoming():
    limit = current_app.config["UPCOMING_PAYMENTS_LIMIT"]
    return jsonify(upcoming_payments(current_user_id(), limit)), 200


@bp.get("/dashboard/expiring-leases")
@roles_required("landlord")
def expiring():
    days = current_app.config["EXPIRING_LEASE_DAYS"]
    return jsonify(expiring_leases(current_user_id(), days)), 200


@bp.get("/dashboard/notifications")
@roles_required("landlord")
def notifications():
    uid = current_user_id()
    feed = build_feed(
        upcoming_payments(uid, current_app.config["UPCOMING_PAYMENTS_LIMIT"]),
        expiring_leases(uid, current_app.config["EXPIRING_LEASE_DAYS"]),
    )
    return jsonify(feed.to_dict()), 200
