# rentflow/routes/tenant_portal.py
from flask import Blueprint, current_app, jsonify, request

from ..errors import Conflict, NotFound
from ..extensions import db
from ..models import MaintenanceRequest, Payment, Property, Tenant
from ..schemas import InviteAcceptIn
from ..security import current_user_id, roles_required

bp = Blueprint("tenant_portal", __name__)


def _tenant_for_login():
    """Tenant record the signed-in account was linked to through an invite."""
    tenant = (
        Tenant.query.filter(Tenant.account_user_id == current_user_id())
        .order_by(Tenant.lease_start.desc())
        .first()
    )
    if tenant is None:
        raise NotFound("Tenant profile not found")
    return tenant


@bp.post("/tenant/link")
@roles_required("tenant")
def link():
    values = InviteAcceptIn.parse(request.get_json(silent=True) or {})
    tenant = Tenant.query.filter_by(invite_code=values["invite_code"]).first()
    if tenant is None:
        raise NotFound("Invite not found")
    if not tenant.invite_is_valid():
        raise Conflict("Invite has expired")
    tenant.link_account(current_user_id())
    db.session.commit()
    current_app.logger.info("Linked account %s to tenant %s", tenant.account_user_id, tenant.id)
    return jsonify(tenant.serialize()), 200


@bp.get("/tenant/me")
@roles_required("tenant")
def me():
    return jsonify(_tenant_for_login().serialize()), 200


@bp.get("/tenant/dashboard")
@roles_required("tenant")
def dashboard():
    tenant = _tenant_for_login()
    Payment.sync_overdue(tenant.user_id)
    prop = Property.query.filter_by(id=tenant.property_id, user_id=tenant.user_id).first()
    property_name = prop.name if prop else "Unknown"

    payments = (
        Payment.query.filter_by(tenant_id=tenant.id, user_id=tenant.user_id)
        .order_by(Payment.due_date.asc())
        .all()
    )
    maintenance = (
        MaintenanceRequest.query.filter_by(tenant_id=tenant.id, user_id=tenant.user_id)
        .order_by(MaintenanceRequest.created_at.desc())
        .all()
    )
    next_payment = next((p for p in payments if p.status in ("pending", "overdue")), None)

    return jsonify({
        "tenant": tenant.serialize(property_name),
        "property": prop.serialize() if prop else None,
        "payments": [p.serialize(tenant.full_name, property_name) for p in payments],
        "maintenance": [m.serialize(property_name, tenant.full_name) for m in maintenance],
        "nextPayment": (
            next_payment.serialize(tenant.full_name, property_name) if next_payment else None
        ),
    }), 200
