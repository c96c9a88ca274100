# rentflow/routes/tenants.py
from flask import Blueprint, current_app, jsonify, request

from ..extensions import db
from ..models import Property, Tenant
from ..schemas import TenantIn
from ..security import current_user_id, roles_required

bp = Blueprint("tenants", __name__)


def _property(user_id, property_id):
    # Tenants may point at a property that has since been removed
    return Property.for_user(user_id).filter_by(id=property_id).first()


@bp.get("/tenants")
@roles_required("landlord")
def list_tenants():
    uid = current_user_id()
    query = Tenant.for_user(uid)
    status = request.args.get("status")
    if status:
        query = query.filter(Tenant.status == status)
    property_id = request.args.get("propertyId")
    if property_id:
        query = query.filter(Tenant.property_id == property_id)

    names = Property.names_for_user(uid)
    items = query.order_by(Tenant.last_name, Tenant.first_name).all()
    return jsonify([t.serialize(names.get(t.property_id, "Unknown")) for t in items]), 200


@bp.get("/tenants/<tenant_id>")
@roles_required("landlord")
def get_tenant(tenant_id):
    uid = current_user_id()
    tenant = Tenant.get_for_user(tenant_id, uid)
    prop = _property(uid, tenant.property_id)
    return jsonify(tenant.serialize(prop.name if prop else "Unknown")), 200


@bp.post("/tenants")
@roles_required("landlord")
def create_tenant():
    uid = current_user_id()
    values = TenantIn.parse(request.get_json(silent=True) or {})
    tenant = Tenant(user_id=uid, **values)
    db.session.add(tenant)
    prop = _property(uid, tenant.property_id)
    if prop:
        prop.occupy()
    db.session.commit()
    return jsonify(tenant.serialize(prop.name if prop else "Unknown")), 201


@bp.patch("/tenants/<tenant_id>")
@roles_required("landlord")
def update_tenant(tenant_id):
    uid = current_user_id()
    tenant = Tenant.get_for_user(tenant_id, uid)
    values = TenantIn.parse(request.get_json(silent=True) or {}, existing=tenant.serialize())

    new_property = values.get("property_id")
    if new_property and new_property != tenant.property_id:
        old = _property(uid, tenant.property_id)
        if old:
            old.vacate()
        moved_to = _property(uid, new_property)
        if moved_to:
            moved_to.occupy()

    tenant.apply(values)
    db.session.commit()
    prop = _property(uid, tenant.property_id)
    return jsonify(tenant.serialize(prop.name if prop else "Unknown")), 200


@bp.post("/tenants/<tenant_id>/invite")
@roles_required("landlord")
def invite_tenant(tenant_id):
    """Issue a one-time code the tenant redeems from their own account."""
    tenant = Tenant.get_for_user(tenant_id, current_user_id())
    code = tenant.issue_invite()
    db.session.commit()
    current_app.logger.info("Issued portal invite for tenant %s", tenant.id)
    return jsonify({
        "tenantId": tenant.id,
        "inviteCode": code,
        "expiresAt": tenant.invite_expires_at.isoformat(),
    }), 201


@bp.delete("/tenants/<tenant_id>")
@roles_required("landlord")
def delete_tenant(tenant_id):
    uid = current_user_id()
    tenant = Tenant.get_for_user(tenant_id, uid)
    prop = _property(uid, tenant.property_id)
    if prop:
        prop.vacate()
    db.session.delete(tenant)
    db.session.commit()
    return ("", 204)
