# rentflow/routes/maintenance.py
from flask import Blueprint, jsonify, request

from ..extensions import db
from ..models import MaintenanceRequest, Property, Tenant
from ..schemas import MaintenanceIn
from ..security import current_user_id, roles_required

bp = Blueprint("maintenance", __name__)


def _serialize(requests_, user_id):
    properties = Property.names_for_user(user_id)
    tenants = Tenant.names_for_user(user_id)
    return [
        r.serialize(
            property_name=properties.get(r.property_id, "Unknown"),
            tenant_name=tenants.get(r.tenant_id) if r.tenant_id else None,
        )
        for r in requests_
    ]


@bp.get("/maintenance")
@roles_required("landlord")
def list_requests():
    uid = current_user_id()
    query = MaintenanceRequest.for_user(uid)
    for arg, column in (("status", MaintenanceRequest.status), ("priority", MaintenanceRequest.priority),
                        ("propertyId", MaintenanceRequest.property_id)):
        value = request.args.get(arg)
        if value:
            query = query.filter(column == value)
    items = query.order_by(MaintenanceRequest.created_at.desc()).all()
    return jsonify(_serialize(items, uid)), 200


@bp.get("/maintenance/<request_id>")
@roles_required("landlord")
def get_request(request_id):
    uid = current_user_id()
    return jsonify(_serialize([MaintenanceRequest.get_for_user(request_id, uid)], uid)[0]), 200


@bp.post("/maintenance")
@roles_required("landlord")
def create_request():
    uid = current_user_id()
    values = MaintenanceIn.parse(request.get_json(silent=True) or {})
    status = values.pop("status")
    item = MaintenanceRequest(user_id=uid, status="new", **values)
    item.set_status(status)
    db.session.add(item)
    db.session.commit()
    return jsonify(_serialize([item], uid)[0]), 201


@bp.patch("/maintenance/<request_id>")
@roles_required("landlord")
def update_request(request_id):
    uid = current_user_id()
    item = MaintenanceRequest.get_for_user(request_id, uid)
    values = MaintenanceIn.parse(request.get_json(silent=True) or {}, existing=item.serialize())
    if "status" in values:
        item.set_status(values.pop("status"))
    item.apply(values)
    db.session.commit()
    return jsonify(_serialize([item], uid)[0]), 200


@bp.delete("/maintenance/<request_id>")
@roles_required("landlord")
def delete_request(request_id):
    item = MaintenanceRequest.get_for_user(request_id, current_user_id())
    db.session.delete(item)
    db.session.commit()
    return ("", 204)
