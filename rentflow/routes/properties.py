# rentflow/routes/properties.py
from flask import Blueprint, current_app, jsonify, request

from ..extensions import db
from ..models import Property
from ..schemas import PropertyIn
from ..security import current_user_id, roles_required

bp = Blueprint("properties", __name__)


@bp.get("/properties")
@roles_required("landlord")
def list_properties():
    items = Property.for_user(current_user_id()).order_by(Property.name).all()
    return jsonify([p.serialize() for p in items]), 200


@bp.get("/properties/<property_id>")
@roles_required("landlord")
def get_property(property_id):
    return jsonify(Property.get_for_user(property_id, current_user_id()).serialize()), 200


@bp.post("/properties")
@roles_required("landlord")
def create_property():
    values = PropertyIn.parse(request.get_json(silent=True) or {})
    prop = Property(user_id=current_user_id(), **values)
    db.session.add(prop)
    db.session.commit()
    current_app.logger.info("Created property %s", prop.id)
    return jsonify(prop.serialize()), 201


@bp.patch("/properties/<property_id>")
@roles_required("landlord")
def update_property(property_id):
    prop = Property.get_for_user(property_id, current_user_id())
    prop.apply(PropertyIn.parse(request.get_json(silent=True) or {}, existing=prop.serialize()))
    db.session.commit()
    return jsonify(prop.serialize()), 200


@bp.delete("/properties/<property_id>")
@roles_required("landlord")
def delete_property(property_id):
    prop = Property.get_for_user(property_id, current_user_id())
    db.session.delete(prop)
    db.session.commit()
    return ("", 204)
