# rentflow/security.py
from functools import wraps

from flask import jsonify
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from .errors import ApiError
from .extensions import db, jwt
from .models import User


def roles_required(*allowed):
    """Usage: @roles_required("landlord")"""
    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            role = get_jwt().get("role")
            if role not in allowed:
                return jsonify({"error": "You don't have permission to perform this action."}), 403
            return fn(*args, **kwargs)
        return wrapper
    return deco


def current_user_id() -> str:
    """Id of the authenticated user; every owned row is scoped by it."""
    return get_jwt_identity()


def token_claims(user) -> dict:
    return {"email": user.email, "role": user.role}


@jwt.unauthorized_loader
def _missing_token(reason):
    return jsonify({"error": "No authorization header", "message": reason}), 401


@jwt.invalid_token_loader
def _invalid_token(reason):
    return jsonify({"error": "Invalid token", "message": reason}), 401


@jwt.expired_token_loader
def _expired_token(_header, _payload):
    return jsonify({"error": "Token has expired"}), 401


@jwt.revoked_token_loader
def _revoked_token(_header, _payload):
    return jsonify({"error": "Token has been revoked"}), 401


def current_user():
    """The User row behind the access token; 401 if it no longer exists."""
    user = db.session.get(User, current_user_id())
    if user is None:
        raise ApiError("User not found", status_code=401)
    return user
