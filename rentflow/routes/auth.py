# rentflow/routes/auth.py
from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token, create_refresh_token, jwt_required

from ..errors import Conflict, ValidationError
from ..extensions import db
from ..models import User
from ..schemas import ProfileIn, SignupIn
from ..security import current_user, token_claims

bp = Blueprint("auth", __name__)


def _issue_tokens(user, remember=False):
    expires = current_app.config["JWT_REMEMBER_ME_EXPIRES"] if remember else None
    access = create_access_token(
        identity=str(user.id),
        additional_claims=token_claims(user),
        expires_delta=expires,
    )
    refresh = create_refresh_token(identity=str(user.id))
    return {"user": user.serialize(), "accessToken": access, "refreshToken": refresh}


@bp.post("/auth/signup")
def signup():
    values = SignupIn.parse(request.get_json(silent=True) or {})
    if User.query.filter_by(email=values["email"]).first():
        raise Conflict("User with this email already exists")
    if User.query.filter_by(username=values["username"]).first():
        raise Conflict("Username is already taken")

    password = values.pop("password")
    user = User(currency=current_app.config["DEFAULT_CURRENCY"], **values)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    current_app.logger.info("New %s account %s", user.role, user.id)
    return jsonify(_issue_tokens(user)), 201


@bp.post("/auth/login")
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    if not email or not password:
        details = {k: "is required" for k, v in (("email", email), ("password", password)) if not v}
        raise ValidationError("Email and password are required", details=details)

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        current_app.logger.info("Failed login for %s", email)
        return jsonify({"error": "Invalid email or password"}), 401

    return jsonify(_issue_tokens(user, remember=bool(data.get("rememberMe")))), 200


@bp.post("/auth/refresh")
@jwt_required(refresh=True)
def refresh():
    user = current_user()
    access = create_access_token(identity=str(user.id), additional_claims=token_claims(user))
    return jsonify({"accessToken": access}), 200


@bp.get("/auth/me")
@jwt_required()
def me():
    return jsonify({"user": current_user().serialize()}), 200


@bp.patch("/auth/profile")
@jwt_required()
def update_profile():
    user = current_user()
    values = ProfileIn.parse(request.get_json(silent=True) or {}, existing=user.serialize())
    username = values.get("username")
    if username and username != user.username and User.query.filter_by(username=username).first():
        raise Conflict("Username is already taken")
    for key, value in values.items():
        setattr(user, key, value)
    db.session.commit()
    return jsonify({"user": user.serialize()}), 200
