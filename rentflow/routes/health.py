# rentflow/routes/health.py
import os
from datetime import datetime

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text

from ..config import REQUIRED_SETTINGS
from ..extensions import db

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    return jsonify(
        {
            "status": "ok",
            "time": datetime.utcnow().isoformat() + "Z",
            "service": "rentflow",
        }
    ), 200


@bp.get("/diagnostic")
def diagnostic():
    """Which settings are present and whether the database answers."""
    env = {name: bool(os.getenv(name)) for name in REQUIRED_SETTINGS + ("JWT_SECRET_KEY",)}
    try:
        db.session.execute(text("SELECT 1"))
        database = {"connected": True}
    except Exception as e:
        current_app.logger.warning("Database check failed: %s", e)
        db.session.rollback()
        database = {"connected": False, "error": str(e)}
    status = "ok" if database["connected"] else "degraded"
    return jsonify({"status": status, "environment": env, "database": database}), 200
