# rentflow/errors.py
from flask import jsonify, request
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    """An error that maps directly onto a JSON error response."""

    status_code = 400

    def __init__(self, message, status_code=None, details=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_dict(self):
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(ApiError):
    """Raised by schema parsing; `details` maps field name -> message."""

    status_code = 400


class NotFound(ApiError):
    status_code = 404


class Conflict(ApiError):
    status_code = 409


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def api_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(PydanticValidationError)
    def invalid_model(e):
        details = {".".join(str(p) for p in err["loc"]) or "body": err["msg"] for err in e.errors()}
        return jsonify(error="Invalid request data", details=details), 400

    @app.errorhandler(400)
    def bad_request(e):
        msg = getattr(e, "description", "Bad Request")
        return jsonify(error="Bad Request", message=msg), 400

    @app.errorhandler(401)
    def unauthorized(e):
        return jsonify(error="Authentication required"), 401

    @app.errorhandler(403)
    def forbidden(e):
        return jsonify(error="Forbidden"), 403

    @app.errorhandler(404)
    def not_found(e):
        return jsonify(error="Not Found", path=request.path), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify(error="Method Not Allowed"), 405

    @app.errorhandler(500)
    def server_error(e):
        return jsonify(error="Internal Server Error"), 500

    @app.errorhandler(Exception)
    def unhandled(e):
        if isinstance(e, HTTPException):
            return e
        app.logger.exception("Unhandled exception on %s %s: %s", request.method, request.path, e)
        return jsonify(error="Internal Server Error"), 500
