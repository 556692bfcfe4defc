from __future__ import annotations

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, ValidationError
from ..core.logging import get_logger

log = get_logger(__name__)


def register_error_handlers(app: Flask) -> None:
    """Map domain exceptions to JSON error bodies."""

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        body = {"message": e.message or e.__class__.__name__}
        if isinstance(e, ValidationError):
            if e.field:
                body["field"] = e.field
            if e.errors:
                body["errors"] = e.errors
        if e.status_code >= 500:
            log.error("%s: %s", e.__class__.__name__, e.message, exc_info=e.__cause__)
        return jsonify(body), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"message": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        log.exception("unhandled error")
        if app.config.get("DEBUG"):
            return jsonify({"message": f"Internal server error: {e}"}), 500
        return jsonify({"message": "Internal server error"}), 500
