from datetime import datetime, timezone

from flask import Blueprint, Flask, current_app, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException, InternalServerError, RequestEntityTooLarge

from extensions import db, upload_storage
from forms import FILE_TOO_LARGE_MESSAGE, DeclarationForm
from services.declarations import (
    DeclarationStoreError,
    create_declarations,
    list_declarations,
)
from services.responses import (
    error_response,
    not_found_error,
    server_error,
    success_response,
    validation_error,
)

bp = Blueprint("api", __name__, url_prefix="/api")


@bp.route("/health")
def health():
    return success_response(
        {"timestamp": datetime.now(timezone.utc).isoformat()},
        message="AI Guidebook System API is running",
    )


@bp.route("/declarations", methods=["GET"])
def declarations_index():
    try:
        rows = list_declarations()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("Error fetching declarations")
        return server_error("Failed to fetch declarations", exc)
    return success_response({"count": len(rows), "data": [row.to_dict() for row in rows]})


@bp.route("/declarations", methods=["POST"])
def declarations_create():
    form = DeclarationForm()
    if not form.validate_on_submit():
        return validation_error(form.first_error())

    try:
        result = create_declarations(form.to_submission(), upload_storage.get())
    except DeclarationStoreError as exc:
        current_app.logger.error(
            "Declaration insert failed: %d written, %d failed", len(exc.created), exc.failed
        )
        return server_error("Failed to create declaration", exc.cause)

    return success_response(message=result.message, status=201)


def _is_api_request() -> bool:
    return request.path == bp.url_prefix or request.path.startswith(bp.url_prefix + "/")


def register_error_handlers(app: Flask) -> None:
    """JSON errors for anything under /api; other paths keep Flask's pages."""

    @app.errorhandler(RequestEntityTooLarge)
    def request_too_large(exc):
        if not _is_api_request():
            return exc
        return validation_error(FILE_TOO_LARGE_MESSAGE)

    @app.errorhandler(404)
    def not_found(exc):
        if not _is_api_request():
            return exc
        return not_found_error()

    @app.errorhandler(Exception)
    def unhandled(exc):
        if isinstance(exc, HTTPException):
            if not _is_api_request():
                return exc
            return error_response(exc.description or exc.name, exc.code or 500)
        current_app.logger.exception("Server error")
        if not _is_api_request():
            return InternalServerError(original_exception=exc)
        return server_error(error=exc)
