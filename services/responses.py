"""JSON envelopes shared by every API endpoint."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import current_app, jsonify


def success_response(payload: Optional[Mapping[str, Any]] = None, message: Optional[str] = None, status: int = 200):
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if payload:
        body.update(payload)
    return jsonify(body), status


def error_response(message: str, status: int = 500, error: Optional[BaseException | str] = None):
    body: dict[str, Any] = {"success": False, "message": message}
    # Error details only leave the server in development
    if error is not None and current_app.config.get("EXPOSE_ERROR_DETAILS"):
        body["error"] = str(error)
    return jsonify(body), status


def validation_error(message: str):
    return error_response(message, 400)


def not_found_error(message: str = "Resource not found"):
    return error_response(message, 404)


def server_error(message: str = "Internal server error", error: Optional[BaseException | str] = None):
    return error_response(message, 500, error)
