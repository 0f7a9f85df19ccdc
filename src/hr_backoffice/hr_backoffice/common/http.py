"""JSON helpers shared by the feature controllers."""

from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request

from ..core.exceptions import ConfigurationError, ConflictError, DomainError, StoreError, ValidationError

logger = logging.getLogger(__name__)

_STATUS = {
    ValidationError: 400,
    ConfigurationError: 400,
    ConflictError: 409,
}


def error_response(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_endpoint(view):
    """Map domain errors to HTTP codes; store and unexpected errors stay generic."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except StoreError:
            logger.exception("Store failure in %s", view.__name__)
            return error_response("Internal error, please retry later", 500)
        except DomainError as e:
            for kind, status in _STATUS.items():
                if isinstance(e, kind):
                    return error_response(str(e), status)
            logger.exception("Unhandled domain error in %s", view.__name__)
            return error_response("Internal error, please retry later", 500)
        except Exception:
            logger.exception("Unexpected failure in %s", view.__name__)
            return error_response("Internal error, please retry later", 500)

    return wrapper


def read_json() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_int(data: dict, key: str) -> int:
    value = data.get(key)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be an integer")


def ok(payload=None, status: int = 200):
    body = {"success": True}
    if payload is not None:
        body["data"] = payload
    return jsonify(body), status
