from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, ValidationError
from .pagination import Page

logger = logging.getLogger(__name__)


def to_jsonable(value: Any) -> Any:
    """Convert domain values (dataclasses, Decimal, dates, enums) into JSON types."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in value]
    return value


def ok(data: Any = None, *, message: Optional[str] = None, status: int = 200):
    body: dict = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = to_jsonable(data)
    return jsonify(body), status


def ok_page(page: Page, serialize=to_jsonable):
    return ok({"data": [serialize(i) for i in page.items], "pagination": page.pagination()})


def fail(message: str, *, status: int, code: Optional[str] = None, **extra):
    body: dict = {"success": False, "message": message}
    if code:
        body["code"] = code
    body.update(to_jsonable(extra))
    return jsonify(body), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return fail(e.message, status=e.status_code, code=e.code, **e.extra())

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500, code=e.name.upper().replace(" ", "_"))

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error")
        if bool(app.config.get("DEBUG", False)):
            return fail(f"Internal server error: {e}", status=500, code="INTERNAL_ERROR")
        return fail("Internal server error", status=500, code="INTERNAL_ERROR")


def json_body() -> dict:
    """The request's JSON object; anything else is a validation error."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def parse_bool_arg(value: Optional[str]) -> Optional[bool]:
    if value is None or value == "":
        return None
    return str(value).strip().lower() in {"1", "true", "yes"}
