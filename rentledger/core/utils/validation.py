"""Request validation helpers shared by the JSON controllers."""

from __future__ import annotations

from typing import Optional, Tuple, Type, TypeVar

from flask import jsonify, request
from pydantic import BaseModel, ValidationError

M = TypeVar("M", bound=BaseModel)


def jsonable_errors(exc: ValidationError) -> list[dict]:
    errors = exc.errors(include_url=False)
    for err in errors:
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        if "input" in err and not isinstance(err["input"], (str, int, float, bool, type(None), dict, list)):
            err["input"] = str(err["input"])
    return errors


def validation_error_response(exc: ValidationError, code: str = "validation_error"):
    return jsonify({"ok": False, "error": code, "details": jsonable_errors(exc)}), 400


def parse_json(schema_cls: Type[M]) -> Tuple[Optional[M], Optional[tuple]]:
    """Validate the JSON body; returns ``(model, None)`` or ``(None, response)``."""
    payload = request.get_json(silent=True) or {}
    try:
        return schema_cls.model_validate(payload), None
    except ValidationError as exc:
        return None, validation_error_response(exc)


def parse_query(schema_cls: Type[M]) -> Tuple[Optional[M], Optional[tuple]]:
    data = {k: v for k, v in request.args.items() if v != ""}
    try:
        return schema_cls.model_validate(data), None
    except ValidationError as exc:
        return None, validation_error_response(exc)
