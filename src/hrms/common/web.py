from __future__ import annotations

from datetime import date
from typing import Any, Optional

from flask import jsonify, request

from ..core.exceptions import ValidationError
from .codec import to_json
from .datetime_utils import parse_iso_date


def request_data() -> dict:
    """JSON body if there is one, otherwise the submitted form."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def date_field(data: dict, key: str, label: str, *, required: bool = True) -> Optional[date]:
    raw = (data.get(key) or "").strip() if isinstance(data.get(key), str) else data.get(key)
    if not raw:
        if required:
            raise ValidationError(f"{label} is required")
        return None
    try:
        return parse_iso_date(str(raw)[:10])
    except ValueError:
        raise ValidationError(f"{label} must be a date (YYYY-MM-DD)")


def json_response(payload: Any = None, *, message: Optional[str] = None, status: int = 200):
    body: dict = {}
    if message:
        body["message"] = message
    if payload is not None:
        body["data"] = to_json(payload)
    return jsonify(body), status
