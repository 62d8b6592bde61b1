from __future__ import annotations
from typing import Any

RawRecord = dict[str, Any]


def to_records(payload: Any) -> list[Any]:
    # KeyCRM endpoints disagree on the envelope: bare list, {"data": [...]} or {"items": [...]}
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("data", "items"):
            value = payload.get(key)
            if value is not None:
                return value if isinstance(value, list) else []
    return []


def ensure_list(value: Any) -> list[Any]:
    if isinstance(value, list):
        return [v for v in value if v]
    if value:
        return [value]
    return []
