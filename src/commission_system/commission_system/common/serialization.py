from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from ..access.scope import Scope
from .pagination import Page

# Never published in API responses.
_HIDDEN_FIELDS = {"password_hash"}


def _decimal_json(value: Decimal) -> Any:
    # Numbers stay numbers while a float holds them exactly; larger totals go out as text.
    as_float = float(value)
    if Decimal(repr(as_float)) == value:
        return as_float
    return str(value)


def to_json(value: Any) -> Any:
    """Convert domain objects (dataclasses, enums, decimals) into JSON-ready data."""
    if isinstance(value, Scope):
        return value.encode()
    if isinstance(value, Page):
        return {
            "items": [to_json(v) for v in value.items],
            "total": value.total,
            "page": value.page,
            "page_size": value.page_size,
        }
    if is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: to_json(getattr(value, f.name))
            for f in fields(value)
            if f.name not in _HIDDEN_FIELDS
        }
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return _decimal_json(value)
    if isinstance(value, datetime):
        return value.isoformat(sep=" ", timespec="seconds")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (frozenset, set)):
        return sorted(to_json(v) for v in value)
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value
