from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..core.enums import Status
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

_ID_RE = re.compile(r"^[0-9]+$")


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Any, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_id(value: Any, field_name: str) -> int:
    """Coerce a positive integer identifier; fractional or non-numeric values are rejected."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a positive integer")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float) and value.is_integer():
        parsed = int(value)
    elif isinstance(value, str) and _ID_RE.match(value.strip()):
        parsed = int(value.strip())
    else:
        raise ValidationError(f"{field_name} must be a positive integer")
    if parsed <= 0:
        raise ValidationError(f"{field_name} must be a positive integer")
    return parsed


def optional_id(value: Any, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    return require_id(value, field_name)


def require_status(value: Any) -> Status:
    if isinstance(value, bool):
        return Status.ACTIVE if value else Status.INACTIVE
    try:
        return Status(int(value))
    except (TypeError, ValueError):
        raise ValidationError("status must be 0 or 1")


def require_decimal(value: Any, field_name: str) -> Decimal:
    if value is None or isinstance(value, bool) or value == "":
        raise ValidationError(f"{field_name} is required")
    try:
        # str() first so floats keep their printed value instead of binary noise.
        parsed = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not parsed.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    return parsed


def require_report_date(value: Any) -> str:
    """Validate a YYYY-MM-DD day and return it in canonical form."""
    text = require_non_empty(value, "date")
    try:
        return parse_iso_date(text).isoformat()
    except ValueError:
        raise ValidationError("invalid date format")


def normalize_id_list(value: Any, field_name: str) -> str:
    """Normalize a comma-separated id list (informational fields only)."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        tokens = [str(v) for v in value]
    elif isinstance(value, str):
        tokens = value.split(",")
    else:
        raise ValidationError(f"{field_name} must be a comma-separated list")
    out = []
    for token in tokens:
        token = token.strip()
        if not token:
            continue
        if not token.isdigit():
            raise ValidationError(f"{field_name} must contain integer ids")
        out.append(str(int(token)))
    return ",".join(out)
