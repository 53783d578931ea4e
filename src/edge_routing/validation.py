"""
Input validation for edge routing MCP server tool parameters.

Provides reusable validators that produce clear error messages for all
parameters received from tool callers, and convert loosely-typed JSON
values into the geometry model types.
"""

from __future__ import annotations

import math
from typing import Any

from edge_routing.models import Point, PortSide, Rect, Size


# ---------------------------------------------------------------------------
# Validation result
# ---------------------------------------------------------------------------

class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


# ---------------------------------------------------------------------------
# Primitive validators
# ---------------------------------------------------------------------------

def validate_non_empty_string(value: Any, field_name: str) -> str:
    """Ensure *value* is a non-empty string after stripping whitespace."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{field_name}' must be a non-empty string.")
    return value.strip()


def validate_number(
    value: Any,
    field_name: str,
    *,
    min_val: float | None = None,
    max_val: float | None = None,
) -> float:
    """Validate a finite numeric value and optional range."""
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise ValidationError(
            f"'{field_name}' must be a number, got {type(value).__name__}."
        )
    val = float(value)
    if not math.isfinite(val):
        raise ValidationError(f"'{field_name}' must be finite, got {val}.")
    if min_val is not None and val < min_val:
        raise ValidationError(
            f"'{field_name}' must be >= {min_val}, got {val}."
        )
    if max_val is not None and val > max_val:
        raise ValidationError(
            f"'{field_name}' must be <= {max_val}, got {val}."
        )
    return val


def validate_bool(value: Any, field_name: str) -> bool:
    """Ensure *value* is a boolean."""
    if not isinstance(value, bool):
        raise ValidationError(
            f"'{field_name}' must be a boolean, got {type(value).__name__}."
        )
    return value


def validate_enum(value: Any, field_name: str, allowed: set[str]) -> str:
    """Validate that a string value is one of the allowed choices (case-insensitive)."""
    if not isinstance(value, str):
        raise ValidationError(
            f"'{field_name}' must be a string, got {type(value).__name__}."
        )
    normalized = value.strip().upper()
    if normalized not in {a.upper() for a in allowed}:
        choices = ", ".join(sorted(allowed))
        raise ValidationError(
            f"'{field_name}' must be one of [{choices}], got '{value}'."
        )
    return normalized


def validate_list(value: Any, field_name: str, *, min_length: int = 0) -> list:
    """Ensure *value* is a list with at least *min_length* items."""
    if not isinstance(value, list):
        raise ValidationError(
            f"'{field_name}' must be a list, got {type(value).__name__}."
        )
    if len(value) < min_length:
        raise ValidationError(
            f"'{field_name}' must have at least {min_length} item(s), got {len(value)}."
        )
    return value


def validate_positive_number(value: Any, field_name: str) -> float:
    """Validate that a number is positive (> 0)."""
    val = validate_number(value, field_name)
    if val <= 0:
        raise ValidationError(f"'{field_name}' must be > 0, got {val}.")
    return val


def validate_non_negative_number(value: Any, field_name: str) -> float:
    """Validate that a number is >= 0."""
    return validate_number(value, field_name, min_val=0)


# ---------------------------------------------------------------------------
# Geometry validators
# ---------------------------------------------------------------------------

_VALID_SIDES = {side.value.upper() for side in PortSide}
_VALID_DIRECTIONS = {"TB", "BT", "LR", "RL"}


def validate_side(value: Any, field_name: str) -> PortSide:
    """Validate a port side (top, bottom, left, right)."""
    return PortSide(validate_enum(value, field_name, _VALID_SIDES).lower())


def validate_direction(value: Any) -> str:
    """Validate a layout direction (TB, BT, LR, RL)."""
    return validate_enum(value, "direction", _VALID_DIRECTIONS)


def _pair(value: Any, field_name: str, keys: tuple[str, str]) -> tuple[float, float]:
    """Accept ``[a, b]`` or ``{"<k0>": a, "<k1>": b}``."""
    if isinstance(value, dict):
        missing = [k for k in keys if k not in value]
        if missing:
            raise ValidationError(f"'{field_name}' missing required key '{missing[0]}'.")
        a, b = value[keys[0]], value[keys[1]]
    elif isinstance(value, (list, tuple)) and len(value) == 2:
        a, b = value
    else:
        raise ValidationError(
            f"'{field_name}' must be [{keys[0]}, {keys[1]}] or an object with "
            f"'{keys[0]}' and '{keys[1]}'."
        )
    return (
        validate_number(a, f"{field_name}.{keys[0]}"),
        validate_number(b, f"{field_name}.{keys[1]}"),
    )


def validate_point(value: Any, field_name: str) -> Point:
    """Validate a point given as ``[x, y]`` or ``{"x": .., "y": ..}``."""
    x, y = _pair(value, field_name, ("x", "y"))
    return Point(x, y)


def validate_size(value: Any, field_name: str) -> Size:
    """Validate a node size; zero is allowed, negative is not."""
    width, height = _pair(value, field_name, ("width", "height"))
    if width < 0 or height < 0:
        raise ValidationError(f"'{field_name}' must not be negative, got {width}x{height}.")
    return Size(width, height)


def validate_rect(value: Any, index: int) -> Rect:
    """Validate an obstacle given as ``[x, y, w, h]`` or an object."""
    field_name = f"obstacles[{index}]"
    keys = ("x", "y", "width", "height")
    if isinstance(value, dict):
        for k in keys:
            if k not in value:
                raise ValidationError(f"Obstacle at index {index} missing required key '{k}'.")
        raw = [value[k] for k in keys]
    elif isinstance(value, (list, tuple)) and len(value) == 4:
        raw = list(value)
    else:
        raise ValidationError(
            f"Obstacle at index {index} must be [x, y, width, height] or an object."
        )
    x, y, width, height = (validate_number(v, f"{field_name}.{k}") for k, v in zip(keys, raw))
    if width < 0 or height < 0:
        raise ValidationError(f"Obstacle at index {index}: size must not be negative.")
    return Rect(x, y, width, height)


# ---------------------------------------------------------------------------
# Graph dict validators
# ---------------------------------------------------------------------------

def validate_node_dict(n: Any, index: int) -> None:
    """Validate a single node dict from the nodes list."""
    if not isinstance(n, dict):
        raise ValidationError(f"Node at index {index} must be a dict/object.")
    for key in ("id", "x", "y"):
        if key not in n:
            raise ValidationError(f"Node at index {index} missing required key '{key}'.")
    if not isinstance(n["id"], str) or not n["id"].strip():
        raise ValidationError(f"Node at index {index}: 'id' must be a non-empty string.")
    for key in ("x", "y"):
        if not isinstance(n[key], (int, float)) or isinstance(n[key], bool):
            raise ValidationError(f"Node at index {index}: '{key}' must be a number.")
    for key in ("width", "height"):
        if key in n:
            if not isinstance(n[key], (int, float)) or isinstance(n[key], bool):
                raise ValidationError(f"Node at index {index}: '{key}' must be a number.")
            if n[key] < 0:
                raise ValidationError(f"Node at index {index}: '{key}' must be >= 0.")


def validate_edge_dict(e: Any, index: int) -> None:
    """Validate a single edge dict from the edges list."""
    if not isinstance(e, dict):
        raise ValidationError(f"Edge at index {index} must be a dict/object.")
    if "source_id" not in e:
        raise ValidationError(f"Edge at index {index} missing required key 'source_id'.")
    if "target_id" not in e:
        raise ValidationError(f"Edge at index {index} missing required key 'target_id'.")
    if not isinstance(e["source_id"], str) or not e["source_id"].strip():
        raise ValidationError(f"Edge at index {index}: 'source_id' must be a non-empty string.")
    if not isinstance(e["target_id"], str) or not e["target_id"].strip():
        raise ValidationError(f"Edge at index {index}: 'target_id' must be a non-empty string.")
    if "id" in e and not isinstance(e["id"], str):
        raise ValidationError(f"Edge at index {index}: 'id' must be a string.")
    for key in ("source_side", "target_side"):
        if key in e:
            validate_side(e[key], f"edges[{index}].{key}")
