"""Named value transforms referenced from the resource-type tables.

Each transform takes the raw value pulled out of an API record and returns
the value to render. ``None`` always passes through untouched so a missing
field stays absent.
"""

import json
from collections.abc import Mapping
from typing import Any, Callable, Dict

from ..errors import UnsupportedValueError


def _integer(value: Any) -> Any:
    if value is None or isinstance(value, bool):
        return value
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise UnsupportedValueError(value, reason="not an integer") from e


def _lowercase(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def _strip_trailing_dot(value: Any) -> Any:
    return value.rstrip(".") if isinstance(value, str) else value


def _omit_empty(value: Any) -> Any:
    # "" is a real value everywhere else; only tables that opt in drop it.
    if isinstance(value, (str, list, tuple, Mapping)) and len(value) == 0:
        return None
    return value


def _omit_zero(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0:
        return None
    return value


def _sorted(value: Any) -> Any:
    if isinstance(value, list):
        return sorted(value, key=lambda v: json.dumps(v, sort_keys=True))
    return value


def _id_value_map(value: Any) -> Any:
    # [{"id": "ssl", "value": "full"}] -> {"ssl": "full"}; an entry with no value is a flag.
    if not isinstance(value, list):
        return value
    return {
        item["id"]: item.get("value", True)
        for item in value
        if isinstance(item, Mapping) and isinstance(item.get("id"), str)
    }


TRANSFORMS: Dict[str, Callable[[Any], Any]] = {
    "integer": _integer,
    "lowercase": _lowercase,
    "strip_trailing_dot": _strip_trailing_dot,
    "omit_empty": _omit_empty,
    "omit_zero": _omit_zero,
    "sorted": _sorted,
    "id_value_map": _id_value_map,
}


def apply_transforms(spec: str, value: Any) -> Any:
    """Apply a ``|``-separated chain of transforms left to right."""
    for name in spec.split("|"):
        value = TRANSFORMS[name.strip()](value)
    return value
