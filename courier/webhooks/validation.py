"""Input checks shared by the stores and the dispatcher."""

import math
from collections.abc import Iterable
from typing import Any

from courier.webhooks.errors import ValidationError


def require_text(value: Any, field: str) -> str:
    """Return `value` if it is a non-empty string.

    Raises:
        ValidationError: naming `field` when the value is missing,
            empty or not a string
    """
    if value is None or value == "":
        raise ValidationError(f"'{field}' is required", field=field)
    if not isinstance(value, str):
        raise ValidationError(f"'{field}' must be a string", field=field)
    if not value.strip():
        raise ValidationError(f"'{field}' must not be blank", field=field)
    return value


def optional_text(value: Any, field: str) -> str | None:
    """Like require_text, but None means absent. An empty string is invalid, not absent."""
    if value is None:
        return None
    return require_text(value, field)


def require_text_list(values: Iterable[Any] | None, field: str) -> list[str]:
    """Normalize an optional collection of identities to a list of strings.

    None and empty collections both yield an empty list.
    """
    if values is None:
        return []
    if isinstance(values, str):
        raise ValidationError(f"'{field}' must be a list of strings", field=field)
    return [require_text(value, f"{field}[{i}]") for i, value in enumerate(values)]


def require_json_value(value: Any, field: str) -> Any:
    """Return `value` if it is strict JSON that both storage backends accept.

    json.loads lets through NaN, Infinity and unpaired surrogate escapes
    such as "\\ud800"; none of them survive a jsonb column.

    Raises:
        ValidationError: naming `field` on the first offending value
    """
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"'{field}' must not contain NaN or Infinity", field=field)
    if isinstance(value, str):
        if any("\ud800" <= char <= "\udfff" for char in value):
            raise ValidationError(f"'{field}' contains an unpaired surrogate", field=field)
    elif isinstance(value, dict):
        for key, item in value.items():
            require_json_value(key, field)
            require_json_value(item, field)
    elif isinstance(value, (list, tuple)):
        for item in value:
            require_json_value(item, field)
    return value
