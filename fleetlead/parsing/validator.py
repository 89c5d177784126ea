"""Coerces the raw parsed JSON into a ParsedCompany.

Missing or null fields become blank rather than failing the photo; values of
the wrong shape are rejected.
"""

from typing import Any

from fleetlead.parsing.exceptions import ParsingValidationError
from fleetlead.parsing.models import ParsedCompany

_TEXT_FIELDS = ("name", "email", "phone", "city", "state", "website")
_MAX_INDUSTRIES = 20


def validate_and_build(data: dict[str, Any]) -> ParsedCompany:
    """Validate raw parsed JSON and build a ParsedCompany.

    Raises:
        ParsingValidationError: when a field has an unusable type.
    """
    values = {name: _text(data.get(name), name) for name in _TEXT_FIELDS}
    return ParsedCompany(industry=_industries(data.get("industry")), **values)


def _text(raw: Any, field: str) -> str:
    if raw is None:
        return ""
    if isinstance(raw, bool):
        raise ParsingValidationError(f"'{field}' must be a string")
    if isinstance(raw, (int, float)):
        return str(int(raw)) if float(raw).is_integer() else str(raw)
    if isinstance(raw, list):
        # Some models answer with a list when several values are visible.
        first = next((item for item in raw if isinstance(item, str) and item.strip()), "")
        return first.strip()
    if not isinstance(raw, str):
        raise ParsingValidationError(f"'{field}' must be a string")
    return raw.strip()


def _industries(raw: Any) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        raise ParsingValidationError("'industry' must be a list of strings")
    result: list[str] = []
    for item in raw:
        if not isinstance(item, str):
            raise ParsingValidationError("'industry' must be a list of strings")
        value = item.strip()
        if value and value not in result:
            result.append(value)
    return result[:_MAX_INDUSTRIES]
