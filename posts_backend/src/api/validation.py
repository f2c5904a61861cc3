"""
Translation of pydantic validation errors into rule records.

Clients receive one record per failing field:

    {"field": "title", "rule": "maxLength", "args": {"maxLength": 100},
     "message": "maxLength validation failed"}
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import ErrorRecord, PostValidationError

M = TypeVar("M", bound=BaseModel)

# pydantic error type -> rule name reported to clients
_RULES: Dict[str, str] = {
    "missing": "required",
    "string_type": "string",
    "required": "required",
    "maxLength": "maxLength",
    "json_invalid": "json",
    "model_type": "object",
    "model_attributes_type": "object",
    "dict_type": "object",
}

# Reported for any pydantic error type not listed above
DEFAULT_RULE = "invalid"

# Rules whose ctx is exposed to clients as "args"
_RULES_WITH_ARGS = {"maxLength"}


def _field_name(loc: Iterable[Any], error_type: str) -> str:
    parts = list(loc)
    if parts and parts[0] == "body":
        parts = parts[1:]
    if error_type == "json_invalid" or not parts or not isinstance(parts[0], str):
        return "body"
    return parts[0]


# PUBLIC_INTERFACE
def to_rule_errors(errors: Iterable[Mapping[str, Any]]) -> List[ErrorRecord]:
    """
    Convert pydantic/FastAPI error dicts into rule records.

    Every failing field is reported, in the order pydantic reported them,
    but only its first violation is kept.
    """
    records: List[ErrorRecord] = []
    seen = set()
    for err in errors:
        error_type = str(err.get("type", ""))
        field = _field_name(err.get("loc", ()), error_type)
        if field in seen:
            continue
        seen.add(field)

        rule = _RULES.get(error_type, DEFAULT_RULE)
        record: ErrorRecord = {
            "field": field,
            "rule": rule,
            "message": f"{rule} validation failed",
        }
        if rule in _RULES_WITH_ARGS and err.get("ctx"):
            record["args"] = dict(err["ctx"])
        records.append(record)
    return records


# PUBLIC_INTERFACE
def validate_payload(schema: Type[M], data: Any) -> M:
    """
    Validate ``data`` against ``schema`` outside of a request.

    Returns the parsed model, or raises PostValidationError carrying every
    violation.
    """
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise PostValidationError(to_rule_errors(exc.errors())) from exc
