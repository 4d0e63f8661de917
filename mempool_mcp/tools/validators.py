"""Parameter schemas and argument validation for mempool MCP tools."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple
from urllib.parse import quote

_MISSING = object()


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        # JSON numbers such as 7.3e5 decode to float.
        return value.is_integer()
    return isinstance(value, int)


JSON_TYPE_CHECKS = {
    "string": lambda value: isinstance(value, str),
    "integer": _is_integer,
}


class ToolValidationError(ValueError):
    """Raised when tool arguments do not match the declared parameters."""


@dataclass(frozen=True, slots=True)
class ParamSpec:
    name: str
    types: Tuple[str, ...]
    description: str
    required: bool = False
    default: Any = None

    def json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"description": self.description}
        if len(self.types) == 1:
            schema["type"] = self.types[0]
        else:
            schema["anyOf"] = [{"type": json_type} for json_type in self.types]
        if self.default is not None:
            schema["default"] = self.default
        return schema


def build_input_schema(params: Sequence[ParamSpec]) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {spec.name: spec.json_schema() for spec in params},
        "required": [spec.name for spec in params if spec.required],
        "additionalProperties": False,
    }


def validate_arguments(params: Sequence[ParamSpec], raw: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Check ``raw`` against ``params`` and return the validated arguments.

    Defaults are applied for missing optional fields and unknown keys are
    dropped. ``None`` counts as missing.

    Raises:
        ToolValidationError: on a missing required field or a wrong type.
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ToolValidationError("arguments must be an object")

    validated: Dict[str, Any] = {}
    for spec in params:
        value = raw.get(spec.name, _MISSING)
        if value is _MISSING or value is None:
            if spec.required:
                raise ToolValidationError(f"'{spec.name}' is required")
            if spec.default is not None:
                validated[spec.name] = spec.default
            continue
        if not any(JSON_TYPE_CHECKS[json_type](value) for json_type in spec.types):
            expected = " or ".join(spec.types)
            raise ToolValidationError(f"'{spec.name}' must be {expected}")
        if isinstance(value, float) and "integer" in spec.types:
            value = int(value)
        validated[spec.name] = value
    return validated


def path_segment(value: Any) -> str:
    """Percent-encode a value for use as a single URL path segment."""
    return quote(str(value), safe="")
