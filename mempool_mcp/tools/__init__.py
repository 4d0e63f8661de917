"""LLM-facing tool definitions."""

from .mining import MINING_TOOLS, ToolDefinition
from .validators import ParamSpec, ToolValidationError, validate_arguments
from . import validators

__all__ = [
    "MINING_TOOLS",
    "ToolDefinition",
    "ParamSpec",
    "ToolValidationError",
    "validate_arguments",
    "validators",
]
