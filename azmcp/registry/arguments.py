"""
Argument definitions and binding for registered operations.

An operation declares an ordered tuple of ArgumentDefinition values. Groups
contribute shared fragments (subscription, resource group, user, ...) that
are merged into every descendant operation when it is registered, so the
shared fields are validated identically everywhere they appear.

Binding turns raw name/value pairs (CLI flags or MCP tool arguments) into an
immutable pydantic model and reports every missing or invalid argument in a
single pass.
"""

import logging
from dataclasses import dataclass, field, replace
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, create_model

logger = logging.getLogger(__name__)

JSONSchema = Dict[str, Any]

_JSON_TYPES = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
}


@dataclass(frozen=True)
class ArgumentDefinition:
    """A named argument accepted by an operation.

    The public name is hyphenated ("resource-group") and maps 1:1 to the
    CLI flag ``--resource-group`` and to the MCP input-schema property.
    """
    name: str
    description: str
    required: bool = False
    default: Any = None
    value_type: type = str

    @property
    def attribute_name(self) -> str:
        """Attribute on the bound model ("resource-group" -> "resource_group")."""
        return self.name.replace("-", "_")

    def as_required(self) -> "ArgumentDefinition":
        return replace(self, required=True)

    def json_schema(self) -> JSONSchema:
        schema: JSONSchema = {
            "type": _JSON_TYPES.get(self.value_type, "string"),
            "description": self.description,
        }
        if self.default is not None:
            schema["default"] = self.default
        return schema


ArgumentSchema = Tuple[ArgumentDefinition, ...]


def merge_arguments(*fragments: Iterable[ArgumentDefinition]) -> ArgumentSchema:
    """
    Merge argument fragments in order.

    A later definition with the same name replaces the earlier one but keeps
    its position, so an operation can tighten a shared argument (e.g. make
    ``server`` required) without reordering the schema.
    """
    merged: Dict[str, ArgumentDefinition] = {}
    for fragment in fragments:
        for definition in fragment:
            merged[definition.name] = definition
    return tuple(merged.values())


def build_input_schema(definitions: Sequence[ArgumentDefinition]) -> JSONSchema:
    """JSON Schema for an MCP tool's input, derived from argument definitions."""
    return {
        "type": "object",
        "properties": {d.name: d.json_schema() for d in definitions},
        "required": [d.name for d in definitions if d.required],
    }


def build_arguments_model(model_name: str, definitions: Sequence[ArgumentDefinition]) -> Type[BaseModel]:
    """Create the immutable pydantic model that bound arguments are stored in."""
    fields: Dict[str, Any] = {}
    for definition in definitions:
        if definition.required:
            fields[definition.attribute_name] = (
                definition.value_type,
                Field(..., alias=definition.name, description=definition.description),
            )
        else:
            fields[definition.attribute_name] = (
                Optional[definition.value_type],
                Field(definition.default, alias=definition.name, description=definition.description),
            )

    return create_model(
        model_name,
        __config__=ConfigDict(frozen=True, populate_by_name=True, extra="ignore"),
        **fields,
    )


@lru_cache(maxsize=None)
def _adapter(value_type: type) -> TypeAdapter:
    return TypeAdapter(value_type)


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


@dataclass
class BindResult:
    """Outcome of binding raw arguments against an operation's schema."""
    arguments: Optional[BaseModel] = None
    missing: List[str] = field(default_factory=list)
    invalid: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.missing and not self.invalid

    @property
    def message(self) -> Optional[str]:
        """Caller-facing description naming every offending argument."""
        parts = []
        if self.missing:
            parts.append(f"Missing required arguments: {', '.join(self.missing)}")
        if self.invalid:
            details = ', '.join(f"{name} ({reason})" for name, reason in self.invalid.items())
            parts.append(f"Invalid arguments: {details}")
        if not parts:
            return None
        return '. '.join(parts) + '.'


def bind_arguments(
    definitions: Sequence[ArgumentDefinition],
    raw: Optional[Mapping[str, Any]],
    model: Optional[Type[BaseModel]] = None,
) -> BindResult:
    """
    Bind raw invocation arguments.

    Args:
        definitions: Ordered argument definitions of the operation
        raw: Raw name -> value pairs; hyphenated or snake_case names accepted
        model: Pre-built arguments model (built on the fly when omitted)

    Returns:
        BindResult holding the bound model, or every missing/invalid argument
    """
    raw = raw or {}
    result = BindResult()
    values: Dict[str, Any] = {}

    for definition in definitions:
        value = raw.get(definition.name, raw.get(definition.attribute_name))

        if _is_empty(value):
            if definition.required:
                result.missing.append(definition.name)
                continue
            value = definition.default

        if value is None:
            continue

        try:
            values[definition.name] = _adapter(definition.value_type).validate_python(value)
        except ValidationError as e:
            result.invalid[definition.name] = e.errors()[0]["msg"]

    known = {d.name for d in definitions} | {d.attribute_name for d in definitions}
    unknown = [key for key in raw if key not in known]
    if unknown:
        logger.debug(f"Ignoring unknown arguments: {', '.join(unknown)}")

    if not result.is_valid:
        return result

    if model is None:
        model = build_arguments_model("Arguments", definitions)

    result.arguments = model.model_validate(values)
    return result
