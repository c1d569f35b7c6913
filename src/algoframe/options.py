"""Typed algorithm options: definitions, validation, and resolution.

Every algorithm declares an options schema, a mapping from option name to
:class:`OptionDefinition`. Callers hand in a plain mapping of overrides and
:func:`resolve_options` turns it into a complete, validated options dict.
Any failure raises :class:`~algoframe.errors.OptionValidationError` naming
the offending option and the violated constraint.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
import math
import numbers
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from algoframe.errors import ConfigError, OptionValidationError

OptionType = Literal["number", "integer", "boolean", "string", "select", "nodeId"]

logger = logging.getLogger(__name__)


class SelectOption(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    value: Union[bool, int, float, str]
    label: str = ""


class OptionDefinition(BaseModel):
    """Declaration of a single configurable algorithm parameter."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: OptionType
    default: Any = None
    label: str = ""
    description: str = ""
    required: bool = False
    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None
    step: Optional[Union[int, float]] = None
    options: Optional[list[SelectOption]] = None
    advanced: bool = False
    group: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump()
        return {
            key: value
            for key, value in data.items()
            if value is not None or key == "default"
        }


OptionsSchema = dict[str, OptionDefinition]


def _format_bound(value: Union[int, float]) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value)


def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _select_matches(candidate: Any, value: Any) -> bool:
    # 1 == True in Python; booleans only match booleans.
    if isinstance(candidate, bool) != isinstance(value, bool):
        return False
    return candidate == value


def _validate_number(name: str, value: Any, definition: OptionDefinition) -> Any:
    if not _is_real(value):
        raise OptionValidationError(name, "must be a number")
    # Integers stay exact; float() overflows past ~1e308.
    if isinstance(value, numbers.Integral):
        if definition.type == "integer":
            value = int(value)
    else:
        try:
            value_f = float(value)
        except OverflowError:
            raise OptionValidationError(name, "must be finite") from None
        if math.isnan(value_f):
            raise OptionValidationError(name, "must not be NaN")
        if math.isinf(value_f):
            raise OptionValidationError(name, "must be finite")
        if definition.type == "integer":
            if not value_f.is_integer():
                raise OptionValidationError(name, "must be an integer")
            value = int(value_f)
    if definition.min is not None and value < definition.min:
        raise OptionValidationError(name, f"must be >= {_format_bound(definition.min)}")
    if definition.max is not None and value > definition.max:
        raise OptionValidationError(name, f"must be <= {_format_bound(definition.max)}")
    return value


def validate_option(name: str, value: Any, definition: OptionDefinition) -> Any:
    """Validate ``value`` against ``definition`` and return the accepted value.

    Integer options come back as ``int`` even when given an integral float.
    """
    if value is None:
        if definition.required:
            raise OptionValidationError(name, "is required")
        return None

    kind = definition.type
    if kind in ("number", "integer"):
        return _validate_number(name, value, definition)
    if kind == "boolean":
        if not isinstance(value, bool):
            raise OptionValidationError(name, "must be a boolean")
        return value
    if kind == "string":
        if not isinstance(value, str):
            raise OptionValidationError(name, "must be a string")
        return value
    if kind == "select":
        if not definition.options:
            raise OptionValidationError(name, "has no options defined")
        allowed = [option.value for option in definition.options]
        if not any(_select_matches(candidate, value) for candidate in allowed):
            choices = ", ".join(repr(candidate) for candidate in allowed)
            raise OptionValidationError(name, f"must be one of: {choices}")
        return value
    if kind == "nodeId":
        if isinstance(value, str) or _is_real(value):
            return value
        raise OptionValidationError(name, "must be a string or number")
    raise OptionValidationError(name, f"has unknown option type {kind!r}")


def define_option(**fields: Any) -> OptionDefinition:
    try:
        definition = OptionDefinition(**fields)
    except PydanticValidationError as exc:
        raise ConfigError(f"Invalid option definition: {exc}") from exc
    if (
        definition.min is not None
        and definition.max is not None
        and definition.min > definition.max
    ):
        raise ConfigError(
            f"Invalid option definition: min {definition.min} exceeds max {definition.max}."
        )
    return definition


def define_options_schema(
    entries: Optional[Mapping[str, Union[OptionDefinition, Mapping[str, Any]]]] = None,
) -> OptionsSchema:
    """Build an options schema from definitions or plain mappings."""
    schema: OptionsSchema = {}
    for name, entry in (entries or {}).items():
        if not isinstance(name, str) or not name:
            raise ConfigError("Option names must be non-empty strings.")
        if isinstance(entry, OptionDefinition):
            schema[name] = entry
        elif isinstance(entry, Mapping):
            try:
                schema[name] = define_option(**entry)
            except ConfigError as exc:
                raise ConfigError(
                    f"Invalid definition for option {name!r}: {exc}",
                    context={"option": name},
                ) from exc
        else:
            raise ConfigError(
                f"Option {name!r} must be an OptionDefinition or mapping, "
                f"got {type(entry).__name__}."
            )
    return schema


def resolve_options(
    schema: Mapping[str, OptionDefinition],
    provided: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Merge ``provided`` over the schema defaults and validate every value."""
    provided = dict(provided or {})
    unknown = sorted(str(key) for key in provided if key not in schema)
    if unknown:
        logger.warning("Ignoring unknown options: %s", ", ".join(unknown))

    resolved: dict[str, Any] = {}
    for name, definition in schema.items():
        value = provided.get(name)
        if value is None:
            value = definition.default
        resolved[name] = validate_option(name, value, definition)
    return resolved


def schema_defaults(schema: Mapping[str, OptionDefinition]) -> dict[str, Any]:
    return {name: definition.default for name, definition in schema.items()}


def describe_options_schema(
    schema: Mapping[str, OptionDefinition],
) -> dict[str, dict[str, Any]]:
    return {name: definition.to_dict() for name, definition in schema.items()}


__all__ = [
    "OptionType",
    "SelectOption",
    "OptionDefinition",
    "OptionsSchema",
    "validate_option",
    "define_option",
    "define_options_schema",
    "resolve_options",
    "schema_defaults",
    "describe_options_schema",
]
