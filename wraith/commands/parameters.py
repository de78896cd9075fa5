"""
Command parameter definitions.

Parses the inline parameter grammar into ParameterRule objects:

    [-|+] [(type)] name[*|+] [= default ...] [: description]

- `-` marks the parameter optional, `+` is an explicit required marker
- `(type)` declares one of boolean/integer/number/string (or a short form)
- a trailing `*` makes the parameter repeatable, a trailing `+` literal
- `= values` assigns defaults, tokenized with shell-like quoting
- everything after the first unquoted `:` is the description

Structured definitions (plain mappings) are accepted as well.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError

from wraith.commands.tokenize import split_arguments
from wraith.commands.types import ParameterType, convert_type, is_type, resolve_type
from wraith.errors import ParameterParserError


ParameterValue = bool | int | float | str

_TYPE_TAG = re.compile(r"^\(\s*([^()\s]*)\s*\)\s*(.*)$", re.DOTALL)
_NAME = re.compile(r"^(\w+)\s*(?:(\*+)|(\++))?$")
_BARE_TOKEN = re.compile(r"^[\w@%+,./-]+$")


@dataclass(frozen=True)
class ParameterRule:
    """A validated, typed description of one command argument slot."""
    name: str
    type: ParameterType = ParameterType.STRING
    optional: bool = False
    repeatable: bool = False
    literal: bool = False
    default: ParameterValue | list[ParameterValue] | None = None
    description: str | None = None

    @property
    def required(self) -> bool:
        return not self.optional

    def to_definition(self) -> str:
        """Render the canonical definition string for this rule."""
        parts = []
        if self.optional and not self._has_explicit_default():
            parts.append("-")
        parts.append(f"({self.type.value}) {self.name}")
        if self.repeatable:
            parts.append("*")
        elif self.literal:
            parts.append("+")

        if self._has_explicit_default():
            values = self.default if self.repeatable else [self.default]
            parts.append(" = " + " ".join(_quote(_render_value(v)) for v in values))

        if self.description:
            parts.append(f" : {self.description}")

        return "".join(parts)

    def _has_explicit_default(self) -> bool:
        if self.repeatable:
            return bool(self.default)
        return self.default is not None

    def __str__(self) -> str:
        return self.to_definition()


class ParameterDefinition(BaseModel):
    """Structured parameter definition."""
    model_config = ConfigDict(extra="forbid")

    name: str
    description: str | None = None
    optional: bool = False
    type: str = ParameterType.STRING.value
    repeatable: bool = False
    literal: bool = False
    default: Any = None


def _render_value(value: ParameterValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    return str(value)


def _quote(token: str) -> str:
    if _BARE_TOKEN.match(token):
        return token
    return "'" + token.replace("'", "'\"'\"'") + "'"


def _split_description(text: str) -> tuple[str, str | None]:
    """Split at the first colon outside of quotes."""
    quote: str | None = None
    for index, char in enumerate(text):
        if quote:
            if char == quote:
                quote = None
        elif char in ("'", '"'):
            quote = char
        elif char == ":":
            description = text[index + 1:].strip()
            return text[:index].strip(), description or None
    return text, None


def _coerce_defaults(
    values: list[Any],
    kind: ParameterType,
    definition: str,
) -> list[ParameterValue]:
    coerced = []
    for value in values:
        if isinstance(value, str):
            if not is_type(value, kind):
                raise ParameterParserError(
                    f"Given default value '{value}' is not of the correct type "
                    f"'{kind.value}': '{definition}'."
                )
            coerced.append(convert_type(value, kind))
        elif _matches_kind(value, kind):
            coerced.append(value)
        else:
            raise ParameterParserError(
                f"Given default value '{value!r}' is not of the correct type "
                f"'{kind.value}': '{definition}'."
            )
    return coerced


def _matches_kind(value: Any, kind: ParameterType) -> bool:
    if kind is ParameterType.BOOLEAN:
        return isinstance(value, bool)
    if isinstance(value, bool):
        return False
    if kind is ParameterType.INTEGER:
        return isinstance(value, int)
    if kind is ParameterType.NUMBER:
        return isinstance(value, (int, float))
    return False


def parse_parameter(definition: str) -> ParameterRule:
    """
    Parse a single parameter definition string.

    Args:
        definition: The definition, e.g. "-(int) count = 3 : How many".

    Returns:
        The parsed rule.

    Raises:
        ParameterParserError: If the definition is not well-formed.
        TypeError: If the definition is not a string.
    """
    if not isinstance(definition, str):
        raise TypeError("Expected parameter definition to be a string.")

    trimmed = definition.strip()
    if not trimmed:
        raise ParameterParserError("Parameter cannot be empty.")

    body, description = _split_description(trimmed)
    if not body:
        raise ParameterParserError(f"Parameter definition is missing a name: '{definition}'.")

    optional = False
    kind = ParameterType.STRING
    repeatable = False
    literal = False
    default: ParameterValue | list[ParameterValue] | None = None

    temp = body
    if temp.startswith("-"):
        optional = True
        temp = temp.lstrip("- ")
    elif temp.startswith("+"):
        temp = temp.lstrip("+ ")

    matched = _TYPE_TAG.match(temp)
    if matched:
        declared = matched.group(1)
        resolved = resolve_type(declared)
        if resolved is None:
            raise ParameterParserError(
                f"Unrecognized parameter type declaration '{declared}': '{definition}'."
            )
        kind = resolved
        temp = matched.group(2)

    name_part, has_default, default_part = temp.partition("=")
    name_part = name_part.strip()

    matched = _NAME.match(name_part)
    if not matched:
        if not name_part:
            raise ParameterParserError(f"Parameter definition is missing a name: '{definition}'.")
        if " " in name_part:
            raise ParameterParserError(f"Parameter name must not contain spaces: '{definition}'.")
        raise ParameterParserError(f"Invalid parameter name '{name_part}': '{definition}'.")

    name = matched.group(1)
    if matched.group(2):
        repeatable = True
        default = []
    elif matched.group(3):
        if kind is not ParameterType.STRING:
            raise ParameterParserError(
                f"Literals can only be used with string parameters: '{definition}'."
            )
        literal = True

    if has_default:
        if not default_part.strip():
            raise ParameterParserError(f"Missing default value after '=': '{definition}'.")
        try:
            tokens = split_arguments(default_part)
        except ValueError as e:
            raise ParameterParserError(f"Malformed default value ({e}): '{definition}'.") from e

        # a default makes the parameter optional
        optional = True

        if not repeatable and len(tokens) > 1:
            raise ParameterParserError(
                "Cannot provide more than one default argument for "
                f"non-repeatable parameters: '{definition}'."
            )

        typed = _coerce_defaults(tokens, kind, definition)
        default = typed if repeatable else typed[0]

    return ParameterRule(
        name=name,
        type=kind,
        optional=optional,
        repeatable=repeatable,
        literal=literal,
        default=default,
        description=description,
    )


def parse_structured(definition: Mapping[str, Any]) -> ParameterRule:
    """
    Build a rule from a structured (mapping) definition.

    Raises:
        ParameterParserError: If the mapping is invalid.
    """
    try:
        parsed = ParameterDefinition.model_validate(dict(definition))
    except ValidationError as e:
        raise ParameterParserError(f"Invalid parameter definition {dict(definition)!r}: {e}") from e

    label = parsed.name
    if not re.fullmatch(r"\w+", parsed.name):
        raise ParameterParserError(f"Invalid parameter name '{parsed.name}'.")

    kind = resolve_type(parsed.type)
    if kind is None:
        raise ParameterParserError(
            f"Unrecognized parameter type declaration '{parsed.type}': '{label}'."
        )
    if parsed.literal and kind is not ParameterType.STRING:
        raise ParameterParserError(f"Literals can only be used with string parameters: '{label}'.")
    if parsed.literal and parsed.repeatable:
        raise ParameterParserError(f"A parameter cannot be both literal and repeatable: '{label}'.")

    optional = parsed.optional
    if parsed.repeatable:
        values = parsed.default if parsed.default is not None else []
        if not isinstance(values, (list, tuple)):
            values = [values]
        default: Any = _coerce_defaults(list(values), kind, label)
        optional = optional or bool(default)
    elif parsed.default is not None:
        default = _coerce_defaults([parsed.default], kind, label)[0]
        optional = True
    else:
        default = None

    return ParameterRule(
        name=parsed.name,
        type=kind,
        optional=optional,
        repeatable=parsed.repeatable,
        literal=parsed.literal,
        default=default,
        description=parsed.description or None,
    )


def parse_parameters(*definitions: "str | Mapping[str, Any] | ParameterRule") -> list[ParameterRule]:
    """Parse several definitions without cross-checking them."""
    rules = []
    for definition in definitions:
        if isinstance(definition, ParameterRule):
            rules.append(definition)
        elif isinstance(definition, str):
            rules.append(parse_parameter(definition))
        elif isinstance(definition, Mapping):
            rules.append(parse_structured(definition))
        else:
            raise ParameterParserError(
                "Expected parameter definition to be a string or mapping, "
                f"got {type(definition).__name__}."
            )
    return rules


def validate_parameters(*definitions: "str | Mapping[str, Any] | ParameterRule") -> list[ParameterRule]:
    """
    Parse an ordered parameter list and enforce the cross-rule invariants.

    - a literal parameter must be the only parameter
    - a repeatable parameter must be the last parameter
    - no required parameter may follow an optional one
    - names are unique

    Raises:
        ParameterParserError: On the first violated invariant.
    """
    rules = parse_parameters(*definitions)
    seen_names: set[str] = set()
    seen_repeatable: str | None = None
    seen_optional = False

    for rule in rules:
        if rule.name in seen_names:
            raise ParameterParserError(f"Duplicate parameter name: '{rule.name}'.")
        if rule.literal and len(rules) > 1:
            raise ParameterParserError(
                f"Literal parameters must be the only parameter in a command: '{rule.name}'."
            )
        if seen_repeatable:
            raise ParameterParserError(
                f"Repeatable parameters must be the last parameter in a command: '{seen_repeatable}'."
            )
        if seen_optional and not rule.optional:
            raise ParameterParserError(
                "Cannot have required parameters after optional parameters "
                f"in a command: '{rule.name}'."
            )

        seen_names.add(rule.name)
        if rule.repeatable:
            seen_repeatable = rule.name
        seen_optional = seen_optional or rule.optional

    logger.debug(f"Validated parameters: {[str(rule) for rule in rules]}")
    return rules
