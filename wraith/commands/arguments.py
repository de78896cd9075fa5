"""
Argument resolution.

Matches the raw argument text of a command call against the command's
parameter rules, producing a name -> value mapping.
"""

from typing import Any

from wraith.commands.parameters import ParameterRule, ParameterValue
from wraith.commands.tokenize import split_arguments
from wraith.commands.types import convert_type, is_type
from wraith.errors import ArgumentParserError


def normalize_argument(rule: ParameterRule, token: str) -> ParameterValue:
    """
    Check and convert a single token against a rule's type.

    Raises:
        ArgumentParserError: If the token is not of the rule's type.
    """
    if not is_type(token, rule.type):
        raise ArgumentParserError(
            f"Expected argument '{token}' for parameter '{rule.name}' "
            f"to be of type '{rule.type.value}'."
        )
    return convert_type(token, rule.type)


def _default_for(rule: ParameterRule) -> Any:
    if isinstance(rule.default, list):
        return list(rule.default)
    return rule.default


def resolve_arguments(rules: list[ParameterRule], raw_args: str) -> dict[str, Any]:
    """
    Resolve raw argument text against an ordered list of rules.

    Rules and tokens are walked in lockstep. Repeatable rules consume every
    remaining token; literal rules take the whole raw text. Missing optional
    values fall back to the rule's default.

    Args:
        rules: Parameter rules, already validated as a list.
        raw_args: The argument text following the command identifier.

    Returns:
        Mapping with exactly one entry per rule name.

    Raises:
        ArgumentParserError: On a missing required value, a type mismatch,
            or unbalanced quotes.
    """
    split_error: ValueError | None = None
    try:
        tokens = split_arguments(raw_args)
    except ValueError as e:
        # literal rules still take the text as typed
        split_error = e
        tokens = raw_args.split()

    resolved: dict[str, Any] = {}

    for index, rule in enumerate(rules):
        missing = index >= len(tokens)

        if missing and not rule.optional:
            raise ArgumentParserError(f"Missing a value for required argument: '{rule.name}'.")

        if split_error is not None and not rule.literal:
            raise ArgumentParserError(
                f"Could not split arguments '{raw_args}': {split_error}."
            ) from split_error

        if rule.repeatable or rule.literal:
            if missing:
                resolved[rule.name] = _default_for(rule)
            elif rule.repeatable:
                resolved[rule.name] = [normalize_argument(rule, token) for token in tokens[index:]]
            else:
                resolved[rule.name] = raw_args
            break

        resolved[rule.name] = _default_for(rule) if missing else normalize_argument(rule, tokens[index])

    # one entry per rule, even for lists that skipped validation
    for rule in rules:
        resolved.setdefault(rule.name, _default_for(rule))

    return resolved
