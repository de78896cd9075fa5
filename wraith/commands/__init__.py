"""
Commands module for wraith.

Provides:
- Parameter grammar and type system
- Argument resolution
- Command objects, groups and the command registry
- Response values and their classification
"""

from wraith.commands.arguments import normalize_argument, resolve_arguments
from wraith.commands.command import CommandConfig, CommandObject, command
from wraith.commands.parameters import (
    ParameterDefinition,
    ParameterRule,
    parse_parameter,
    parse_parameters,
    parse_structured,
    validate_parameters,
)
from wraith.commands.parser import ParsedCommand, parse_command
from wraith.commands.registry import CommandGroup, CommandRegistry
from wraith.commands.responses import (
    ClassifiedResponse,
    CodeResponse,
    Embed,
    EmbedField,
    Response,
    ResponseKind,
    classify_response,
)
from wraith.commands.types import ParameterType, convert_type, is_type, resolve_type

__all__ = [
    # Types
    "ParameterType",
    "resolve_type",
    "is_type",
    "convert_type",
    # Parameters
    "ParameterRule",
    "ParameterDefinition",
    "parse_parameter",
    "parse_parameters",
    "parse_structured",
    "validate_parameters",
    # Parsing
    "ParsedCommand",
    "parse_command",
    "normalize_argument",
    "resolve_arguments",
    # Commands
    "CommandConfig",
    "CommandObject",
    "command",
    "CommandGroup",
    "CommandRegistry",
    # Responses
    "ResponseKind",
    "Embed",
    "EmbedField",
    "Response",
    "CodeResponse",
    "ClassifiedResponse",
    "classify_response",
]
