"""
Exception types for wraith.

Definition-time errors (parameter grammar, command configuration) and
registry/container errors are raised to the caller. Dispatch-time errors
are caught by the dispatcher and reported as failures instead.
"""


class WraithError(Exception):
    """Base class for all wraith errors."""


class ParameterParserError(WraithError):
    """Raised when a parameter definition is not well-formed."""


class ArgumentParserError(WraithError):
    """Raised when user input does not satisfy a command's parameters."""


class CommandParserError(WraithError):
    """Raised when a message cannot be split into a command."""


class CommandError(WraithError):
    """Raised on invalid command configuration or registry mutation."""


class ServiceError(WraithError):
    """Raised on invalid service container mutation."""


class ResponseError(WraithError):
    """Raised when a handler's return value cannot be classified."""


class DispatchError(WraithError):
    """Raised when a message cannot be dispatched or its response emitted."""
