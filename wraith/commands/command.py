"""
Command objects.

A CommandObject binds a primary trigger, its aliases, parsed parameter
rules, a description and a handler wrapped in the command's own
middleware. Commands are built from a configuration mapping, validated
with pydantic, or with the @command decorator.
"""

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from wraith.commands.parameters import ParameterRule, validate_parameters
from wraith.errors import CommandError
from wraith.middleware.compose import Layer, apply, compose

if TYPE_CHECKING:
    from wraith.commands.registry import CommandGroup


class CommandConfig(BaseModel):
    """Validated command configuration."""
    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    handler: Callable[..., Any]
    triggers: list[str] = Field(min_length=1)  # First trigger is the name
    parameters: list[Any] = Field(default_factory=list)
    description: str | None = None
    middleware: list[Any] = Field(default_factory=list)
    group: str | None = None
    dependencies: dict[str, str] = Field(default_factory=dict)  # Service -> context name

    @field_validator("triggers")
    @classmethod
    def _check_triggers(cls, triggers: list[str]) -> list[str]:
        for trigger in triggers:
            if not trigger or not trigger.strip() or any(c.isspace() for c in trigger):
                raise ValueError(f"Triggers must be non-empty words, got {trigger!r}")
        if len(set(triggers)) != len(triggers):
            raise ValueError(f"Triggers must be unique, got {triggers!r}")
        return triggers

    @field_validator("parameters")
    @classmethod
    def _check_parameters(cls, parameters: list[Any]) -> list[Any]:
        for parameter in parameters:
            if not isinstance(parameter, (str, Mapping, ParameterRule)):
                raise ValueError(
                    f"Parameters must be definition strings or mappings, got {type(parameter).__name__}"
                )
        return parameters

    @field_validator("middleware")
    @classmethod
    def _check_middleware(cls, middleware: list[Any]) -> list[Any]:
        for layer in middleware:
            if not callable(layer):
                raise ValueError("Expected all provided middleware to be functions.")
        return middleware

    @field_validator("dependencies", mode="before")
    @classmethod
    def _expand_dependencies(cls, value: Any) -> Any:
        # a plain list injects each service under its own name
        if isinstance(value, (list, tuple)):
            return {name: name for name in value}
        return value


class CommandObject:
    """
    A registered command.

    Attributes:
        name: Primary trigger.
        aliases: Secondary triggers resolving to this command.
        parameters: Validated parameter rules.
        handler: The user handler wrapped in the command's own middleware.
    """

    def __init__(self, config: CommandConfig | Mapping[str, Any]):
        if not isinstance(config, CommandConfig):
            try:
                config = CommandConfig.model_validate(dict(config))
            except ValidationError as e:
                raise CommandError(f"Invalid command configuration: {e}") from e

        self.config = config
        self.name: str = config.triggers[0]
        self.aliases: list[str] = list(config.triggers[1:])
        self.description = config.description
        self.group_name = config.group
        self.dependencies = dict(config.dependencies)
        self.middleware: list[Layer] = list(config.middleware)
        self.parameters: list[ParameterRule] = validate_parameters(*config.parameters)
        self.callback = config.handler
        self.handler = apply(*self.middleware)(self._invoke)
        self.group: "CommandGroup | None" = None

    def _invoke(self, context: Any) -> Any:
        # lets the dispatcher tell a middleware halt from an empty reply
        if hasattr(context, "reached_handler"):
            context.reached_handler = True
        return self.callback(context)

    @property
    def triggers(self) -> list[str]:
        return [self.name, *self.aliases]

    def link_group(self, group: "CommandGroup") -> None:
        self.group = group

    def unlink_group(self) -> None:
        self.group = None

    def handle(self, context: Any) -> Any:
        """Run the handler, wrapped in group middleware if any."""
        if self.group and self.group.middleware:
            return compose(*self.group.middleware, self.handler)(context)
        return self.handler(context)

    def usage(self) -> str:
        """One-line usage string."""
        parts = [self.name]
        for rule in self.parameters:
            marker = "..." if rule.repeatable or rule.literal else ""
            parts.append(f"[{rule.name}{marker}]" if rule.optional else f"<{rule.name}{marker}>")
        return " ".join(parts)

    def __repr__(self) -> str:
        return f"CommandObject(name={self.name!r}, aliases={self.aliases!r})"


def command(
    *triggers: str,
    parameters: list[Any] | tuple[Any, ...] = (),
    description: str | None = None,
    middleware: list[Layer] | tuple[Layer, ...] = (),
    group: str | None = None,
    dependencies: Mapping[str, str] | list[str] | None = None,
) -> Callable[[Callable[..., Any]], CommandObject]:
    """
    Decorator building a CommandObject from a handler.

    Example:
        @command("roll", "r", parameters=["(int) sides = 6"])
        async def roll(ctx):
            return str(random.randint(1, ctx.args["sides"]))
    """

    def decorator(handler: Callable[..., Any]) -> CommandObject:
        cmd = CommandObject({
            "handler": handler,
            "triggers": list(triggers),
            "parameters": list(parameters),
            "description": description,
            "middleware": list(middleware),
            "group": group,
            "dependencies": dependencies or {},
        })
        logger.debug(f"Built command: {cmd.name}")
        return cmd

    return decorator
