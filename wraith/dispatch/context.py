"""Per-message dispatch context."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wraith.commands.command import CommandObject
    from wraith.commands.parser import ParsedCommand
    from wraith.commands.registry import CommandRegistry
    from wraith.services.container import ServiceContainer


@dataclass
class DispatchContext:
    """
    Everything a middleware layer or command handler gets to see.

    Layers may add their own values to `extras`; they are readable as
    attributes (ctx.db) or items (ctx["db"]).
    """
    message: Any
    commands: "CommandRegistry"
    services: "ServiceContainer"
    parsed_command: "ParsedCommand"
    client: Any = None
    command: "CommandObject | None" = None
    args: dict[str, Any] = field(default_factory=dict)
    respond: Callable[[Any], Awaitable[Any]] | None = None
    extras: dict[str, Any] = field(default_factory=dict)
    reached_handler: bool = False

    @property
    def member(self) -> Any:
        """Guild member of the author, if the host provides one."""
        return getattr(self.message, "member", None)

    @property
    def author(self) -> Any:
        return self.message.author

    @property
    def channel(self) -> Any:
        return self.message.channel

    def __getattr__(self, name: str) -> Any:
        # only called when normal lookup fails
        extras = self.__dict__.get("extras", {})
        if name in extras:
            return extras[name]
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def __getitem__(self, name: str) -> Any:
        if name in self.extras:
            return self.extras[name]
        return getattr(self, name)

    def __contains__(self, name: str) -> bool:
        return name in self.extras or hasattr(self, name)
