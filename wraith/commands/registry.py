"""
Command registry.

Stores commands by primary name and resolves aliases back to their
owning command. Both maps are updated together on every mutation, and
a failed mutation leaves the registry unchanged.

Supports:
- Aliases (many-to-one)
- Command groups with shared middleware
- Help text
"""

from collections.abc import Iterator, Mapping
from typing import Any

from loguru import logger

from wraith.commands.command import CommandObject
from wraith.errors import CommandError
from wraith.middleware.compose import Layer


class CommandGroup:
    """Commands sharing a group name and group-level middleware."""

    def __init__(self, name: str):
        self.name = name
        self.commands: dict[str, CommandObject] = {}
        self.middleware: list[Layer] = []

    def add(self, command: CommandObject) -> None:
        self.commands[command.name] = command
        command.link_group(self)

    def remove(self, name: str) -> None:
        command = self.commands.pop(name, None)
        if command:
            command.unlink_group()

    def apply_middleware(self, *layers: Layer) -> None:
        """Add layers outside the group's current middleware."""
        self.middleware = [*layers, *self.middleware]

    def __len__(self) -> int:
        return len(self.commands)


class CommandRegistry:
    """
    Registry for commands.

    Lookups never raise for unknown identifiers; mutations raise
    CommandError and leave the registry as it was.
    """

    def __init__(self):
        self._commands: dict[str, CommandObject] = {}
        self._aliases: dict[str, str] = {}
        self._groups: dict[str, CommandGroup] = {}

    def load(self, command: CommandObject | Mapping[str, Any]) -> CommandObject:
        """
        Add a command to the registry.

        Args:
            command: A CommandObject, or a configuration mapping to build one.

        Returns:
            The loaded command.

        Raises:
            CommandError: If the name or an alias is already taken.
        """
        if not isinstance(command, CommandObject):
            command = CommandObject(command)

        name = command.name
        if name in self._commands:
            raise CommandError(f"Attempting to add duplicate command: '{name}'.")
        if name in self._aliases:
            raise CommandError(
                f"Command name '{name}' is already an alias of '{self._aliases[name]}'."
            )

        for alias in command.aliases:
            if alias in self._commands:
                raise CommandError(f"Alias '{alias}' of '{name}' is already a command name.")
            if alias in self._aliases:
                raise CommandError(
                    f"Attempting to add duplicate alias '{alias}' to command '{name}'."
                )

        self._commands[name] = command
        for alias in command.aliases:
            self._aliases[alias] = name

        if command.group_name:
            group = self._groups.get(command.group_name)
            if group is None:
                group = self._groups[command.group_name] = CommandGroup(command.group_name)
            group.add(command)

        logger.debug(f"Loaded command: {name} (aliases: {command.aliases})")
        return command

    def unload(self, identifier: str) -> CommandObject:
        """
        Remove a command and all of its aliases.

        Args:
            identifier: The command name or one of its aliases.

        Returns:
            The removed command.

        Raises:
            CommandError: If no command matches the identifier.
        """
        name = self.resolve_name(identifier)
        if name is None:
            raise CommandError(f"Attempting to unload non-existent command: '{identifier}'.")

        command = self._commands.pop(name)
        for alias in command.aliases:
            self._aliases.pop(alias, None)

        if command.group is not None:
            group = command.group
            group.remove(name)
            if not len(group):
                del self._groups[group.name]

        logger.debug(f"Unloaded command: {name}")
        return command

    def get(self, identifier: str) -> CommandObject | None:
        """Get a command by name or alias, or None if not found."""
        if not isinstance(identifier, str):
            raise TypeError("Expected command identifier to be a string.")
        name = self.resolve_name(identifier)
        return self._commands.get(name) if name else None

    def resolve_name(self, identifier: str) -> str | None:
        """Get the primary name for a name or alias."""
        if identifier in self._commands:
            return identifier
        return self._aliases.get(identifier)

    def has(self, identifier: str) -> bool:
        return self.resolve_name(identifier) is not None

    def add_aliases(self, identifier: str, *aliases: str) -> None:
        """
        Attach additional aliases to a loaded command.

        Raises:
            CommandError: If the command is unknown or an alias is taken.
        """
        name = self.resolve_name(identifier)
        if name is None:
            raise CommandError(f"Attempting to add alias to non-existent command '{identifier}'.")

        for alias in aliases:
            if not isinstance(alias, str) or not alias:
                raise TypeError("Expected command alias to be a non-empty string.")
            if alias in self._commands or alias in self._aliases:
                raise CommandError(
                    f"Attempting to add duplicate alias '{alias}' to command '{name}'."
                )
        if len(set(aliases)) != len(aliases):
            raise CommandError(f"Duplicate aliases given for command '{name}': {list(aliases)}.")

        command = self._commands[name]
        for alias in aliases:
            self._aliases[alias] = name
            command.aliases.append(alias)

    def remove_alias(self, alias: str) -> None:
        """
        Detach a single alias from its command.

        Raises:
            CommandError: If the alias does not exist.
        """
        name = self._aliases.get(alias)
        if name is None:
            raise CommandError(f"Attempting to remove non-existent alias '{alias}'.")
        del self._aliases[alias]
        self._commands[name].aliases.remove(alias)

    def apply_group_middleware(self, group: str, *layers: Layer) -> None:
        """
        Apply middleware to every command in a group.

        Raises:
            CommandError: If the group does not exist.
        """
        for layer in layers:
            if not callable(layer):
                raise TypeError("Expected all provided middleware to be functions.")

        command_group = self._groups.get(group)
        if command_group is None:
            raise CommandError(
                f"Attempted to apply middleware to non-existent command group: '{group}'."
            )
        command_group.apply_middleware(*layers)

    def get_group(self, name: str) -> CommandGroup | None:
        return self._groups.get(name)

    def get_help(self, identifier: str = "") -> str:
        """Get help text for a command or all commands."""
        if identifier:
            command = self.get(identifier)
            if command is None:
                return f"No help for: {identifier}"
            lines = [command.usage()]
            if command.description:
                lines.append(command.description)
            for rule in command.parameters:
                if rule.description:
                    lines.append(f"  {rule.name} - {rule.description}")
            return "\n".join(lines)

        lines = ["Available commands:"]
        for name, command in sorted(self._commands.items()):
            lines.append(f"  {name} - {command.description or command.usage()}")
        return "\n".join(lines)

    def list_commands(self) -> list[str]:
        """List all registered command names."""
        return sorted(self._commands)

    def __contains__(self, identifier: str) -> bool:
        return self.has(identifier)

    def __iter__(self) -> Iterator[CommandObject]:
        return iter(list(self._commands.values()))

    def __len__(self) -> int:
        return len(self._commands)
