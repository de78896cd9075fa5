"""
The wraith client.

Ties together the event hub, command registry, service container and
dispatcher. Host adapters feed it events: ready() once connected, then
receive() for every new or edited message.
"""

import random
from collections.abc import Callable, Mapping
from typing import Any

from loguru import logger

from wraith.commands.command import CommandObject
from wraith.commands.registry import CommandRegistry
from wraith.config.schema import Config
from wraith.dispatch.dispatcher import Dispatcher, DispatchResult
from wraith.dispatch.prefix import PrefixType
from wraith.events import EventCallback, EventHandler, EventHub, WraithEvent
from wraith.middleware.compose import Layer
from wraith.services.container import ServiceContainer, ServiceProvider


CommandSource = CommandObject | Mapping[str, Any] | Callable[[], Any]


class Client:
    """
    A chat bot client.

    Example:
        client = Client(prefix="!")
        client.load_commands(echo, roll)
        client.on("dispatch_fail", report_failure)
        await client.ready(bot_user)
        await client.receive(message)
    """

    def __init__(
        self,
        config: Config | None = None,
        prefix: PrefixType | None = None,
        chooser: Callable[[list[Any]], Any] = random.choice,
    ):
        self.config = config or Config()
        self.events = EventHub()
        self.commands = CommandRegistry()
        self.services = ServiceContainer()
        self.dispatcher = Dispatcher(
            self.config.dispatcher,
            prefix=prefix,
            commands=self.commands,
            services=self.services,
            events=self.events,
            client=self,
            chooser=chooser,
        )
        self.user: Any = None

    def on(self, event: str | WraithEvent, callback: EventCallback) -> EventHandler:
        return self.events.on(event, callback)

    def once(self, event: str | WraithEvent, callback: EventCallback) -> EventHandler:
        return self.events.once(event, callback)

    def load_commands(self, *commands: CommandSource) -> "Client":
        """
        Add commands to the registry.

        Each command may be a CommandObject, a configuration mapping, or a
        generator function returning either.
        """
        for source in commands:
            if not isinstance(source, (CommandObject, Mapping)) and callable(source):
                source = source()
            self.commands.load(source)
        return self

    def unload_commands(self, *identifiers: str) -> "Client":
        for identifier in identifiers:
            self.commands.unload(identifier)
        return self

    def load_services(self, *providers: ServiceProvider) -> "Client":
        self.services.bind_providers(*providers)
        return self

    def unload_services(self, *identifiers: str) -> "Client":
        for identifier in identifiers:
            self.services.unbind(identifier)
        return self

    def use(self, *layers: Layer) -> "Client":
        """Add dispatcher-level middleware."""
        self.dispatcher.use(*layers)
        return self

    async def ready(self, user: Any) -> None:
        """Record the bot's own user and emit the ready event."""
        self.user = user
        self.dispatcher.ready(str(user.id))
        logger.info(f"Client ready as {getattr(user, 'username', user.id)}")
        await self.events.emit(WraithEvent.READY, user)

    async def receive(self, message: Any, new_message: Any = None) -> DispatchResult:
        """
        Handle a new message, or an edit when new_message is given.

        Message listeners run before the message is dispatched.
        """
        event = WraithEvent.MESSAGE if new_message is None else WraithEvent.MESSAGE_UPDATE
        if new_message is None:
            await self.events.emit(event, message)
        else:
            await self.events.emit(event, message, new_message)
        return await self.dispatcher.dispatch(message, new_message)
