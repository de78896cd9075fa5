"""
Message dispatcher for wraith.

Routes each incoming message through:
1. Event filter (no-op edits, the bot's own messages)
2. Prefix filter
3. Command parsing
4. Command lookup
5. Dispatcher middleware
6. Argument resolution
7. Command handler (with its own middleware)
8. Response classification and emission

Any step that cannot complete ends the dispatch with a tagged failure,
reported through the event hub. dispatch() never raises.
"""

import asyncio
import random
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from loguru import logger

from wraith.commands.arguments import resolve_arguments
from wraith.commands.parser import parse_command
from wraith.commands.registry import CommandRegistry
from wraith.commands.responses import (
    ClassifiedResponse,
    ResponseKind,
    classify_response,
)
from wraith.config.schema import DispatcherConfig
from wraith.dispatch.context import DispatchContext
from wraith.dispatch.prefix import PrefixFilter, PrefixType, create_prefix_filter
from wraith.errors import (
    ArgumentParserError,
    CommandParserError,
    DispatchError,
    ResponseError,
    ServiceError,
)
from wraith.events import EventHub, WraithEvent
from wraith.middleware.compose import Layer, apply, resolve
from wraith.services.container import ServiceContainer


class FailureKind(str, Enum):
    """Why a dispatch did not complete."""
    EVENT_FILTERED = "event-filtered"
    PREFIX_FILTERED = "prefix-filtered"
    PARSE_COMMAND = "parse-command"
    UNKNOWN_COMMAND = "unknown-command"
    MIDDLEWARE_FILTERED = "middleware-filtered"
    PARSE_ARGUMENTS = "parse-arguments"
    HANDLER_ERROR = "handler-error"
    CLASSIFICATION_ERROR = "classification-error"
    EMIT_ERROR = "emit-error"


# Failures that happen for most chat traffic and are not worth a warning
_ROUTINE_FAILURES = {
    FailureKind.EVENT_FILTERED,
    FailureKind.PREFIX_FILTERED,
}


@dataclass
class DispatchFailure:
    """A dispatch that stopped before emitting a response."""
    kind: FailureKind
    message: Any
    command: str | None = None
    args: dict[str, Any] = field(default_factory=dict)
    error: BaseException | None = None
    response: Any = None
    new_message: Any = None


@dataclass
class DispatchResult:
    """Outcome of dispatching one message."""
    message: Any
    command: str | None = None
    args: dict[str, Any] = field(default_factory=dict)
    response: ClassifiedResponse | None = None
    emitted: Any = None  # Whatever the host returned when sending
    failure: DispatchFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def kind(self) -> ResponseKind | None:
        return self.response.kind if self.response else None


async def _middleware_core(context: DispatchContext) -> DispatchContext:
    return context


class Dispatcher:
    """
    Dispatches messages to commands.

    Holds the command registry and service container consulted on every
    dispatch. Failures are emitted as WraithEvent.DISPATCH_FAIL with a
    DispatchFailure payload.
    """

    def __init__(
        self,
        config: DispatcherConfig | None = None,
        prefix: PrefixType | None = None,
        commands: CommandRegistry | None = None,
        services: ServiceContainer | None = None,
        events: EventHub | None = None,
        client: Any = None,
        chooser: Callable[[list[Any]], Any] = random.choice,
    ):
        self.config = config or DispatcherConfig()
        self.commands = commands if commands is not None else CommandRegistry()
        self.services = services if services is not None else ServiceContainer()
        self.events = events if events is not None else EventHub()
        self.client = client
        self.chooser = chooser

        self.prefix: PrefixType = prefix if prefix is not None else self.config.prefix
        self.self_id = self.config.self_id
        self.prefix_filter: PrefixFilter | None = None
        self._build_prefix_filter()

        self.middleware: list[Layer] = []
        self._dispatch_middleware = apply()(_middleware_core)

        # Stats
        self._received_count = 0
        self._success_count = 0
        self._failure_counts: dict[str, int] = {}

        self._running = False
        self._tasks: set[asyncio.Task] = set()

    def _build_prefix_filter(self) -> None:
        try:
            self.prefix_filter = create_prefix_filter(self.prefix, self.self_id)
        except ValueError as e:
            # mention prefixes wait for the bot's own id
            logger.debug(f"Prefix filter deferred until ready: {e}")
            self.prefix_filter = None

    def ready(self, self_id: str) -> None:
        """Record the bot's own user id once the host has connected."""
        self.self_id = str(self_id)
        self._build_prefix_filter()
        logger.info(f"Dispatcher ready as {self.self_id} (prefix filter: {self.prefix_filter!r})")

    def use(self, *layers: Layer) -> "Dispatcher":
        """Add dispatcher-level middleware, run before command middleware."""
        self._dispatch_middleware = apply(*self.middleware, *layers)(_middleware_core)
        self.middleware.extend(layers)
        return self

    def _is_own_message(self, message: Any) -> bool:
        author = getattr(message, "author", None)
        return bool(self.self_id) and author is not None and str(author.id) == self.self_id

    @staticmethod
    def should_filter_event(message: Any, new_message: Any = None) -> bool:
        """An edit that leaves the content unchanged is not re-dispatched."""
        return new_message is not None and message.content == new_message.content

    async def dispatch(self, message: Any, new_message: Any = None) -> DispatchResult:
        """
        Dispatch a received or edited message.

        Args:
            message: The message, or the original message for an edit.
            new_message: The edited message, for edit events.

        Returns:
            The dispatch outcome.
        """
        self._received_count += 1

        if self.should_filter_event(message, new_message):
            return await self._fail(FailureKind.EVENT_FILTERED, message, new_message=new_message)

        source = new_message if new_message is not None else message

        if self.prefix_filter is None:
            return await self._fail(
                FailureKind.PREFIX_FILTERED,
                source,
                error=DispatchError("Dispatcher is not ready: prefix filter requires the bot's user id."),
            )

        if (
            self.config.ignore_self
            and self._is_own_message(source)
            and not self.prefix_filter.allows_self
        ):
            return await self._fail(FailureKind.EVENT_FILTERED, source)

        try:
            prefix = await self.prefix_filter.test(source)
        except Exception as e:
            return await self._fail(FailureKind.PREFIX_FILTERED, source, error=e)

        if prefix is None:
            return await self._fail(FailureKind.PREFIX_FILTERED, source)

        try:
            parsed = parse_command(source.content, prefix)
        except CommandParserError as e:
            return await self._fail(FailureKind.PARSE_COMMAND, source, error=e)

        command = self.commands.get(parsed.identifier)
        if command is None:
            return await self._fail(FailureKind.UNKNOWN_COMMAND, source, command=parsed.identifier)

        context = DispatchContext(
            message=source,
            commands=self.commands,
            services=self.services,
            parsed_command=parsed,
            client=self.client,
            command=command,
        )
        context.respond = lambda response: self.emit_response(source, response, context)

        try:
            returned = await resolve(self._dispatch_middleware(context))
            halted = not returned
        except Exception as e:
            logger.error(f"Dispatcher middleware error for {command.name}: {e}")
            return await self._fail(FailureKind.HANDLER_ERROR, source, command=command.name, error=e)

        if halted:
            return await self._fail(FailureKind.MIDDLEWARE_FILTERED, source, command=command.name)
        if isinstance(returned, DispatchContext):
            context = returned

        try:
            args = resolve_arguments(command.parameters, context.parsed_command.raw_args)
        except ArgumentParserError as e:
            return await self._fail(FailureKind.PARSE_ARGUMENTS, source, command=command.name, error=e)
        context.args = args

        try:
            await self._inject_dependencies(command.dependencies, context)
            response = await resolve(command.handle(context))
        except Exception as e:
            logger.error(f"Command {command.name} failed: {e}")
            return await self._fail(
                FailureKind.HANDLER_ERROR, source, command=command.name, args=args, error=e
            )

        try:
            classified = classify_response(response, self.chooser)
        except ResponseError as e:
            return await self._fail(
                FailureKind.CLASSIFICATION_ERROR,
                source,
                command=command.name,
                args=args,
                error=e,
                response=response,
            )

        # command middleware halted before the handler ran
        if classified.kind is ResponseKind.NO_RESPONSE and not context.reached_handler:
            return await self._fail(
                FailureKind.MIDDLEWARE_FILTERED, source, command=command.name, args=args
            )

        try:
            emitted = await self._emit(source, classified, context)
        except Exception as e:
            logger.error(f"Failed to send response for {command.name}: {e}")
            return await self._fail(
                FailureKind.EMIT_ERROR,
                source,
                command=command.name,
                args=args,
                error=e,
                response=response,
            )

        self._success_count += 1
        result = DispatchResult(
            message=source,
            command=command.name,
            args=args,
            response=classified,
            emitted=emitted,
        )
        logger.debug(f"Dispatched {command.name} ({classified.kind.value})")
        await self.events.emit(WraithEvent.DISPATCH, result)
        return result

    async def _inject_dependencies(self, dependencies: dict[str, str], context: DispatchContext) -> None:
        for service_name, context_name in dependencies.items():
            if not self.services.has(service_name):
                raise ServiceError(f"Attempting to inject a non-existent service: '{service_name}'.")
            context.extras[context_name] = await self.services.aget(service_name)

    async def emit_response(self, message: Any, response: Any, context: DispatchContext | None = None) -> Any:
        """
        Classify and send any response value to the message's channel.

        Raises:
            ResponseError: If the value cannot be classified.
        """
        classified = classify_response(response, self.chooser)
        return await self._emit(message, classified, context)

    async def _emit(self, message: Any, classified: ClassifiedResponse, context: DispatchContext | None) -> Any:
        kind = classified.kind
        if kind is ResponseKind.NO_RESPONSE:
            return None
        if kind in (ResponseKind.TEXT, ResponseKind.CHOICE):
            return await message.channel.send(classified.value)
        if kind is ResponseKind.EMBED:
            return await message.channel.send_embed(classified.value)
        return await resolve(classified.value.respond(context))

    async def _fail(self, kind: FailureKind, message: Any, **details: Any) -> DispatchResult:
        failure = DispatchFailure(kind=kind, message=message, **details)
        self._failure_counts[kind.value] = self._failure_counts.get(kind.value, 0) + 1

        if kind in _ROUTINE_FAILURES:
            logger.debug(f"Dispatch skipped: {kind.value}")
        else:
            reason = f": {failure.error}" if failure.error else ""
            logger.warning(f"Dispatch failed ({kind.value}) for {failure.command or '?'}{reason}")

        await self.events.emit(WraithEvent.DISPATCH_FAIL, failure)
        return DispatchResult(
            message=message,
            command=failure.command,
            args=failure.args,
            failure=failure,
        )

    async def start(self, queue: "asyncio.Queue[tuple[Any, Any]]") -> None:
        """
        Dispatch messages from a queue until stopped.

        Queue items are (message, new_message) pairs. Each message is
        dispatched in its own task, so slow handlers do not hold up the
        messages queued behind them.
        """
        self._running = True
        logger.info("Dispatcher started")

        while self._running:
            try:
                try:
                    message, new_message = await asyncio.wait_for(queue.get(), timeout=1.0)
                except asyncio.TimeoutError:
                    continue

                task = asyncio.create_task(self.dispatch(message, new_message))
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)
                queue.task_done()
                # let the new task start before taking the next message
                await asyncio.sleep(0)

            except asyncio.CancelledError:
                break

        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        logger.info("Dispatcher stopped")

    def stop(self) -> None:
        """Stop the dispatch loop after in-flight dispatches finish."""
        self._running = False

    def get_stats(self) -> dict[str, Any]:
        """Get dispatcher statistics."""
        return {
            "received_count": self._received_count,
            "success_count": self._success_count,
            "failure_counts": dict(self._failure_counts),
            "in_flight": len(self._tasks),
            "running": self._running,
            "commands": len(self.commands),
            "services": len(self.services),
        }
