"""
Service container.

Services are bound under a primary name plus optional aliases, with one
of three lifecycles fixed at bind time:
- constructed: rebuilt by its builder on every fetch
- singleton: built once on first fetch, cached afterwards
- instance: a precomputed value

Builders may be async. aget() awaits them; get() only works for
builders that return the service directly.
"""

import asyncio
import inspect
from collections.abc import AsyncIterator, Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from loguru import logger

from wraith.errors import ServiceError
from wraith.middleware.compose import resolve


class ServiceKind(str, Enum):
    """Service lifecycles."""
    CONSTRUCTED = "constructed"
    SINGLETON = "singleton"
    INSTANCE = "instance"


_UNSET = object()


@dataclass
class Service:
    """A bound service entry."""
    name: str
    kind: ServiceKind
    aliases: list[str] = field(default_factory=list)
    builder: Callable[[], Any] | None = None
    instance: Any = _UNSET
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    @property
    def built(self) -> bool:
        return self.instance is not _UNSET

    def fetch(self) -> Any:
        """
        Return the service according to its lifecycle, without awaiting.

        Raises:
            ServiceError: If the builder is async and the service must be built.
        """
        if self.kind is ServiceKind.INSTANCE or self.built:
            return self.instance

        value = self.builder()
        if inspect.isawaitable(value):
            if inspect.iscoroutine(value):
                value.close()
            raise ServiceError(f"Service '{self.name}' has an async builder; fetch it with aget().")

        if self.kind is ServiceKind.SINGLETON:
            self.instance = value
            logger.debug(f"Built singleton service: {self.name}")
        return value

    async def afetch(self) -> Any:
        """Return the service according to its lifecycle, awaiting async builders."""
        if self.kind is ServiceKind.INSTANCE or self.built:
            return self.instance
        if self.kind is ServiceKind.CONSTRUCTED:
            return await resolve(self.builder())

        async with self._lock:
            # another fetch may have finished the build while we waited
            if not self.built:
                self.instance = await resolve(self.builder())
                logger.debug(f"Built singleton service: {self.name}")
        return self.instance


# Provider: a callable that binds services into the container
ServiceProvider = Callable[["ServiceContainer"], Any]


class ServiceContainer:
    """
    Manages services for the application.

    Identifiers may be a single name or a list whose first element is the
    name and the rest its aliases.
    """

    def __init__(self):
        self._services: dict[str, Service] = {}
        self._aliases: dict[str, str] = {}

    @property
    def main_bindings(self) -> list[str]:
        """Primary names of all bound services."""
        return list(self._services)

    def construct(self, identifier: str | list[str], builder: Callable[[], Any]) -> "ServiceContainer":
        """Bind a service that is rebuilt on every fetch."""
        if not callable(builder):
            raise TypeError("Expected service builder to be a function.")
        return self._bind(ServiceKind.CONSTRUCTED, identifier, builder=builder)

    def singleton(self, identifier: str | list[str], builder: Callable[[], Any]) -> "ServiceContainer":
        """Bind a service that is built once and cached."""
        if not callable(builder):
            raise TypeError("Expected service builder to be a function.")
        return self._bind(ServiceKind.SINGLETON, identifier, builder=builder)

    def instance(self, identifier: str | list[str], value: Any) -> "ServiceContainer":
        """Bind a precomputed value."""
        return self._bind(ServiceKind.INSTANCE, identifier, instance=value)

    def bind_providers(self, *providers: ServiceProvider) -> "ServiceContainer":
        """Let each provider bind its services into this container."""
        for provider in providers:
            provider(self)
        return self

    def unbind(self, identifier: str) -> Service:
        """
        Remove a service along with all of its aliases.

        Raises:
            ServiceError: If nothing is bound under the identifier.
        """
        name = self.resolve_name(identifier)
        if name is None:
            raise ServiceError(f"Attempting to unbind non-existent service: '{identifier}'.")

        entry = self._services.pop(name)
        for alias in entry.aliases:
            self._aliases.pop(alias, None)

        logger.debug(f"Unbound service: {name}")
        return entry

    def has(self, identifier: str) -> bool:
        return self.resolve_name(identifier) is not None

    def get(self, identifier: str) -> Any:
        """
        Fetch a service, building it if its lifecycle requires.

        Returns:
            The service, or None if nothing is bound under the identifier.
        """
        name = self.resolve_name(identifier)
        if name is None:
            return None
        return self._services[name].fetch()

    async def aget(self, identifier: str) -> Any:
        """
        Fetch a service, awaiting its builder if it is async.

        Singletons are built once even under concurrent fetches.

        Returns:
            The service, or None if nothing is bound under the identifier.
        """
        name = self.resolve_name(identifier)
        if name is None:
            return None
        return await self._services[name].afetch()

    async def aitems(self) -> AsyncIterator[tuple[str, Any]]:
        """Iterate (name, service) pairs, awaiting each service."""
        for name in list(self._services):
            entry = self._services.get(name)
            if entry is not None:
                yield name, await entry.afetch()

    def kind_of(self, identifier: str) -> ServiceKind | None:
        name = self.resolve_name(identifier)
        return self._services[name].kind if name else None

    def resolve_name(self, identifier: str) -> str | None:
        """Get the primary name for a name or alias."""
        if identifier in self._services:
            return identifier
        return self._aliases.get(identifier)

    def _bind(self, kind: ServiceKind, identifier: str | list[str], **entry: Any) -> "ServiceContainer":
        names = [identifier] if isinstance(identifier, str) else list(identifier)
        if not names or not all(isinstance(n, str) and n for n in names):
            raise TypeError("Expected service identifier to be a non-empty string or list of strings.")
        if len(set(names)) != len(names):
            raise ServiceError(f"Duplicate identifiers in binding: {names}.")

        for candidate in names:
            if self.has(candidate):
                raise ServiceError(f"Service identifier already bound: '{candidate}'.")

        name, *aliases = names
        self._services[name] = Service(name=name, kind=kind, aliases=aliases, **entry)
        for alias in aliases:
            self._aliases[alias] = name

        logger.debug(f"Bound {kind.value} service: {name} (aliases: {aliases})")
        return self

    def __contains__(self, identifier: str) -> bool:
        return self.has(identifier)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        """Iterate (name, service) pairs, fetching each service."""
        for name in list(self._services):
            yield name, self._services[name].fetch()

    def __len__(self) -> int:
        return len(self._services)
