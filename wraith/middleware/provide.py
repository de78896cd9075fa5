"""Service injection layer."""

from collections.abc import Callable, Mapping
from typing import Any

from loguru import logger

from wraith.middleware.compose import Layer, resolve


def provide(
    source: str | list[str] | tuple[str, ...] | Mapping[str, str] | None = None,
    target: str | None = None,
) -> Layer:
    """
    Inject services from the container into the context's extras.

    - provide(): every service whose name is not already on the context
    - provide("db"): one service under its own name
    - provide(["db", "cache"]): several services under their own names
    - provide({"db": "database"}): services renamed (service -> context name)
    - provide("db", "database"): one service under a new name

    Services that are not bound are skipped.

    Raises:
        TypeError: If source or target has an unsupported type.
    """
    names: dict[str, str] = {}

    if source is not None and target is None:
        if isinstance(source, str):
            names[source] = source
        elif isinstance(source, (list, tuple)):
            for name in source:
                if not isinstance(name, str):
                    raise TypeError("Expected service names to be strings.")
                names[name] = name
        elif isinstance(source, Mapping):
            for service_name, context_name in source.items():
                if not isinstance(service_name, str) or not isinstance(context_name, str):
                    raise TypeError("Expected service names to be strings.")
                names[service_name] = context_name
        else:
            raise TypeError("Expected service source to be a string, list or mapping.")
    elif source is not None:
        if not isinstance(source, str) or not isinstance(target, str):
            raise TypeError("Expected service source and target to be strings.")
        names[source] = target

    async def layer(next: Callable[..., Any], context: Any) -> Any:
        if source is None:
            async for name, service in context.services.aitems():
                if name not in context:
                    context.extras[name] = service
        else:
            for service_name, context_name in names.items():
                if context.services.has(service_name):
                    context.extras[context_name] = await context.services.aget(service_name)
                else:
                    logger.debug(f"Service not bound, skipping injection: {service_name}")
        return await resolve(next(context))

    return layer
