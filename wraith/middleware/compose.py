"""
Middleware composition.

A layer is a callable `layer(next, *args)`. Calling `next(...)` continues
the chain; not calling it halts the chain and the layer's own return value
becomes the result. Layers may be sync or async: an async layer awaits
`next(...)`, and the composed handler returns whatever the outermost layer
returns (a coroutine if it is async).
"""

import inspect
from collections.abc import Callable
from typing import Any


Layer = Callable[..., Any]


def compose(*functions: Callable[..., Any]) -> Callable[..., Any]:
    """
    Compose functions into one middleware chain.

    The last function is the innermost part of the chain, so
    compose(f, g) behaves as `lambda *args: f(g, *args)`.
    """
    if not functions:
        raise TypeError("Expected at least one function to compose.")

    composed = functions[-1]
    for layer in reversed(functions[:-1]):
        composed = _bind(layer, composed)
    return composed


def _bind(layer: Layer, inner: Callable[..., Any]) -> Callable[..., Any]:
    def wrapped(*args: Any, **kwargs: Any) -> Any:
        return layer(inner, *args, **kwargs)

    return wrapped


def apply(*layers: Layer) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Build a decorator that wraps a handler in the given layers.

    The first layer is the outermost: apply(a, b)(core) nests as a(b(core)),
    so on the way in a runs before b, which runs before core.

    Raises:
        TypeError: If any layer or the handler is not callable.
    """
    for layer in layers:
        if not callable(layer):
            raise TypeError("Expected all provided middleware to be functions.")

    def wrap(handler: Callable[..., Any]) -> Callable[..., Any]:
        if not callable(handler):
            raise TypeError("Expected handler to be a function.")
        return compose(*layers, handler)

    return wrap


async def resolve(value: Any) -> Any:
    """Await a value if it is awaitable, otherwise return it."""
    while inspect.isawaitable(value):
        value = await value
    return value
