"""
Command responses.

A handler's return value is classified into exactly one response kind:
- falsy -> no response
- str -> plain text
- list/tuple of str -> one element chosen at random, sent as text
- Embed or mapping -> rich embed
- Response -> custom responder, given the dispatch context
"""

import random
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from wraith.errors import ResponseError


class ResponseKind(str, Enum):
    """Classification of a handler's return value."""
    NO_RESPONSE = "no_response"
    TEXT = "text"
    CHOICE = "choice"
    EMBED = "embed"
    CUSTOM = "custom"


@dataclass
class EmbedField:
    """A single name/value field of an embed."""
    name: str
    value: str
    inline: bool = False


@dataclass
class Embed:
    """Rich message content."""
    title: str = ""
    description: str = ""
    url: str = ""
    color: int | None = None
    footer: str = ""
    fields: list[EmbedField] = field(default_factory=list)

    def add_field(self, name: str, value: str, inline: bool = False) -> "Embed":
        self.fields.append(EmbedField(name=name, value=value, inline=inline))
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, dropping empty values."""
        data: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "color": self.color,
            "footer": self.footer,
            "fields": [
                {"name": f.name, "value": f.value, "inline": f.inline}
                for f in self.fields
            ],
        }
        return {key: value for key, value in data.items() if value}


class Response:
    """
    Wrapper for custom message responses.

    The handler receives the dispatch context and is responsible for
    emitting whatever it wants.
    """

    def __init__(self, handler: Callable[[Any], Any]):
        if not callable(handler):
            raise TypeError("Expected handler to be a function.")
        self.handler = handler

    def respond(self, context: Any) -> Any:
        """Run the response handler with the dispatch context."""
        return self.handler(context)


class CodeResponse(Response):
    """Sends a fenced code block."""

    def __init__(self, language: str, code: str):
        self.language = language
        self.code = code
        super().__init__(self._send)

    async def _send(self, context: Any) -> Any:
        return await context.message.channel.send(f"```{self.language}\n{self.code}\n```")


@dataclass
class ClassifiedResponse:
    """A handler return value reduced to one response kind."""
    kind: ResponseKind
    value: Any = None  # Text, embed, or Response to emit


def classify_response(
    response: Any,
    chooser: Callable[[list[Any]], Any] = random.choice,
) -> ClassifiedResponse:
    """
    Classify a handler's return value.

    Args:
        response: The returned value.
        chooser: Picks one element from a list response.

    Returns:
        The classified response.

    Raises:
        ResponseError: If the value is not of a recognized shape, has no
            truth value, or is a list with a non-string element.
    """
    try:
        empty = not response
    except Exception as e:
        raise ResponseError(
            f"Returned value from command handler has no truth value: {type(response).__name__}."
        ) from e
    if empty:
        return ClassifiedResponse(ResponseKind.NO_RESPONSE)

    if isinstance(response, str):
        return ClassifiedResponse(ResponseKind.TEXT, response)

    if isinstance(response, (list, tuple)):
        # every element must be sendable, whichever one is picked
        for element in response:
            if not isinstance(element, str):
                raise ResponseError(
                    f"Expected list response elements to be strings, got {type(element).__name__}."
                )
        return ClassifiedResponse(ResponseKind.CHOICE, chooser(list(response)))

    if isinstance(response, Embed):
        return ClassifiedResponse(ResponseKind.EMBED, response)

    if isinstance(response, Mapping):
        return ClassifiedResponse(ResponseKind.EMBED, dict(response))

    if isinstance(response, Response):
        return ClassifiedResponse(ResponseKind.CUSTOM, response)

    raise ResponseError(
        f"Returned value from command handler is not of a recognized type: {type(response).__name__}."
    )
