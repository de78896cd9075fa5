"""
Interfaces the dispatcher expects from a host chat platform.

Any object with these attributes works; nothing needs to subclass them.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Author(Protocol):
    id: str
    bot: bool


@runtime_checkable
class Channel(Protocol):
    id: str
    type: str  # "text", "dm" or "group"

    async def send(self, content: str) -> Any:
        ...

    async def send_embed(self, embed: Any) -> Any:
        ...


@runtime_checkable
class Message(Protocol):
    content: str
    author: Author
    channel: Channel
