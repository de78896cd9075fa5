"""Host message sources."""

from wraith.channels.base import Author, Channel, Message
from wraith.channels.console import ConsoleAuthor, ConsoleChannel, ConsoleMessage

__all__ = [
    "Author",
    "Channel",
    "Message",
    "ConsoleAuthor",
    "ConsoleChannel",
    "ConsoleMessage",
]
