"""
Console host for wraith.

An in-process message source: messages are typed on stdin and responses
are printed with rich. Sent content is also recorded so it can be
inspected.
"""

import itertools
from dataclasses import dataclass, field
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from wraith.commands.responses import Embed


_ids = itertools.count(1)


@dataclass
class ConsoleAuthor:
    """The sender of a console message."""
    id: str = "user"
    username: str = "user"
    discriminator: str = "0001"
    bot: bool = False

    @property
    def tag(self) -> str:
        return f"{self.username}#{self.discriminator}"


@dataclass
class ConsoleChannel:
    """A channel that prints to the terminal."""
    id: str = "console"
    type: str = "dm"
    author: ConsoleAuthor = field(default_factory=lambda: ConsoleAuthor(id="wraith", username="wraith", bot=True))
    console: Console = field(default_factory=Console)
    sent: list[Any] = field(default_factory=list)

    async def send(self, content: str) -> "ConsoleMessage":
        self.sent.append(content)
        self.console.print(f"[cyan]{escape(self.author.username)}[/cyan]: {escape(content)}")
        return ConsoleMessage(content=content, author=self.author, channel=self)

    async def send_embed(self, embed: Embed | dict[str, Any]) -> "ConsoleMessage":
        self.sent.append(embed)
        data = embed.to_dict() if isinstance(embed, Embed) else dict(embed)
        lines = [escape(str(data.get("description", "")))]
        for item in data.get("fields", []):
            lines.append(f"[bold]{escape(str(item['name']))}[/bold]: {escape(str(item['value']))}")
        if data.get("footer"):
            lines.append(f"[dim]{escape(str(data['footer']))}[/dim]")
        title = escape(str(data["title"])) if data.get("title") else None
        self.console.print(Panel("\n".join(line for line in lines if line), title=title))
        return ConsoleMessage(content="", author=self.author, channel=self)


@dataclass
class ConsoleMessage:
    """A message typed into the console."""
    content: str
    author: ConsoleAuthor = field(default_factory=ConsoleAuthor)
    channel: ConsoleChannel = field(default_factory=ConsoleChannel)
    member: Any = None
    id: str = field(default_factory=lambda: str(next(_ids)))
