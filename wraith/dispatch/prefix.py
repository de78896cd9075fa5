"""
Prefix filters.

Decide whether a message is addressed to the bot and which leading text
to strip before parsing. A prefix may be configured as:
- a plain string, matched literally at the start of the content
- "@client", matching a mention of the bot (<@id> or <@!id>)
- "@me:<text>", matching only the bot's own messages starting with <text>
- a compiled pattern, re-anchored at the start of the content
- a callable (sync or async) receiving the message and returning a falsy
  value to drop it, True to accept it as-is, or a string/pattern prefix
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from wraith.middleware.compose import resolve


PrefixType = str | re.Pattern[str] | Callable[[Any], Any]

_NO_PREFIX = re.compile("")
_CLIENT_PREFIX = re.compile(r"^@client$", re.IGNORECASE)
_SELF_PREFIX = re.compile(r"^@me:(.+)$", re.IGNORECASE | re.DOTALL)


class PrefixFilter(ABC):
    """Tests messages against a prefix."""

    # Messages from the bot itself pass only through filters that allow it
    allows_self: bool = False

    @abstractmethod
    async def test(self, message: Any) -> re.Pattern[str] | None:
        """
        Test a message.

        Returns:
            The pattern to strip from the content, or None if the message
            does not pass the filter.
        """


class RegexFilter(PrefixFilter):
    """Filters messages by an anchored pattern."""

    def __init__(self, pattern: re.Pattern[str]):
        if not isinstance(pattern, re.Pattern):
            raise TypeError("Expected filter to be a compiled pattern.")
        self.pattern = pattern

    async def test(self, message: Any) -> re.Pattern[str] | None:
        return self.pattern if self.pattern.match(message.content) else None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.pattern.pattern!r})"


class MentionFilter(RegexFilter):
    """Filters messages that start by mentioning the bot."""

    def __init__(self, self_id: str):
        if not self_id:
            raise ValueError("A mention prefix requires the bot's own user id.")
        self.self_id = self_id
        super().__init__(re.compile(rf"^<@!?{re.escape(self_id)}>"))


class DeferredFilter(PrefixFilter):
    """Filters messages through a closure."""

    def __init__(self, closure: Callable[[Any], Any], allows_self: bool = False):
        if not callable(closure):
            raise TypeError("Expected filter to be a function.")
        self.closure = closure
        self.allows_self = allows_self

    async def test(self, message: Any) -> re.Pattern[str] | None:
        result = await resolve(self.closure(message))
        if not result:
            return None
        if result is True:
            return _NO_PREFIX
        if isinstance(result, re.Pattern):
            return _anchor(result)
        if isinstance(result, str):
            return re.compile("^" + re.escape(result))
        raise TypeError(
            f"Prefix closure must return a bool, string or pattern, got {type(result).__name__}."
        )


def _anchor(pattern: re.Pattern[str]) -> re.Pattern[str]:
    if pattern.pattern.startswith("^"):
        return pattern
    return re.compile(f"^(?:{pattern.pattern})", pattern.flags)


def create_prefix_filter(prefix: PrefixType, self_id: str = "") -> PrefixFilter:
    """
    Build a prefix filter from a configured prefix.

    Args:
        prefix: The configured prefix.
        self_id: The bot's own user id, needed for "@client" and "@me:".

    Raises:
        TypeError: If the prefix is of an unsupported type.
        ValueError: If a mention prefix is given without a user id.
    """
    if isinstance(prefix, str):
        text = prefix.strip()
        if _CLIENT_PREFIX.match(text):
            return MentionFilter(self_id)

        matched = _SELF_PREFIX.match(text)
        if matched:
            if not self_id:
                raise ValueError("A self prefix requires the bot's own user id.")
            self_pattern = re.compile("^" + re.escape(matched.group(1)))

            def own_messages(message: Any) -> re.Pattern[str] | bool:
                if str(message.author.id) != self_id:
                    return False
                return self_pattern if self_pattern.match(message.content) else False

            return DeferredFilter(own_messages, allows_self=True)

        if not text:
            raise ValueError("Prefix cannot be empty.")
        return RegexFilter(re.compile("^" + re.escape(text)))

    if isinstance(prefix, re.Pattern):
        return RegexFilter(_anchor(prefix))

    if callable(prefix):
        return DeferredFilter(prefix)

    raise TypeError("Prefix should be a string, pattern or function.")
