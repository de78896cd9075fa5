"""
Command signature parsing.

Splits message content into a command identifier and the raw argument
text that follows it, after stripping a matched prefix.

Examples:
    "!roll 2 d6" with prefix ^! -> identifier="roll", args=["2", "d6"]
    "<@42> help" with prefix ^<@!?42> -> identifier="help", args=[]
"""

import re
from dataclasses import dataclass, field

from wraith.errors import CommandParserError


_SIGNATURE = re.compile(r"^(\S+)\s*(.*)$", re.DOTALL)


@dataclass
class ParsedCommand:
    """A message split into its command parts."""
    raw: str  # Original message content
    trimmed: str  # Content with the prefix removed
    identifier: str
    args: list[str] = field(default_factory=list)
    raw_args: str = ""  # Everything after the identifier, as typed

    @property
    def arg(self) -> str:
        """Get first argument or empty string."""
        return self.args[0] if self.args else ""


def parse_command(content: str, prefix: re.Pattern[str] | None = None) -> ParsedCommand:
    """
    Parse message content into a command.

    Args:
        content: The message content.
        prefix: Pattern matched against the start of the content. The
            matched text is removed before splitting. Content the pattern
            does not match is parsed as-is.

    Returns:
        The parsed command.

    Raises:
        CommandParserError: If no identifier remains after the prefix.
    """
    if not isinstance(content, str):
        raise CommandParserError("Expected message content to be a string.")

    trimmed = content
    if prefix is not None:
        matched = prefix.match(content)
        if matched:
            trimmed = content[matched.end():]
    trimmed = trimmed.strip()

    signature = _SIGNATURE.match(trimmed)
    if not signature:
        raise CommandParserError(
            f"Message does not contain enough words to specify a command: '{content}'."
        )

    identifier, raw_args = signature.group(1), signature.group(2)
    return ParsedCommand(
        raw=content,
        trimmed=trimmed,
        identifier=identifier,
        args=raw_args.split(),
        raw_args=raw_args,
    )
