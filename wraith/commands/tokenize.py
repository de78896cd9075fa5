"""Shell-like splitting of argument text."""

import shlex


def split_arguments(text: str) -> list[str]:
    """
    Split text into tokens using shell-like quoting.

    Single and double quotes group words; quotes of the other kind inside a
    quoted token are kept literally. Backslashes and '#' carry no special
    meaning.

    Examples:
        'a "b c" d' -> ['a', 'b c', 'd']
        "'nested \"quotes\"'" -> ['nested "quotes"']

    Raises:
        ValueError: If a quote is left unclosed.
    """
    lexer = shlex.shlex(text, posix=True)
    lexer.commenters = ""
    lexer.escape = ""
    lexer.whitespace_split = True
    return list(lexer)
