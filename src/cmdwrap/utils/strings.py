"""String helpers for building command lines."""

# Standard library imports
import os
import re
from typing import List

# Windows style %VAR% references; $VAR and ${VAR} are handled by os.path.expandvars
_PERCENT_VARIABLE = re.compile(r"%([A-Za-z_][A-Za-z0-9_()]*)%")


def escape_spaces(text: str) -> str:
    """Wrap text in double quotes if it contains a space.

    Nothing else is escaped: embedded quotes and backslashes pass through
    unchanged.

    Args:
        text: Text to escape

    Returns:
        The text, quoted when it contains a space
    """
    if " " in text:
        return f'"{text}"'
    return text


def expand_environment(text: str) -> str:
    """Expand environment variable references in text.

    Supports ``$VAR``, ``${VAR}`` and ``%VAR%``. Unknown variables are left
    untouched.
    """

    def replace(match: re.Match) -> str:
        return os.environ.get(match.group(1), match.group(0))

    return os.path.expandvars(_PERCENT_VARIABLE.sub(replace, text))


def strip_quotes(text: str) -> str:
    """Remove one pair of surrounding double quotes, if present."""
    if len(text) >= 2 and text[0] == text[-1] == '"':
        return text[1:-1]
    return text


def _closing_quote(text: str, start: int) -> int:
    """Find the quote closing a span opened at ``start``, or -1.

    The closing quote ends a token (it is followed by a space or the end of
    the text) and the span it closes contains a space, since escape_spaces
    only quotes text containing one.
    """
    end = text.find('"', start + 1)
    while end != -1:
        ends_token = end + 1 == len(text) or text[end + 1] == " "
        if ends_token and " " in text[start + 1 : end]:
            return end
        end = text.find('"', end + 1)
    return -1


def split_arguments(arguments: str) -> List[str]:
    """Split an argument string built with escape_spaces back into arguments.

    Arguments are separated by spaces outside a quoted span, and the quotes
    wrapping a span are removed. Every other character, including quotes
    that do not wrap a span, apostrophes and backslashes, is kept literally:
    ``-m "fix it" it's`` splits into ``-m``, ``fix it`` and ``it's``.
    """
    tokens: List[str] = []
    current: List[str] = []
    in_token = False
    index = 0
    while index < len(arguments):
        char = arguments[index]
        if char == " ":
            if in_token:
                tokens.append("".join(current))
                current = []
                in_token = False
            index += 1
            continue

        in_token = True
        if char == '"':
            end = _closing_quote(arguments, index)
            if end != -1:
                current.append(arguments[index + 1 : end])
                index = end + 1
                continue
        current.append(char)
        index += 1

    if in_token:
        tokens.append("".join(current))
    return tokens
