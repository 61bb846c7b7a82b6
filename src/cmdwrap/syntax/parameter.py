"""
Command parameters.

A Parameter binds one ParameterSyntax to one runtime value and renders itself
into command-line text. Parameters are created fresh for every assembly pass
and never mutated; they copy what they need from their descriptor so they can
be sorted independently of it.

Rendering rules by value type:

- None: the parameter is omitted (empty string).
- bool without ``{arg}`` in the template: the template if True, omitted if
  False.
- bool with ``{arg}``: the placeholder becomes ``true`` or ``false``.
- Enum member: the placeholder becomes the member name, unescaped.
- Iterable other than str/bytes/mappings: every non-empty item is converted
  with str(), quoted if it contains a space, and the items are joined with
  single spaces.
- Anything else: str(value), quoted if it contains a space.

The rendered token is stripped of surrounding whitespace.
"""

# Standard library imports
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

# Local imports
from ..utils.strings import escape_spaces
from .descriptors import PLACEHOLDER, ParameterSyntax


def is_collection(value: Any) -> bool:
    return isinstance(value, Iterable) and not isinstance(
        value, (str, bytes, bytearray, Mapping)
    )


@dataclass(frozen=True)
class Parameter:
    """A parameter of a command bound to its current value.

    Subclass and override ``render()`` to customise how a value is written,
    then register the subclass with ``register_formatter``.
    """

    template: str
    ordering: int = 0
    required: bool = False
    value: Any = None

    @classmethod
    def from_syntax(cls, syntax: ParameterSyntax, value: Any) -> "Parameter":
        """Create a parameter from its descriptor and bound value."""
        return cls(
            template=syntax.template,
            ordering=syntax.ordering,
            required=syntax.required,
            value=value,
        )

    def __lt__(self, other: "Parameter") -> bool:
        # "less than" means "emitted earlier": higher ordering comes first
        if not isinstance(other, Parameter):
            return NotImplemented
        return self.ordering > other.ordering

    def __str__(self) -> str:
        return self.render()

    @property
    def has_placeholder(self) -> bool:
        return PLACEHOLDER in self.template

    def substitute(self, text: str) -> str:
        """Replace the placeholder with text and trim the result."""
        return self.template.replace(PLACEHOLDER, text).strip()

    def render(self) -> str:
        """Render this parameter as command-line text.

        Returns:
            The rendered token, or an empty string when the parameter is omitted
        """
        value = self.value
        if value is None:
            return ""

        if isinstance(value, bool):
            if not self.has_placeholder:
                return self.template.strip() if value else ""
            return self.substitute("true" if value else "false")

        if isinstance(value, Enum):
            return self.substitute(value.name if value.name is not None else str(value))

        if is_collection(value):
            items = (str(item) for item in value if item is not None)
            return self.substitute(" ".join(escape_spaces(item) for item in items if item))

        return self.substitute(escape_spaces(str(value)))
