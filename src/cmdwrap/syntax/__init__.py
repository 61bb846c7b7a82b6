"""Command syntax declaration and assembly."""

from .builder import SyntaxBuilder, build_syntax
from .descriptors import PLACEHOLDER, CommandSyntax, ParameterSyntax
from .formatters import (
    CommaSeparatedParameter,
    FormatterRegistry,
    clear_formatter_registry,
    get_formatter_registry,
    register_formatter,
)
from .parameter import Parameter
from .registry import (
    FieldBinding,
    SyntaxLevel,
    command_syntax,
    get_syntax_levels,
    parameter,
    register_command,
)

__all__ = [
    "PLACEHOLDER",
    "CommandSyntax",
    "ParameterSyntax",
    "Parameter",
    "CommaSeparatedParameter",
    "FormatterRegistry",
    "clear_formatter_registry",
    "get_formatter_registry",
    "register_formatter",
    "FieldBinding",
    "SyntaxLevel",
    "command_syntax",
    "get_syntax_levels",
    "parameter",
    "register_command",
    "SyntaxBuilder",
    "build_syntax",
]
