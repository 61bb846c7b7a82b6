"""
Syntax builder.

Turns a registered command instance into its executable path and argument
string:

1. The root level supplies the executable path. Every later level adds its
   own template as a leading sub-command token (``git`` -> ``git commit``).
2. Every level contributes the parameters declared on it.
3. Parameters from all levels are stable-sorted, higher ordering first.
4. Sub-command tokens come first, then the non-empty parameter renderings,
   joined with single spaces.
"""

# Standard library imports
from typing import Any, List, Optional

# Local imports
from ..config import get_config
from ..core.exceptions import CommandSyntaxError
from ..core.types import CommandLine
from ..utils.logger import get_logger
from ..utils.strings import escape_spaces, expand_environment
from .formatters import FormatterRegistry, get_formatter_registry
from .parameter import Parameter
from .registry import FieldBinding, get_syntax_levels

logger = get_logger(__name__)


class SyntaxBuilder:
    """Builds the command-line representation of a command.

    The syntax is assembled on construction; any problem raises
    CommandSyntaxError before a process could be spawned.
    """

    def __init__(
        self,
        command: Any,
        search_path: Optional[str] = None,
        max_length: Optional[int] = None,
        formatters: Optional[FormatterRegistry] = None,
    ):
        """Initialize and assemble.

        Args:
            command: A registered command instance
            search_path: Overrides the root level's default path
            max_length: Maximum argument length, from configuration if omitted
            formatters: Formatter registry, the global one if omitted

        Raises:
            CommandSyntaxError: If the command cannot be assembled
        """
        self.command = command
        self.search_path = search_path
        self.max_length = (
            max_length if max_length is not None else get_config().max_argument_length
        )
        self.formatters = formatters or get_formatter_registry()
        self.executable = ""
        self.arguments = ""
        self._build()

    def __str__(self) -> str:
        return str(self.command_line)

    @property
    def command_line(self) -> CommandLine:
        return CommandLine(self.executable, self.arguments)

    def _build(self) -> None:
        levels = get_syntax_levels(self.command)
        if not levels:
            raise CommandSyntaxError(
                f"{type(self.command).__name__} does not declare a command syntax. "
                "Decorate the class with @command_syntax."
            )

        root, *sub_commands = levels
        self.executable = root.syntax.full_path(self.search_path)

        tokens = [
            escape_spaces(expand_environment(level.syntax.template))
            for level in sub_commands
        ]

        parameters: List[Parameter] = []
        for level in levels:
            for binding in level.fields:
                parameters.append(self._create_parameter(binding))

        # sorted() is stable: ties keep level order, then declaration order
        for parameter in sorted(parameters):
            rendered = parameter.render()
            if rendered:
                tokens.append(rendered)

        arguments = " ".join(token for token in tokens if token).strip()
        if len(arguments) > self.max_length:
            raise CommandSyntaxError(
                f"The arguments of this command are {len(arguments)} characters "
                f"long. Process arguments are limited to {self.max_length} "
                "characters."
            )
        self.arguments = arguments

        logger.debug(
            "Built syntax for %s: %s",
            type(self.command).__name__,
            self.command_line,
        )

    def _create_parameter(self, binding: FieldBinding) -> Parameter:
        syntax = binding.syntax
        if not binding.nullable:
            raise CommandSyntaxError(
                f"The type of parameter '{binding.name}' isn't nullable. All fields "
                "declared with parameter() must accept None; consider "
                "annotating it as Optional[...].",
                syntax=syntax,
            )

        value = binding.read(self.command)
        if value is None and syntax.required:
            raise CommandSyntaxError(
                f"Parameter '{binding.name}' is required but no value was given.",
                syntax=syntax,
            )

        return self.formatters.create(syntax, value)


def build_syntax(command: Any, search_path: Optional[str] = None) -> CommandLine:
    """Assemble a command into its executable and argument string.

    Raises:
        CommandSyntaxError: If the command cannot be assembled
    """
    return SyntaxBuilder(command, search_path=search_path).command_line
