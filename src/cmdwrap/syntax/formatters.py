"""
Formatter registry.

A formatter is a factory called with ``(ParameterSyntax, value)`` that
returns a Parameter. ParameterSyntax.formatter names the factory to use; when
it is None the default Parameter is used.
"""

# Standard library imports
from typing import Any, Callable, Dict, Optional, Union

# Local imports
from ..core.exceptions import CommandSyntaxError
from ..utils.logger import get_logger
from ..utils.strings import escape_spaces
from .descriptors import ParameterSyntax
from .parameter import Parameter, is_collection

logger = get_logger(__name__)

FormatterFactory = Callable[[ParameterSyntax, Any], Parameter]

_formatter_registry = None


def get_formatter_registry() -> "FormatterRegistry":
    """Get the global formatter registry, creating it on first use."""
    global _formatter_registry
    if _formatter_registry is None:
        _formatter_registry = FormatterRegistry()
        _formatter_registry.register("comma", CommaSeparatedParameter)
    return _formatter_registry


def clear_formatter_registry() -> None:
    """Drop the global registry so it is rebuilt with only the built-ins."""
    global _formatter_registry
    _formatter_registry = None


class FormatterRegistry:
    """Maps formatter identifiers to parameter factories."""

    def __init__(self):
        self._factories: Dict[str, FormatterFactory] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._factories

    def register(
        self,
        name: str,
        factory: Union[FormatterFactory, type],
        replace: bool = False,
    ) -> None:
        """Register a formatter.

        Args:
            name: Identifier used in ParameterSyntax.formatter
            factory: A Parameter subclass, or a callable taking
                ``(syntax, value)`` and returning a Parameter
            replace: Allow overwriting an existing registration

        Raises:
            ValueError: If the name is already registered and replace is False
        """
        if not name:
            raise ValueError("Formatter name must not be empty")
        if name in self._factories and not replace:
            raise ValueError(f"Formatter already registered: {name}")
        if isinstance(factory, type) and issubclass(factory, Parameter):
            factory = factory.from_syntax
        self._factories[name] = factory
        logger.debug("Registered formatter %s", name)

    def unregister(self, name: str) -> None:
        self._factories.pop(name, None)

    def get(self, name: str) -> Optional[FormatterFactory]:
        return self._factories.get(name)

    def create(self, syntax: ParameterSyntax, value: Any) -> Parameter:
        """Create the parameter for a descriptor and its bound value.

        Raises:
            CommandSyntaxError: If the formatter is unknown, fails to build a
                parameter, or builds something that is not a Parameter
        """
        if syntax.formatter is None:
            return Parameter.from_syntax(syntax, value)

        factory = self._factories.get(syntax.formatter)
        if factory is None:
            raise CommandSyntaxError(
                f"Unknown formatter '{syntax.formatter}' for parameter "
                f"'{syntax.template}'",
                syntax=syntax,
            )

        try:
            parameter = factory(syntax, value)
        except Exception as e:
            raise CommandSyntaxError(
                f"Could not create a parameter with formatter '{syntax.formatter}'. "
                "Formatters must be constructible from a descriptor and a value.",
                syntax=syntax,
                cause=e,
            ) from e

        if not isinstance(parameter, Parameter):
            raise CommandSyntaxError(
                f"Formatter '{syntax.formatter}' returned "
                f"{type(parameter).__name__}, expected a Parameter",
                syntax=syntax,
            )
        return parameter


def register_formatter(name: str, replace: bool = False) -> Callable:
    """Decorator registering a Parameter subclass or factory function.

    Example:
        @register_formatter("upper")
        class UpperParameter(Parameter):
            def render(self) -> str:
                return super().render().upper()
    """

    def decorator(factory):
        get_formatter_registry().register(name, factory, replace=replace)
        return factory

    return decorator


class CommaSeparatedParameter(Parameter):
    """Joins collection items with commas instead of spaces.

    ``--tags {arg}`` with ``["a", "b c"]`` renders ``--tags a,"b c"``.
    """

    def render(self) -> str:
        if self.value is None or not is_collection(self.value):
            return super().render()
        items = (str(item) for item in self.value if item is not None)
        return self.substitute(",".join(escape_spaces(item) for item in items if item))
