"""
Command declaration and registration.

Commands are declared as classes whose fields carry parameter syntax:

    @command_syntax("git")
    class Git(Command):
        git_dir: Optional[str] = parameter("--git-dir={arg}")

    @command_syntax("commit")
    class GitCommit(Git):
        message: Optional[str] = parameter("-m {arg}", required=True)

Registering a class builds, once, the ordered tuple of syntax levels the
builder walks: the levels of the nearest registered base class followed by
the class's own level. Assembly never inspects classes; it only reads the
registered levels and the bound field values.
"""

# Standard library imports
import dataclasses
import inspect
import operator
import threading
import types
import typing
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple, Union

# Local imports
from ..utils.logger import get_logger
from .descriptors import CommandSyntax, ParameterSyntax

logger = get_logger(__name__)

# Key of the ParameterSyntax in a dataclass field's metadata
SYNTAX_METADATA_KEY = "cmdwrap.parameter_syntax"

_registry: Dict[type, Tuple["SyntaxLevel", ...]] = {}
_registry_lock = threading.Lock()


@dataclass(frozen=True)
class FieldBinding:
    """A parameter field declared on a command class.

    Attributes:
        name: Attribute name on the command instance
        syntax: The field's parameter syntax
        nullable: Whether the declared type can hold None
    """

    name: str
    syntax: ParameterSyntax
    nullable: bool = True
    accessor: Callable[[Any], Any] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if self.accessor is None:
            object.__setattr__(self, "accessor", operator.attrgetter(self.name))

    def read(self, command: Any) -> Any:
        """Read the field's current value from a command instance."""
        return self.accessor(command)


@dataclass(frozen=True)
class SyntaxLevel:
    """One level of a command's syntax: its executable or sub-command
    syntax and the parameter fields declared at that level."""

    command_type: type
    syntax: CommandSyntax
    fields: Tuple[FieldBinding, ...] = ()


def parameter(
    template: str,
    ordering: int = 0,
    required: bool = False,
    formatter: Optional[str] = None,
    default_factory: Optional[Callable[[], Any]] = None,
) -> Any:
    """Declare a parameter field on a command class.

    The field defaults to None (or to ``default_factory()``) and its
    annotation must allow None, e.g. ``Optional[str]``.

    Args:
        template: Parameter text, optionally containing ``{arg}``
        ordering: Parameters with a higher ordering are emitted earlier
        required: Whether a None value is an error at assembly time
        formatter: Identifier of a registered formatter
        default_factory: Factory for a mutable default such as ``list``
    """
    metadata = {
        SYNTAX_METADATA_KEY: ParameterSyntax(
            template=template,
            ordering=ordering,
            required=required,
            formatter=formatter,
        )
    }
    if default_factory is not None:
        return field(default_factory=default_factory, metadata=metadata)
    return field(default=None, metadata=metadata)


def is_nullable(annotation: Any) -> bool:
    """Check whether a type annotation can represent None."""
    if annotation in (Any, object, None, type(None)):
        return True
    if isinstance(annotation, str):
        # Unresolved forward reference
        return any(token in annotation for token in ("Optional", "None", "Any"))

    origin = typing.get_origin(annotation)
    if origin is typing.Annotated:
        return is_nullable(typing.get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        return any(is_nullable(arg) for arg in typing.get_args(annotation))
    return False


def _resolve_hints(cls: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        logger.debug("Could not resolve type hints for %s", cls.__qualname__)
        return {}


def _declaring_classes(cls: type, stop: Optional[type]) -> Tuple[type, ...]:
    """Classes whose own fields belong to cls's level, base-most first.

    This is cls plus any unregistered classes between it and the nearest
    registered base.
    """
    classes = []
    for klass in cls.__mro__:
        if klass is stop or klass is object:
            break
        classes.append(klass)
    return tuple(reversed(classes))


def register_command(cls: type, syntax: CommandSyntax) -> type:
    """Register a command class with its executable syntax.

    Converts the class into a dataclass if needed and records its syntax
    levels.

    Args:
        cls: The command class
        syntax: Executable or sub-command syntax of the class

    Returns:
        The registered class
    """
    parent = next((base for base in cls.__mro__[1:] if base in _registry), None)
    parent_levels = _registry[parent] if parent is not None else ()
    declaring_classes = _declaring_classes(cls, parent)

    # Unregistered intermediate classes must become dataclasses too, or
    # their parameter fields would never be collected
    for klass in declaring_classes:
        if klass is cls or inspect.get_annotations(klass):
            if "__dataclass_fields__" not in klass.__dict__:
                dataclass(eq=False)(klass)

    hints = _resolve_hints(cls)
    dataclass_fields = {f.name: f for f in dataclasses.fields(cls)}
    bindings = []
    for klass in declaring_classes:
        for name, annotation in inspect.get_annotations(klass).items():
            data_field = dataclass_fields.get(name)
            if data_field is None or SYNTAX_METADATA_KEY not in data_field.metadata:
                continue
            bindings.append(
                FieldBinding(
                    name=name,
                    syntax=data_field.metadata[SYNTAX_METADATA_KEY],
                    nullable=is_nullable(hints.get(name, annotation)),
                )
            )

    level = SyntaxLevel(command_type=cls, syntax=syntax, fields=tuple(bindings))
    with _registry_lock:
        _registry[cls] = parent_levels + (level,)

    logger.debug(
        "Registered command %s (%d levels, %d parameters)",
        cls.__qualname__,
        len(parent_levels) + 1,
        len(bindings),
    )
    return cls


def command_syntax(
    template: str,
    default_path: Optional[str] = None,
    default_working_directory: Optional[str] = None,
) -> Callable[[type], type]:
    """Class decorator declaring the executable (or sub-command) of a command.

    Example:
        @command_syntax("cmd.exe", default_path="%windir%\\system32")
        class CommandPrompt(Command):
            option: Optional[Mode] = parameter("/{arg}")
    """
    syntax = CommandSyntax(
        template=template,
        default_path=default_path,
        default_working_directory=default_working_directory,
    )

    def decorator(cls: type) -> type:
        return register_command(cls, syntax)

    return decorator


def get_syntax_levels(command: Any) -> Tuple[SyntaxLevel, ...]:
    """Get the registered syntax levels of a command class or instance.

    An unregistered subclass of a registered command uses the levels of its
    nearest registered base class; parameter fields it declares itself are
    not part of the syntax until it is decorated.

    Returns:
        Levels from the root executable down to the most derived registered
        class, or an empty tuple if no class in the hierarchy was registered
    """
    command_type = command if isinstance(command, type) else type(command)
    for klass in command_type.__mro__:
        levels = _registry.get(klass)
        if levels is not None:
            return levels
    return ()
