"""
cmdwrap - Declarative wrappers for external programs.

Describe a program as a class whose fields carry command-line syntax, then
execute it synchronously or asynchronously and read its captured output:

    @command_syntax("echo")
    class Echo(Command):
        text: Optional[str] = parameter("{arg}")

    echo = Echo(text="hello")
    exit_code = echo.execute()
    print(echo.standard_output)

The version information is read from the package metadata when the
distribution is installed.
"""

from importlib import metadata as importlib_metadata
from importlib.metadata import PackageNotFoundError

# Local/package imports
from .config import CmdWrapConfig, clear_config, get_config
from .core import (
    CmdWrapError,
    CommandLine,
    CommandSyntaxError,
    ConfigurationError,
    InvocationError,
)
from .execution import (
    Command,
    CommandStartInfo,
    CommandStartingEvent,
    CommandState,
    ExecuteCompletedEvent,
    OutputWrittenEvent,
    SubprocessSpawner,
    WindowStyle,
    set_default_spawner,
)
from .syntax import (
    CommandSyntax,
    Parameter,
    ParameterSyntax,
    SyntaxBuilder,
    build_syntax,
    command_syntax,
    parameter,
    register_formatter,
)
from .utils.logger import configure_logging, get_logger, set_logger

# Configure package-level logger
package_logger = get_logger(__name__)

__version__ = "0.0.0"
__title__ = "cmdwrap"
__author__ = ""
__license__ = ""


def get_metadata():
    """Extract version and metadata from package distribution when available."""

    global __version__, __title__, __author__, __license__

    try:
        _meta = importlib_metadata.metadata("cmdwrap")
    except PackageNotFoundError:
        return ["__version__", "__title__", "__author__", "__license__"]

    __version__ = _meta.get("Version", __version__)
    __title__ = _meta.get("Name", __title__)
    __author__ = _meta.get("Author", __author__)
    __license__ = _meta.get("License", __license__)

    return ["__version__", "__title__", "__author__", "__license__"]


__all__ = get_metadata() + [
    "CmdWrapConfig",
    "clear_config",
    "get_config",
    "CmdWrapError",
    "CommandLine",
    "CommandSyntaxError",
    "ConfigurationError",
    "InvocationError",
    "Command",
    "CommandStartInfo",
    "CommandStartingEvent",
    "CommandState",
    "ExecuteCompletedEvent",
    "OutputWrittenEvent",
    "SubprocessSpawner",
    "WindowStyle",
    "set_default_spawner",
    "CommandSyntax",
    "Parameter",
    "ParameterSyntax",
    "SyntaxBuilder",
    "build_syntax",
    "command_syntax",
    "parameter",
    "register_formatter",
    "configure_logging",
    "get_logger",
    "set_logger",
]
