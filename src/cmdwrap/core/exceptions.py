"""
Custom exceptions for cmdwrap.

The exception hierarchy is organized as follows:

- CmdWrapError: Base exception for all cmdwrap errors
  - CommandSyntaxError: A command could not be assembled into a command line
  - InvocationError: A lifecycle operation conflicts with the command's state
  - ConfigurationError: A configuration value is invalid

A non-zero exit code is not an error: it is returned as a normal result and
callers decide what counts as failure. Errors raised by the operating system
while spawning a process (e.g. executable not found) propagate unchanged.
"""


class CmdWrapError(Exception):
    """Base exception class for cmdwrap."""

    pass


class CommandSyntaxError(CmdWrapError):
    """Raised when a command cannot be assembled into a command line.

    Always raised before any process is spawned.
    """

    def __init__(self, message: str, syntax=None, cause: Exception = None):
        self.syntax = syntax
        self.cause = cause
        super().__init__(message)


class InvocationError(CmdWrapError):
    """Raised when a command is executed, cancelled or written to in a state
    that does not allow it."""

    def __init__(self, message: str, command=None):
        self.command = command
        super().__init__(message)


class ConfigurationError(CmdWrapError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message)
