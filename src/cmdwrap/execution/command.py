"""
Command lifecycle.

A Command is both the declaration of an external program (through its
syntax-annotated fields) and the state machine that runs it exactly once:

    IDLE -> STARTING -> RUNNING -> COMPLETED
                           |
                           +-> CANCELLING -> COMPLETED
    STARTING -> FAILED  (syntax error, spawn error, start cancelled)

Every state transition happens under the instance lock, so concurrent calls
on the same instance are serialized. An instance is single-use: once it is
COMPLETED or FAILED it cannot be executed again.
"""

# Standard library imports
import subprocess
import threading
from concurrent.futures import Future
from enum import Enum
from typing import IO, Iterable, List, Optional

# Local imports
from ..config import get_config
from ..core.exceptions import CommandSyntaxError, InvocationError
from ..core.types import ProcessHandle, ProcessSpawner, SpawnRequest
from ..syntax.builder import SyntaxBuilder
from ..syntax.registry import get_syntax_levels
from ..utils.logger import get_logger
from .events import (
    CommandStartingEvent,
    EventHook,
    ExecuteCompletedEvent,
    OutputWrittenEvent,
)
from .process import get_default_spawner
from .start_info import CommandStartInfo

logger = get_logger(__name__)


class CommandState(Enum):
    """State of a command's single execution."""

    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    CANCELLING = "cancelling"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_active(self) -> bool:
        return self in (CommandState.STARTING, CommandState.RUNNING, CommandState.CANCELLING)

    @property
    def is_terminal(self) -> bool:
        return self in (CommandState.COMPLETED, CommandState.FAILED)


class Command:
    """Base class of every command.

    Subclasses declare their syntax with ``@command_syntax`` and their
    parameters with ``parameter()``. A subclass that defines its own
    ``__post_init__`` must call ``super().__post_init__()``.

    Events:
        command_starting: CommandStartingEvent, before assembly; may cancel
        output_written: OutputWrittenEvent for each standard output line
        error_written: OutputWrittenEvent for each standard error line
        execute_completed: ExecuteCompletedEvent after an execute_async run
    """

    def __init__(self):
        self.__post_init__()

    def __post_init__(self):
        self._lock = threading.RLock()
        self._state = CommandState.IDLE
        self._spawner: Optional[ProcessSpawner] = None
        self._process: Optional[ProcessHandle] = None
        self._readers: List[threading.Thread] = []
        self._stdout_lines: List[str] = []
        self._stderr_lines: List[str] = []
        self._standard_output: Optional[str] = None
        self._error_output: Optional[str] = None
        self._exit_code: Optional[int] = None
        self._pid: Optional[int] = None
        self._cancelled = False
        self._finished = threading.Event()

        self.command_starting: EventHook[CommandStartingEvent] = EventHook(
            "command_starting"
        )
        self.output_written: EventHook[OutputWrittenEvent] = EventHook("output_written")
        self.error_written: EventHook[OutputWrittenEvent] = EventHook("error_written")
        self.execute_completed: EventHook[ExecuteCompletedEvent] = EventHook(
            "execute_completed"
        )

    @property
    def state(self) -> CommandState:
        return self._state

    @property
    def is_executing(self) -> bool:
        return self._state.is_active

    @property
    def has_executed(self) -> bool:
        """Whether the command ran to completion. It cannot be executed again."""
        return self._state is CommandState.COMPLETED

    @property
    def was_cancelled(self) -> bool:
        return self._cancelled

    @property
    def exit_code(self) -> Optional[int]:
        return self._exit_code

    @property
    def pid(self) -> Optional[int]:
        return self._pid

    @property
    def standard_output(self) -> Optional[str]:
        """Everything the process wrote to standard output, once completed."""
        return self._standard_output

    @property
    def error_output(self) -> Optional[str]:
        """Everything the process wrote to standard error, once completed."""
        return self._error_output

    def use_spawner(self, spawner: ProcessSpawner) -> "Command":
        """Start this command's process with a specific spawner."""
        with self._lock:
            if self._state is not CommandState.IDLE:
                raise InvocationError(
                    "The spawner can only be changed before the command starts.",
                    command=self,
                )
            self._spawner = spawner
        return self

    def get_syntax(self, start_info: Optional[CommandStartInfo] = None) -> str:
        """Get the command line this command would run.

        Raises:
            CommandSyntaxError: If the command cannot be assembled
        """
        search_path = start_info.resolve_search_path() if start_info else None
        return str(SyntaxBuilder(self, search_path=search_path))

    def execute(self, start_info: Optional[CommandStartInfo] = None) -> int:
        """Execute the command and wait for it to exit.

        Args:
            start_info: Overrides for how the process is started

        Returns:
            The exit code of the process

        Raises:
            InvocationError: If the command is running or has already run
            CommandSyntaxError: If the command cannot be assembled
            OSError: If the process cannot be started
        """
        process = self._start(start_info)
        process.wait()
        return self._complete(process)

    def execute_async(self, start_info: Optional[CommandStartInfo] = None) -> Future:
        """Start the command and return without waiting for it.

        The process is spawned on the calling thread; waiting for it happens
        on a background thread. Once the process has exited and its output is
        captured, ``execute_completed`` is raised and the returned future
        resolves to the exit code.

        Raises:
            InvocationError: If the command is running or has already run
            CommandSyntaxError: If the command cannot be assembled
            OSError: If the process cannot be started
        """
        future: Future = Future()
        process = self._start(start_info)
        future.set_running_or_notify_cancel()
        waiter = threading.Thread(
            target=self._wait_in_background,
            args=(process, future),
            name=f"cmdwrap-wait-{process.pid}",
            daemon=True,
        )
        waiter.start()
        return future

    def cancel_async(self) -> None:
        """Request the running process to stop.

        Termination is requested first; if the process is still alive after
        ``cancel_timeout`` seconds it is killed. The command then completes
        normally with whatever exit code the process reports.

        Raises:
            InvocationError: If the command is not running
        """
        with self._lock:
            if self._state is not CommandState.RUNNING:
                logger.warning(
                    "Cancel requested for %s while %s",
                    type(self).__name__,
                    self._state.value,
                )
                raise InvocationError(
                    "Cannot cancel this command because it isn't running.",
                    command=self,
                )
            self._set_state(CommandState.CANCELLING)
            self._cancelled = True
            process = self._process

        terminator = threading.Thread(
            target=self._terminate,
            args=(process, get_config().cancel_timeout),
            name=f"cmdwrap-cancel-{process.pid}",
            daemon=True,
        )
        terminator.start()

    def wait_for_exit(self, timeout: Optional[float] = None) -> Optional[int]:
        """Wait until the command has completed.

        Returns:
            The exit code, or None if the timeout expired or the command failed

        Raises:
            InvocationError: If the command was never started
        """
        if self._state is CommandState.IDLE:
            raise InvocationError(
                "Cannot wait for this command because it was never started.",
                command=self,
            )
        self._finished.wait(timeout)
        return self._exit_code

    def write_to_standard_in(self, text: str) -> None:
        """Write text to the standard input of the running process.

        The write happens outside the instance lock, so a process that stops
        reading its input cannot block cancel_async.

        Raises:
            InvocationError: If the command is not running, standard input
                was not redirected or it was closed during the write
        """
        with self._lock:
            stdin = self._standard_input()
        self._write_standard_input(stdin, text)

    def write_line_to_standard_in(self, line: str) -> None:
        """Write text followed by a newline to standard input."""
        self.write_to_standard_in(f"{line}\n")

    def write_lines_to_standard_in(self, lines: Iterable[str]) -> None:
        """Write each item followed by a newline to standard input."""
        text = "".join(f"{line}\n" for line in lines)
        with self._lock:
            stdin = self._standard_input()
        self._write_standard_input(stdin, text)

    def close_standard_input(self) -> None:
        """Close standard input so the process sees end of file.

        Does nothing when there is no open standard input.
        """
        with self._lock:
            if self._process is not None:
                self._close_stdin(self._process)

    def _set_state(self, state: CommandState) -> None:
        logger.debug(
            "%s: %s -> %s", type(self).__name__, self._state.value, state.value
        )
        self._state = state
        if state.is_terminal:
            self._finished.set()

    def _check_can_start(self) -> None:
        if self._state.is_active:
            raise InvocationError(
                "Cannot execute this command because it is already running.",
                command=self,
            )
        if self._state.is_terminal:
            raise InvocationError(
                "This command has already been executed.", command=self
            )

    def _start(self, start_info: Optional[CommandStartInfo]) -> ProcessHandle:
        start_info = start_info or CommandStartInfo()
        config = get_config()

        with self._lock:
            try:
                self._check_can_start()
            except InvocationError:
                logger.warning(
                    "Execute requested for %s while %s",
                    type(self).__name__,
                    self._state.value,
                )
                raise

            event = CommandStartingEvent(command=self, start_info=start_info)
            self.command_starting.emit(event)
            if event.cancel:
                self._set_state(CommandState.FAILED)
                raise InvocationError(
                    "The start of this command was cancelled.", command=self
                )

            self._set_state(CommandState.STARTING)
            try:
                builder = SyntaxBuilder(
                    self,
                    search_path=start_info.resolve_search_path(),
                    max_length=config.max_argument_length,
                )
            except CommandSyntaxError as e:
                logger.debug("Could not assemble %s: %s", type(self).__name__, e)
                self._set_state(CommandState.FAILED)
                raise

            request = SpawnRequest(
                executable=builder.executable,
                arguments=builder.arguments,
                working_directory=start_info.resolve_working_directory(
                    get_syntax_levels(self)
                ),
                environment=start_info.environment,
                redirect_standard_input=start_info.redirect_standard_input,
                encoding=config.encoding,
                encoding_errors=config.encoding_errors,
                user_name=start_info.user_name,
                create_no_window=start_info.create_no_window,
                window_style=start_info.window_style.value,
                creation_flags=start_info.creation_flags,
            )

            ignored = [
                name
                for name in ("domain", "password", "load_user_profile")
                if getattr(start_info, name)
            ]
            if ignored:
                logger.warning("Ignoring unsupported start options: %s", ", ".join(ignored))

            spawner = self._spawner or get_default_spawner()
            try:
                process = spawner.spawn(request)
            except Exception as e:
                logger.error("Failed to start %s: %s", builder, e)
                self._set_state(CommandState.FAILED)
                raise

            self._process = process
            self._pid = process.pid
            self._start_readers(process)
            self._set_state(CommandState.RUNNING)

        logger.info("Started process %s: %s", process.pid, builder)
        return process

    def _start_readers(self, process: ProcessHandle) -> None:
        streams = (
            (process.stdout, self._stdout_lines, self.output_written, "stdout"),
            (process.stderr, self._stderr_lines, self.error_written, "stderr"),
        )
        self._readers = []
        for stream, lines, hook, name in streams:
            if stream is None:
                continue
            reader = threading.Thread(
                target=self._read_stream,
                args=(stream, lines, hook, name),
                name=f"cmdwrap-{name}-{process.pid}",
                daemon=True,
            )
            reader.start()
            self._readers.append(reader)

    def _read_stream(
        self, stream: IO[str], lines: List[str], hook: EventHook, name: str
    ) -> None:
        """Read a stream line by line into a buffer, raising an event per line."""
        try:
            for line in iter(stream.readline, ""):
                if self._state.is_terminal:
                    # Completed without waiting for this stream
                    break
                text = line.rstrip("\r\n")
                lines.append(f"{text}\n")
                try:
                    hook.emit(OutputWrittenEvent(command=self, line=text, stream=name))
                except Exception:
                    logger.exception("Error in %s handler", hook.name)
        except (OSError, ValueError) as e:
            logger.error("Error reading %s: %s", name, e)
        finally:
            stream.close()

    def _complete(self, process: ProcessHandle) -> int:
        """Capture output and the exit code, then release the process.

        After a cancel, a pipe can stay open past the process's exit when a
        grandchild inherited it. Readers then get ``cancel_timeout`` seconds
        to drain and the command completes with the output read so far.
        """
        timeout = get_config().cancel_timeout if self._cancelled else None
        for reader in self._readers:
            reader.join(timeout)
            if reader.is_alive():
                logger.warning(
                    "%s still open %.1fs after process %s was cancelled, "
                    "completing without the rest of its output",
                    reader.name,
                    timeout,
                    process.pid,
                )

        with self._lock:
            self._close_stdin(process)
            self._standard_output = "".join(list(self._stdout_lines))
            self._error_output = "".join(list(self._stderr_lines))
            self._exit_code = process.returncode
            self._process = None
            self._readers = []
            self._set_state(CommandState.COMPLETED)

        logger.info(
            "Process %s %s with exit code %s",
            process.pid,
            "was cancelled" if self._cancelled else "exited",
            self._exit_code,
        )
        return self._exit_code

    def _wait_in_background(self, process: ProcessHandle, future: Future) -> None:
        try:
            process.wait()
            exit_code = self._complete(process)
        except Exception as e:
            logger.error("Waiting for process %s failed: %s", process.pid, e)
            with self._lock:
                self._set_state(CommandState.FAILED)
            future.set_exception(e)
            return

        try:
            self.execute_completed.emit(
                ExecuteCompletedEvent(
                    command=self, exit_code=exit_code, cancelled=self._cancelled
                )
            )
        except Exception:
            logger.exception("Error in execute_completed handler")
        future.set_result(exit_code)

    def _terminate(self, process: ProcessHandle, timeout: float) -> None:
        try:
            process.terminate()
            process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning(
                "Process %s did not exit %.1fs after terminate, killing it",
                process.pid,
                timeout,
            )
            process.kill()
        except OSError as e:
            # The process may have exited on its own in the meantime
            logger.debug("Could not terminate process %s: %s", process.pid, e)

    def _standard_input(self) -> IO[str]:
        if self._state is not CommandState.RUNNING:
            raise InvocationError(
                "Standard input can only be written while the command is running.",
                command=self,
            )
        stdin = self._process.stdin
        if stdin is None or stdin.closed:
            raise InvocationError(
                "Standard input is not open for this command. Start it with "
                "CommandStartInfo(redirect_standard_input=True).",
                command=self,
            )
        return stdin

    def _write_standard_input(self, stdin: IO[str], text: str) -> None:
        try:
            stdin.write(text)
            stdin.flush()
        except (BrokenPipeError, ValueError) as e:
            # The process exited or its input was closed meanwhile
            raise InvocationError(
                "Standard input was closed while writing.", command=self
            ) from e

    def _close_stdin(self, process: ProcessHandle) -> None:
        stdin = process.stdin
        if stdin is None or stdin.closed:
            return
        try:
            stdin.close()
        except OSError as e:
            # Broken pipe when the process exited without reading its input
            logger.debug("Error closing standard input: %s", e)
