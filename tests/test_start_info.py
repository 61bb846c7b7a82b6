"""Tests for CommandStartInfo."""

# Third-party imports
import pytest
from pydantic import ValidationError

# Local/package imports
from cmdwrap.execution import Command, CommandStartInfo, WindowStyle
from cmdwrap.syntax import command_syntax, get_syntax_levels


@command_syntax("tool", default_working_directory="/srv/tool")
class Tool(Command):
    pass


@command_syntax("sub", default_working_directory="$CMDWRAP_TEST_ROOT/sub")
class ToolSub(Tool):
    pass


@command_syntax("other")
class ToolOther(Tool):
    pass


def test_defaults():
    start_info = CommandStartInfo()

    assert start_info.path is None
    assert start_info.working_directory is None
    assert start_info.environment is None
    assert start_info.redirect_standard_input is False
    assert start_info.window_style is WindowStyle.NORMAL
    assert start_info.creation_flags == 0


def test_unknown_fields_are_rejected():
    with pytest.raises(ValidationError):
        CommandStartInfo(working_dir="/tmp")


def test_empty_strings_are_rejected():
    """Empty overrides are errors rather than silently meaning no override."""
    with pytest.raises(ValidationError):
        CommandStartInfo(working_directory="   ")

    with pytest.raises(ValidationError):
        CommandStartInfo(path="")


def test_negative_creation_flags_are_rejected():
    with pytest.raises(ValidationError):
        CommandStartInfo(creation_flags=-1)


def test_window_style_from_string():
    assert CommandStartInfo(window_style="hidden").window_style is WindowStyle.HIDDEN


def test_password_is_not_shown():
    """The password stays out of repr."""
    start_info = CommandStartInfo(user_name="builder", password="hunter2")

    assert "hunter2" not in repr(start_info)
    assert start_info.password.get_secret_value() == "hunter2"


class TestSearchPath:
    def test_no_override(self):
        assert CommandStartInfo().resolve_search_path() is None

    def test_override_is_expanded(self, monkeypatch):
        monkeypatch.setenv("CMDWRAP_TEST_ROOT", "/opt")

        start_info = CommandStartInfo(path="$CMDWRAP_TEST_ROOT/bin")

        assert start_info.resolve_search_path() == "/opt/bin"


class TestWorkingDirectory:
    def test_explicit_value_wins(self):
        start_info = CommandStartInfo(working_directory="/work")

        assert start_info.resolve_working_directory(get_syntax_levels(ToolSub)) == "/work"

    def test_most_derived_default_is_used(self, monkeypatch):
        """The deepest level declaring a working directory wins."""
        monkeypatch.setenv("CMDWRAP_TEST_ROOT", "/srv")

        directory = CommandStartInfo().resolve_working_directory(
            get_syntax_levels(ToolSub)
        )

        assert directory == "/srv/sub"

    def test_falls_back_to_base_default(self):
        directory = CommandStartInfo().resolve_working_directory(
            get_syntax_levels(ToolOther)
        )

        assert directory == "/srv/tool"

    def test_none_without_defaults(self):
        assert CommandStartInfo().resolve_working_directory(()) is None

    def test_explicit_value_is_expanded(self, monkeypatch):
        monkeypatch.setenv("CMDWRAP_TEST_ROOT", "/data")

        start_info = CommandStartInfo(working_directory="%CMDWRAP_TEST_ROOT%/jobs")

        assert start_info.resolve_working_directory(()) == "/data/jobs"
