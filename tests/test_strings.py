"""Tests for command-line string helpers."""

# Third-party imports
import pytest

# Local/package imports
from cmdwrap.utils.strings import (
    escape_spaces,
    expand_environment,
    split_arguments,
    strip_quotes,
)


def test_escape_spaces():
    assert escape_spaces("plain") == "plain"
    assert escape_spaces("two words") == '"two words"'
    assert escape_spaces("") == ""


def test_expand_environment(monkeypatch):
    monkeypatch.setenv("CMDWRAP_TEST_DIR", "/data")

    assert expand_environment("%CMDWRAP_TEST_DIR%/in") == "/data/in"
    assert expand_environment("$CMDWRAP_TEST_DIR/in") == "/data/in"
    assert expand_environment("${CMDWRAP_TEST_DIR}/in") == "/data/in"


def test_unknown_variables_are_left_alone(monkeypatch):
    monkeypatch.delenv("CMDWRAP_UNSET", raising=False)

    assert expand_environment("%CMDWRAP_UNSET%") == "%CMDWRAP_UNSET%"
    assert expand_environment("$CMDWRAP_UNSET") == "$CMDWRAP_UNSET"
    assert expand_environment("100%") == "100%"


def test_strip_quotes():
    assert strip_quotes('"/opt/My Apps/tool"') == "/opt/My Apps/tool"
    assert strip_quotes("tool") == "tool"
    assert strip_quotes('"') == '"'


class TestSplitArguments:
    def test_plain_arguments(self):
        assert split_arguments("-a --b=1 c") == ["-a", "--b=1", "c"]
        assert split_arguments("") == []
        assert split_arguments("  a   b  ") == ["a", "b"]

    def test_apostrophes_and_backslashes_are_literal(self):
        """Values are never shell-lexed."""
        assert split_arguments("it's") == ["it's"]
        assert split_arguments("C:\\dir\\file") == ["C:\\dir\\file"]

    def test_quoted_values_are_unwrapped(self):
        assert split_arguments('-m "fix the bug"') == ["-m", "fix the bug"]
        assert split_arguments('"a b" "c d"') == ["a b", "c d"]

    def test_quoted_value_after_a_prefix(self):
        assert split_arguments('--git-dir="My Repo"') == ["--git-dir=My Repo"]

    def test_quotes_inside_a_quoted_value_are_kept(self):
        assert split_arguments('"say "hi""') == ['say "hi"']
        assert split_arguments('"a" "b"') == ['a" "b']

    def test_quotes_that_wrap_no_space_are_kept(self):
        """escape_spaces never quotes text without a space."""
        assert split_arguments('"hi"') == ['"hi"']
        assert split_arguments('it"s more') == ['it"s', "more"]

    @pytest.mark.parametrize(
        "values",
        [
            ["it's", "C:\\dir\\file"],
            ["two words", 'say "hi"', "plain"],
            ['"quoted"', "plain"],
            ["a  b", "x"],
        ],
    )
    def test_inverts_escape_spaces(self, values):
        arguments = " ".join(escape_spaces(value) for value in values)

        assert split_arguments(arguments) == values
