"""
Tests for subprocess/arguments.py.

Tests socket path substitution into the child command line.
"""

import pytest

from fcgishim.exceptions import ArgumentSubstitutionError, StartupError
from fcgishim.subprocess.arguments import PLACEHOLDER, substitute_arguments

SOCK = "/tmp/fcgi-shim-abc/backend.sock"


@pytest.mark.unit
class TestSubstituteArguments:
    """Test substitute_arguments."""

    def test_placeholder_replaced(self):
        """The argument carrying the placeholder receives the path."""
        argv = substitute_arguments(["app", "--listen", PLACEHOLDER], SOCK)

        assert argv == ["app", "--listen", SOCK]

    def test_path_appended_without_placeholder(self):
        """Commands without the placeholder get the path as last argument."""
        argv = substitute_arguments(["app", "--debug"], SOCK)

        assert argv == ["app", "--debug", SOCK]

    def test_program_only(self):
        """A bare program name still receives the path."""
        assert substitute_arguments(["app"], SOCK) == ["app", SOCK]

    def test_placeholder_inside_argument(self):
        """Only the placeholder text is replaced, the rest is kept."""
        argv = substitute_arguments(["app", f"--listen=unix:{PLACEHOLDER}"], SOCK)

        assert argv == ["app", f"--listen=unix:{SOCK}"]

    def test_repeated_placeholder_in_one_argument(self):
        """Every occurrence inside the single matched argument is replaced."""
        argv = substitute_arguments(["app", f"{PLACEHOLDER},{PLACEHOLDER}"], SOCK)

        assert argv == ["app", f"{SOCK},{SOCK}"]

    def test_placeholder_in_two_arguments_rejected(self):
        """The placeholder may appear in at most one argument."""
        with pytest.raises(ArgumentSubstitutionError) as exc_info:
            substitute_arguments(["app", PLACEHOLDER, f"--x={PLACEHOLDER}"], SOCK)

        assert exc_info.value.context["arguments"] == "1,2"

    def test_empty_command_rejected(self):
        """An empty command cannot be started."""
        with pytest.raises(ArgumentSubstitutionError):
            substitute_arguments([], SOCK)

    def test_input_not_modified(self):
        """The caller's list is left as it was."""
        command = ["app", PLACEHOLDER]
        substitute_arguments(command, SOCK)

        assert command == ["app", PLACEHOLDER]

    def test_error_is_startup_error(self):
        """Substitution failures abort startup."""
        assert issubclass(ArgumentSubstitutionError, StartupError)
