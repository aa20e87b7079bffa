"""
Tests for ui/report.py — error surface.
"""

from io import StringIO
from unittest.mock import patch

from rich.console import Console

from mediarun.errors import ExecutionError, ProgramNotFound
from mediarun.ui.report import ERROR_TITLE, show_error


def _console() -> tuple[Console, StringIO]:
    """Return a Console that captures output in a StringIO buffer."""
    buf = StringIO()
    con = Console(file=buf, highlight=False, no_color=True, width=100)
    return con, buf


class TestShowError:
    def test_program_not_found(self):
        con, buf = _console()
        show_error(ProgramNotFound(), con, acknowledge=False)
        out = buf.getvalue()
        assert ERROR_TITLE in out
        assert "Unable to locate the program" in out

    def test_execution_error_shows_os_text(self):
        con, buf = _console()
        show_error(ExecutionError("Permission denied"), con, acknowledge=False)
        out = buf.getvalue()
        assert "Unable to start the program:" in out
        assert "Permission denied" in out

    def test_acknowledge_shows_ok_menu(self):
        con, _ = _console()
        with patch("mediarun.ui.report.TerminalMenu") as menu:
            show_error(ProgramNotFound(), con, acknowledge=True)
        menu.assert_called_once()
        assert menu.call_args.args[0] == ["OK"]
        menu.return_value.show.assert_called_once()

    def test_no_menu_when_stdin_is_not_a_tty(self):
        con, _ = _console()
        with patch("mediarun.ui.report.sys.stdin") as stdin, \
             patch("mediarun.ui.report.TerminalMenu") as menu:
            stdin.isatty.return_value = False
            show_error(ProgramNotFound(), con)
        menu.assert_not_called()
