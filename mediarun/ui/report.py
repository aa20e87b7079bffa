"""
Error surface — the only user-visible output besides the consent prompt.

Shows a red panel and, on a terminal, waits for an OK acknowledgement so
the message is not lost when the program exits right after.
"""

from __future__ import annotations

import sys

from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from simple_term_menu import TerminalMenu

from mediarun.errors import MediarunError
from mediarun.ui.theme import COLOR_CRITICAL, COLOR_DIM, COLOR_TEXT, ICON_ERROR

ERROR_TITLE = "Oops! There was a problem running this software."


def build_error_panel(error: MediarunError) -> Panel:
    body = Text()
    body.append(f"\n  {ICON_ERROR}  {ERROR_TITLE}\n\n", style=f"bold {COLOR_TEXT}")
    for line in str(error).splitlines():
        body.append(f"  {line}\n", style=COLOR_DIM)
    return Panel(body, border_style=COLOR_CRITICAL, padding=(0, 1))


def show_error(error: MediarunError, console: Console, acknowledge: bool | None = None) -> None:
    """
    Print the error panel, then wait for OK if stdin is a terminal.

    acknowledge overrides the terminal detection (tests pass False).
    """
    console.print()
    console.print(build_error_panel(error))

    if acknowledge is None:
        acknowledge = sys.stdin.isatty()
    if not acknowledge:
        console.print()
        return

    menu = TerminalMenu(
        ["OK"],
        menu_cursor="› ",
        menu_cursor_style=("fg_red", "bold"),
        menu_highlight_style=("fg_red", "bold"),
        cursor_index=0,
    )
    menu.show()
    console.print()
