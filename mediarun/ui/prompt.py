"""
Consent prompt — ask whether to run the software found on a medium.

The prompt is modal: while it is open, the only things that can happen are
the user's answer and the medium going away. Both arrive through the same
Dispatcher, one turn at a time.

    “USB DISK” contains software intended to be automatically started.
    Would you like to run it?

    [r] Run   [c] Cancel
"""

from __future__ import annotations

import codecs
import os
import sys
from typing import IO

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from mediarun.dispatch import Dispatcher
from mediarun.session import AutorunSession
from mediarun.ui.theme import (
    COLOR_BRAND,
    COLOR_DIM,
    COLOR_TEXT,
    DEFAULT_MOUNT_ICON,
    ICON_EJECT,
    ICON_RUN,
    MOUNT_ICONS,
)


# ── Constants ─────────────────────────────────────────────────────────────────

_APPROVE_ANSWERS = frozenset(("r", "run", "y", "yes"))
_CANCEL_ANSWERS  = frozenset(("", "c", "cancel", "n", "no"))


def parse_answer(line: str) -> bool | None:
    """True for Run, False for Cancel, None if the answer is not understood."""
    answer = line.strip().lower()
    if answer in _APPROVE_ANSWERS:
        return True
    if answer in _CANCEL_ANSWERS:
        return False
    return None


def build_consent_panel(name: str, icon_name: str) -> Panel:
    icon = MOUNT_ICONS.get(icon_name, DEFAULT_MOUNT_ICON)

    body = Text()
    body.append(
        f"\n  “{name}” contains software intended to be automatically started.\n"
        "  Would you like to run it?\n\n",
        style=f"bold {COLOR_TEXT}",
    )
    body.append(
        "  If you don’t trust this location or aren’t sure, press Cancel.\n",
        style=COLOR_DIM,
    )

    return Panel(
        body,
        title=f"[bold]{icon}  {name}[/bold]",
        title_align="left",
        border_style=COLOR_BRAND,
        padding=(0, 1),
    )


# ── Prompt ────────────────────────────────────────────────────────────────────

class ConsentPrompt:
    """
    Terminal front end for an AutorunSession.

    Pass dismiss as the session's on_dismiss so a removal closes the prompt.
    """

    def __init__(
        self,
        console: Console,
        dispatcher: Dispatcher,
        stream: IO[str] | None = None,
    ) -> None:
        self.console = console
        self.dispatcher = dispatcher
        self.stream = stream if stream is not None else sys.stdin
        self.dismissed = False
        self._session: AutorunSession | None = None
        self._answered = False
        self._fd: int | None = None
        self._decoder: codecs.IncrementalDecoder | None = None
        self._pending = ""

    def present(self, session: AutorunSession) -> None:
        """Show the prompt and block (cooperatively) until the session ends."""
        self._session = session
        if session.done:
            return

        self.console.print()
        self.console.print(build_consent_panel(session.name, session.icon_name))
        self._ask()

        try:
            try:
                self.dispatcher.add_reader(self.stream, self._on_input)
            except (ValueError, OSError):
                # Not selectable (regular file, in-memory stream): input is
                # already complete, so reading it directly cannot block long.
                while not self._answered and not session.done:
                    self._on_input()
                return

            # Read the descriptor directly: a buffered text stream could
            # swallow already-typed lines where select() cannot see them.
            self._fd = self.stream.fileno()
            encoding = getattr(self.stream, "encoding", None) or "utf-8"
            self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")

            try:
                self.dispatcher.run()
            finally:
                self.dispatcher.remove_reader(self.stream)

        except KeyboardInterrupt:
            self.console.print("\n  [dim]Cancelled.[/dim]\n")
            session.cancel()

    def dismiss(self) -> None:
        """Close the prompt without any further action (medium removed)."""
        if self.dismissed:
            return
        self.dismissed = True
        name = self._session.name if self._session is not None else "The medium"
        self.console.print(
            f"\n  [dim]{ICON_EJECT}  “{name}” was removed. Nothing was run.[/dim]\n"
        )
        self.dispatcher.stop()

    # ── Internal ──────────────────────────────────────────────────────────────

    def _ask(self) -> None:
        self.console.print(
            f"  [bold]{ICON_RUN} \\[r] Run[/bold]   [dim]\\[c] Cancel[/dim]  ",
            end="",
        )

    def _on_input(self) -> None:
        session = self._session
        if session is None or session.done:
            self.dispatcher.stop()
            return

        for line in self._read_lines():
            self._handle_line(session, line)
            if self._answered or session.done:
                return

    def _read_lines(self) -> list[str]:
        """Complete lines available now; "" stands for end of input."""
        if self._fd is None or self._decoder is None:
            return [self.stream.readline()]

        data = os.read(self._fd, 4096)
        if not data:
            # Unterminated last line still counts; nothing left means EOF
            rest = self._pending + self._decoder.decode(b"", final=True)
            self._pending = ""
            return [rest]

        self._pending += self._decoder.decode(data)
        lines = self._pending.split("\n")
        self._pending = lines.pop()
        return [line + "\n" for line in lines]

    def _handle_line(self, session: AutorunSession, line: str) -> None:
        # EOF answers Cancel
        answer = parse_answer(line) if line else False
        if answer is None:
            self.console.print("  [dim]Please answer r (Run) or c (Cancel).[/dim]")
            self._ask()
            return

        self._answered = True
        self.dispatcher.stop()
        if answer:
            session.approve()
        else:
            self.console.print("\n  [dim]Cancelled.[/dim]\n")
            session.cancel()
