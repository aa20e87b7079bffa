"""
Autorun session — the consent state machine for one mount.

  AWAITING_CONSENT ──approve──▶ APPROVED    (resolve, then exec)
                   ──cancel───▶ TERMINATED  (nothing happens)
                   ──removal──▶ UNMOUNTED   (prompt dismissed, nothing runs)

All three targets are terminal. The removal subscription is taken when the
session is created and released on the first transition out of
AWAITING_CONSENT, whichever it is. Events arriving in a terminal state are
ignored.

Events are expected on a single dispatcher thread: whichever of approve()
and the removal notification is processed first wins.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import Callable

from mediarun.config import DEFAULT_SHELL
from mediarun.errors import ExecutionError, MediarunError, ProgramNotFound
from mediarun.executor import execute
from mediarun.mounts import MountHandle
from mediarun.resolver import AutorunCandidate, resolve

logger = logging.getLogger(__name__)


Resolver = Callable[[Path, str], "AutorunCandidate | None"]
Executor = Callable[[AutorunCandidate, Path], None]
ErrorReporter = Callable[[MediarunError], None]


class SessionState(enum.Enum):
    AWAITING_CONSENT = "awaiting_consent"
    UNMOUNTED = "unmounted"
    APPROVED = "approved"
    TERMINATED = "terminated"


class AutorunSession:
    """
    One consent flow for one mount.

    Args:
        mount:        The mount being offered. Its name and icon hint are read
                      once, here.
        report_error: Called with ProgramNotFound / ExecutionError after an
                      approval that could not run anything.
        on_dismiss:   Called once when removal ends the session, so the
                      presentation layer can close its prompt.
        resolver:     resolve(root, shell) -> AutorunCandidate | None.
        executor:     execute(candidate, cwd); does not return on success.
        shell:        Interpreter for autorun.sh.
    """

    def __init__(
        self,
        mount: MountHandle,
        report_error: ErrorReporter,
        on_dismiss: Callable[[], None] | None = None,
        resolver: Resolver = resolve,
        executor: Executor = execute,
        shell: str = DEFAULT_SHELL,
    ) -> None:
        self.mount = mount
        self.name = mount.name
        self.icon_name = mount.icon_name
        self.state = SessionState.AWAITING_CONSENT

        self._report_error = report_error
        self._on_dismiss = on_dismiss
        self._resolver = resolver
        self._executor = executor
        self._shell = shell

        self._subscription = mount.connect_unmounted(self._on_unmounted)

        # Removed before we even subscribed
        if not mount.alive:
            self._on_unmounted(mount)

    # ── State ─────────────────────────────────────────────────────────────────

    @property
    def done(self) -> bool:
        return self.state is not SessionState.AWAITING_CONSENT

    def _transition(self, new_state: SessionState) -> bool:
        """Leave AWAITING_CONSENT for new_state. False if already terminal."""
        if self.done:
            logger.debug("Ignoring %s: session already %s", new_state.value, self.state.value)
            return False
        logger.debug("Session %s → %s", self.state.value, new_state.value)
        self.state = new_state
        self._subscription.release()
        return True

    # ── Events ────────────────────────────────────────────────────────────────

    def approve(self) -> None:
        """User chose Run. Resolves and executes; errors go to report_error."""
        if not self._transition(SessionState.APPROVED):
            return

        root = self.mount.root
        candidate = self._resolver(root, self._shell)
        if candidate is None:
            self._report_error(ProgramNotFound())
            return

        try:
            self._executor(candidate, root)
        except ExecutionError as e:
            logger.debug("Execution failed: %s", e.reason)
            self._report_error(e)

    def cancel(self) -> None:
        """User chose Cancel."""
        self._transition(SessionState.TERMINATED)

    def _on_unmounted(self, mount: MountHandle) -> None:
        if not self._transition(SessionState.UNMOUNTED):
            return
        if self._on_dismiss is not None:
            self._on_dismiss()
