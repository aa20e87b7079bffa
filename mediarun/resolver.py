"""
Autorun candidate resolution.

Probes the mount root for, in this order (first match wins):

  .autorun     — must be executable, run directly
  autorun      — must be executable, run directly
  autorun.sh   — existence only, run by the shell interpreter

The order follows the freedesktop.org autostart convention and must not
change. A probe that fails for any reason (missing file, permission denied,
I/O error) counts as "not there".
"""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path

from mediarun.config import DEFAULT_SHELL

logger = logging.getLogger(__name__)


# ── Data model ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AutorunCandidate:
    executable_path: Path           # absolute
    argument: str | None            # only set for the autorun.sh case
    working_directory: Path         # the mount root

    @property
    def argv(self) -> list[str]:
        """argv for exec: program name first, then the optional argument."""
        args = [str(self.executable_path)]
        if self.argument is not None:
            args.append(self.argument)
        return args


# ── Probing ───────────────────────────────────────────────────────────────────

def _check_file(root: Path, name: str, must_be_executable: bool) -> bool:
    """
    Return True if root/name is a regular file (and executable, if required).

    Only the immediate child is inspected. Any OSError reads as absence.
    """
    child = root / name
    try:
        st = child.stat()
    except OSError:
        return False

    if not stat.S_ISREG(st.st_mode):
        return False

    if must_be_executable and not os.access(child, os.X_OK):
        return False

    return True


# ── Public API ────────────────────────────────────────────────────────────────

def resolve(root: Path, shell: str = DEFAULT_SHELL) -> AutorunCandidate | None:
    """
    Return the AutorunCandidate for a mount root, or None when nothing matches.

    shell is the interpreter used for autorun.sh (default /bin/sh).
    """
    root = Path(os.path.abspath(root))

    for name in (".autorun", "autorun"):
        if _check_file(root, name, must_be_executable=True):
            logger.debug("Autorun program found: %s", root / name)
            return AutorunCandidate(root / name, None, root)

    if _check_file(root, "autorun.sh", must_be_executable=False):
        logger.debug("Autorun script found: %s (via %s)", root / "autorun.sh", shell)
        return AutorunCandidate(Path(shell), str(root / "autorun.sh"), root)

    logger.debug("No autorun program under %s", root)
    return None
