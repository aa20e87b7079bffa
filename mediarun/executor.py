"""
Executor — replace the current process with the autorun program.

execute() does not return on success. On failure it raises ExecutionError
carrying the OS error text; the caller reports it and exits.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from mediarun.errors import ExecutionError
from mediarun.resolver import AutorunCandidate

logger = logging.getLogger(__name__)


def execute(candidate: AutorunCandidate, cwd: Path | None = None) -> None:
    """
    chdir into cwd (default: the candidate's working directory), then exec.

    argv[0] is the executable path itself; the optional argument follows.
    """
    cwd = cwd if cwd is not None else candidate.working_directory

    try:
        os.chdir(cwd)
    except OSError as e:
        raise ExecutionError(e.strerror or str(e)) from e

    logger.debug("exec %s in %s", candidate.argv, cwd)

    # Buffered output would be lost with the old image
    sys.stdout.flush()
    sys.stderr.flush()

    try:
        os.execv(candidate.executable_path, candidate.argv)
    except OSError as e:
        raise ExecutionError(e.strerror or str(e)) from e
