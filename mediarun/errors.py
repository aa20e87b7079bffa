"""
Error taxonomy for mediarun.

Every failure is terminal for the current invocation. None of them map to a
non-zero exit status: main catches them, reports, and returns normally.
"""

from __future__ import annotations


class MediarunError(Exception):
    """Base class for all mediarun failures."""


class UsageError(MediarunError):
    """Wrong number of command-line arguments."""


class MountResolutionError(MediarunError):
    """The location could not be mapped to an enclosing mount."""


class ProgramNotFound(MediarunError):
    """No autorun candidate exists under the mount root."""

    def __init__(self, message: str = "Unable to locate the program") -> None:
        super().__init__(message)


class ExecutionError(MediarunError):
    """Changing directory or replacing the process image failed."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Unable to start the program:\n{reason}")
