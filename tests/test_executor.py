"""
Tests for executor.py.

os.chdir and os.execv are patched wherever success would change the test
process; failures are exercised for real where that is harmless.
"""

import errno
from pathlib import Path
from unittest.mock import call, patch

import pytest

from mediarun.errors import ExecutionError
from mediarun.executor import execute
from mediarun.resolver import AutorunCandidate


# ── Helpers ──────────────────────────────────────────────────────────────────

def _candidate(root: Path, argument: str | None = None, exe: str = ".autorun") -> AutorunCandidate:
    return AutorunCandidate(root / exe, argument, root)


# ── Success path ──────────────────────────────────────────────────────────────

class TestExecute:
    def test_chdir_then_exec_without_argument(self, tmp_path):
        with patch("mediarun.executor.os.chdir") as chdir, \
             patch("mediarun.executor.os.execv") as execv:
            execute(_candidate(tmp_path), tmp_path)
        chdir.assert_called_once_with(tmp_path)
        execv.assert_called_once_with(
            tmp_path / ".autorun", [str(tmp_path / ".autorun")]
        )

    def test_exec_passes_single_argument(self, tmp_path):
        script = str(tmp_path / "autorun.sh")
        candidate = AutorunCandidate(Path("/bin/sh"), script, tmp_path)
        with patch("mediarun.executor.os.chdir"), \
             patch("mediarun.executor.os.execv") as execv:
            execute(candidate, tmp_path)
        execv.assert_called_once_with(Path("/bin/sh"), ["/bin/sh", script])

    def test_cwd_defaults_to_working_directory(self, tmp_path):
        with patch("mediarun.executor.os.chdir") as chdir, \
             patch("mediarun.executor.os.execv"):
            execute(_candidate(tmp_path))
        assert chdir.call_args == call(tmp_path)

    def test_chdir_happens_before_exec(self, tmp_path):
        order = []
        with patch("mediarun.executor.os.chdir", side_effect=lambda p: order.append("chdir")), \
             patch("mediarun.executor.os.execv", side_effect=lambda *a: order.append("exec")):
            execute(_candidate(tmp_path), tmp_path)
        assert order == ["chdir", "exec"]


# ── Failure path ──────────────────────────────────────────────────────────────

class TestExecuteFailures:
    def test_chdir_failure_raises_with_os_text(self, tmp_path):
        missing = tmp_path / "gone"
        with patch("mediarun.executor.os.execv") as execv:
            with pytest.raises(ExecutionError) as exc_info:
                execute(_candidate(missing), missing)
        execv.assert_not_called()
        assert exc_info.value.reason == "No such file or directory"
        assert str(exc_info.value).startswith("Unable to start the program:\n")

    def test_exec_failure_raises_with_os_text(self, tmp_path):
        with patch("mediarun.executor.os.chdir"), \
             patch(
                 "mediarun.executor.os.execv",
                 side_effect=OSError(errno.ENOEXEC, "Exec format error"),
             ):
            with pytest.raises(ExecutionError) as exc_info:
                execute(_candidate(tmp_path), tmp_path)
        assert exc_info.value.reason == "Exec format error"

    def test_exec_of_missing_program_raises(self, tmp_path):
        # execv on a missing file fails before the image is replaced
        with patch("mediarun.executor.os.chdir"):
            with pytest.raises(ExecutionError) as exc_info:
                execute(_candidate(tmp_path, exe="no-such-program"), tmp_path)
        assert "No such file or directory" in str(exc_info.value)
