"""
Shared pytest fixtures.
"""
import logging

import pytest

from mediarun.mounts import MountHandle


@pytest.fixture(autouse=True)
def reset_mediarun_logger():
    """Prevent handlers installed by setup_logging() leaking between tests."""
    yield
    root = logging.getLogger("mediarun")
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True


@pytest.fixture
def mount_root(tmp_path):
    """An empty directory standing in for a medium's root."""
    root = tmp_path / "USB DISK"
    root.mkdir()
    return root


@pytest.fixture
def mount(mount_root):
    return MountHandle("/dev/sdz1", str(mount_root), "rw,nosuid,removable")
