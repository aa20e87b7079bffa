"""
Mount subsystem adapter.

MountHandle    — non-owning view of one mounted volume (root, name, icon hint).
Subscription   — removal-notification registration; release() is idempotent.
MountMonitor   — re-reads the mount table and fires removal notifications.
find_enclosing_mount() — map a command-line location to its MountHandle.

The mount table comes from psutil.disk_partitions(), which lists physical
devices only. A location resolves only to a mount living under one of
MEDIA_ROOTS; the system root and anything else raise MountResolutionError.
Liveness is polled: whoever owns the event loop calls MountMonitor.poll()
periodically.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable
from urllib.parse import unquote, urlparse

import psutil

from mediarun.errors import MountResolutionError

logger = logging.getLogger(__name__)


UnmountedCallback = Callable[["MountHandle"], None]

ICON_REMOVABLE = "media-removable"
ICON_OPTICAL = "media-optical"
ICON_FIXED = "drive-harddisk"

# Where desktop automounters (udisks, fstab conventions) put user media
MEDIA_ROOTS = (Path("/media"), Path("/run/media"), Path("/mnt"))

_OPTICAL_FSTYPES = frozenset(("iso9660", "udf"))
_SYS_CLASS_BLOCK = Path("/sys/class/block")


# ── Subscription ──────────────────────────────────────────────────────────────

class Subscription:
    """A single removal-notification registration on a MountHandle."""

    def __init__(self, mount: "MountHandle", callback: UnmountedCallback) -> None:
        self._mount = mount
        self._callback = callback
        self.active = True

    def release(self) -> None:
        """Disconnect the callback. Safe to call any number of times."""
        if not self.active:
            return
        self.active = False
        self._mount._subscriptions.discard(self)
        logger.debug("Released unmount subscription on %s", self._mount.root)

    def _fire(self) -> None:
        if self.active:
            self._callback(self._mount)


# ── MountHandle ───────────────────────────────────────────────────────────────

class MountHandle:
    """
    A mounted volume as seen from the mount table.

    Created by the caller before a session starts; becomes unmounted
    asynchronously when the monitor no longer sees its (device, mountpoint).
    """

    def __init__(
        self, device: str, mountpoint: str, opts: str = "", fstype: str = ""
    ) -> None:
        self.device = device
        self.root = Path(mountpoint)
        self.opts = opts
        self.fstype = fstype
        self.alive = True
        self._subscriptions: set[Subscription] = set()

    @property
    def name(self) -> str:
        """Display name — last component of the mount point, or the device."""
        return self.root.name or os.path.basename(self.device) or str(self.root)

    @property
    def icon_name(self) -> str:
        """Freedesktop icon name: optical, removable, or fixed drive."""
        if self.fstype in _OPTICAL_FSTYPES:
            return ICON_OPTICAL
        options = {o.strip() for o in self.opts.split(",")}
        # "removable" only shows up in Windows mount options
        if "removable" in options or _is_removable_device(self.device):
            return ICON_REMOVABLE
        return ICON_FIXED

    @property
    def key(self) -> tuple[str, str]:
        return self.device, str(self.root)

    def connect_unmounted(self, callback: UnmountedCallback) -> Subscription:
        """Register callback for removal; returns the owning Subscription."""
        sub = Subscription(self, callback)
        self._subscriptions.add(sub)
        return sub

    def mark_unmounted(self) -> None:
        """Transition to unmounted and notify each live subscriber once."""
        if not self.alive:
            return
        self.alive = False
        logger.debug("Mount %s (%s) went away", self.root, self.device)
        for sub in list(self._subscriptions):
            sub._fire()
            sub.release()

    def __repr__(self) -> str:
        return f"MountHandle(device={self.device!r}, root={str(self.root)!r})"


def _is_removable_device(device: str) -> bool:
    """
    Ask sysfs whether the block device behind device is removable.

    Partitions have no removable attribute of their own; it lives on the
    parent disk, one directory up from the partition's real sysfs path.
    """
    node = _SYS_CLASS_BLOCK / os.path.basename(device)
    try:
        node = node.resolve(strict=True)
    except OSError:
        return False

    for candidate in (node / "removable", node.parent / "removable"):
        try:
            return candidate.read_text().strip() == "1"
        except OSError:
            continue
    return False


def _is_media_mount(mount: MountHandle) -> bool:
    return any(media == mount.root or media in mount.root.parents for media in MEDIA_ROOTS)


# ── Mount table ───────────────────────────────────────────────────────────────

def _mount_table() -> list[MountHandle]:
    """Return a fresh MountHandle for every entry in the system mount table."""
    return [
        MountHandle(p.device, p.mountpoint, p.opts, p.fstype)
        for p in psutil.disk_partitions(all=False)
    ]


def location_to_path(location: str) -> Path:
    """
    Turn a command-line location into an absolute path.

    Accepts plain paths (relative ones resolve against the cwd) and
    file:// URIs. Any other scheme raises MountResolutionError.
    """
    if "://" in location:
        parsed = urlparse(location)
        if parsed.scheme != "file":
            raise MountResolutionError(
                f"Unable to find device for URI: unsupported scheme '{parsed.scheme}'"
            )
        if parsed.netloc not in ("", "localhost"):
            raise MountResolutionError(
                f"Unable to find device for URI: remote host '{parsed.netloc}'"
            )
        return Path(os.path.normpath(unquote(parsed.path) or "/"))
    return Path(os.path.abspath(os.path.expanduser(location)))


def find_enclosing_mount(location: str) -> MountHandle:
    """
    Return the media mount whose mount point is the longest prefix of location.

    Only mounts under MEDIA_ROOTS count, so a location that only the system
    root (or another fixed mount) encloses raises MountResolutionError.
    """
    path = location_to_path(location)

    best: MountHandle | None = None
    for mount in _mount_table():
        if not _is_media_mount(mount):
            continue
        if path != mount.root and mount.root not in path.parents:
            continue
        if best is None or len(mount.root.parts) > len(best.root.parts):
            best = mount

    if best is None:
        raise MountResolutionError(f"Unable to find device for URI: no mount contains {path}")

    logger.debug("Location %s resolved to %r", path, best)
    return best


# ── Monitor ───────────────────────────────────────────────────────────────────

class MountMonitor:
    """
    Tracks watched MountHandles and notifies subscribers on removal.

    poll() is the only place removal notifications originate, so they are
    delivered on whichever loop turn calls it.
    """

    def __init__(self, table: Callable[[], list[MountHandle]] = _mount_table) -> None:
        self._table = table
        self._watched: list[MountHandle] = []

    def watch(self, mount: MountHandle) -> None:
        if mount not in self._watched:
            self._watched.append(mount)

    def poll(self) -> None:
        if not self._watched:
            return
        try:
            present = {m.key for m in self._table()}
        except (OSError, psutil.Error) as e:
            # An unreadable mount table is not evidence of removal
            logger.debug("Mount table read failed: %s", e)
            return

        for mount in list(self._watched):
            if mount.key not in present:
                self._watched.remove(mount)
                mount.mark_unmounted()
